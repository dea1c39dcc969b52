"""
API tests for the cart, the promo code and the locations
"""


def add_pad(client, quantity=2):
    return client.post("/cart/items", json={"id": "pad-a", "name": "Pad A", "price": 10.0, "quantity": quantity})


def test_get_location_canada(client):
    response = client.get("/api/locations/CA")
    assert response.status_code == 200

    body = response.get_json()
    assert "Ontario" in body["regions"]
    assert body["currencySymbol"] == "CAD $"
    assert body["shippingOptions"][0]["id"] == "standard"


def test_get_location_unknown_country(client):
    response = client.get("/api/locations/FR")
    assert response.status_code == 404
    assert response.get_json()["errors"]["country"]["code"] == "not-found"


def test_empty_cart(client):
    response = client.get("/cart")
    assert response.status_code == 200
    assert response.get_json() == {"cart": {"items": [], "subtotal": 0, "promo": None}}


def test_add_item(client):
    response = add_pad(client)
    assert response.status_code == 201

    cart = response.get_json()["cart"]
    assert cart["items"] == [{"id": "pad-a", "name": "Pad A", "price": 10.0, "quantity": 2}]
    assert cart["subtotal"] == 20.0


def test_add_item_missing_fields(client):
    response = client.post("/cart/items", json={"id": "pad-a"})
    assert response.status_code == 422
    assert response.get_json() == {
        "errors": {
            "item": {
                "code": "missing-fields",
                "name": "One or more required fields are missing",
            }
        }
    }


def test_add_item_zero_quantity(client):
    response = add_pad(client, quantity=0)
    assert response.status_code == 422
    assert response.get_json()["errors"]["item"]["code"] == "invalid-quantity"


def test_add_item_negative_price(client):
    response = client.post("/cart/items", json={"id": "pad-a", "name": "Pad A", "price": -1, "quantity": 2})
    assert response.status_code == 422
    assert response.get_json()["errors"]["item"] == {
        "code": "invalid-price",
        "name": "Price cannot be negative",
    }
    assert client.get("/cart").get_json()["cart"]["items"] == []


def test_update_and_remove_item(client):
    add_pad(client)

    response = client.put("/cart/items/pad-a", json={"quantity": 5})
    assert response.get_json()["cart"]["items"][0]["quantity"] == 5

    response = client.delete("/cart/items/pad-a")
    assert response.get_json()["cart"]["items"] == []


def test_update_item_requires_quantity(client):
    add_pad(client)
    response = client.put("/cart/items/pad-a", json={})
    assert response.status_code == 422


def test_apply_and_remove_promo(client):
    add_pad(client)

    response = client.post("/cart/promo", json={"code": "welcome10"})
    assert response.status_code == 200
    assert response.get_json()["cart"]["promo"] == {"code": "WELCOME10", "discount": 10.0}

    response = client.post("/cart/promo", json={"code": "SAVE20"})
    assert response.get_json()["cart"]["promo"] == {"code": "SAVE20", "discount": 20.0}

    response = client.delete("/cart/promo")
    assert response.get_json()["cart"]["promo"] is None


def test_invalid_promo_keeps_active_code(client):
    client.post("/cart/promo", json={"code": "WELCOME10"})

    response = client.post("/cart/promo", json={"code": "BOGUS"})
    assert response.status_code == 422
    assert response.get_json()["errors"]["promo"]["code"] == "invalid-code"

    assert client.get("/cart").get_json()["cart"]["promo"]["code"] == "WELCOME10"
