"""
Tests for the order e-mails
"""
import pytest
import requests

from storefront.notifications import NotificationError, send_order_emails


def placed_order():
    return {
        "orderId": "ABC123XYZ",
        "date": "2024-06-15T12:00:00+00:00",
        "items": [{"id": "pad-a", "name": "Pad A", "price": 10.0, "quantity": 2}],
        "total": 27.6,
        "currency": "CAD",
        "customerDetails": {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane@example.com",
            "phone": "",
            "address": "12 King Street",
            "country": "CA",
            "region": "Ontario",
        },
    }


class FakeResponse:
    def __init__(self, status_code=200, text="ok"):
        self.status_code = status_code
        self.text = text


def test_sends_customer_then_admin_email(app, monkeypatch):
    calls = []

    def fake_post(url, payload, timeout=10):
        calls.append((url, payload))
        return FakeResponse()

    monkeypatch.setattr("storefront.notifications.http_post_json", fake_post)

    with app.app_context():
        send_order_emails(placed_order(), "http://mail.test/send", "admin@example.com")

    assert len(calls) == 2
    (customer_url, customer_mail), (_, admin_mail) = calls
    assert customer_url == "http://mail.test/send"
    assert customer_mail["to"] == ["jane@example.com"]
    assert customer_mail["subject"] == "Order Confirmation - #ABC123XYZ"
    assert "Dear Jane Doe" in customer_mail["html"]
    assert "CAD $27.60" in customer_mail["html"]
    assert "CAD $20.00" in customer_mail["html"]
    assert admin_mail["to"] == ["admin@example.com"]
    assert admin_mail["subject"] == "New Order Received - #ABC123XYZ"
    assert "jane@example.com" in admin_mail["html"]


def test_error_status_raises(app, monkeypatch):
    monkeypatch.setattr("storefront.notifications.http_post_json",
                        lambda *args, **kwargs: FakeResponse(500, "boom"))

    with app.app_context():
        with pytest.raises(NotificationError):
            send_order_emails(placed_order(), "http://mail.test/send", "admin@example.com")


def test_unreachable_service_raises(app, monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr("storefront.notifications.http_post_json", fake_post)

    with app.app_context():
        with pytest.raises(NotificationError):
            send_order_emails(placed_order(), "http://mail.test/send", "admin@example.com")
