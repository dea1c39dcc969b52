"""
Tests for customer accounts and the signed-in profile
"""
import pytest

from storefront import accounts
from storefront.storage import MemoryStore, read_json


@pytest.fixture
def store():
    return MemoryStore()


def register_jane(store):
    return accounts.register_user(store, "Jane", "Doe", "jane@example.com", "s3cret", phone="555-0100")


def test_register_signs_the_user_in(store):
    user = register_jane(store)

    assert user["email"] == "jane@example.com"
    assert user["phoneNumber"] == "555-0100"
    assert accounts.get_current_user(store) == user


def test_password_is_not_stored_in_clear(store):
    register_jane(store)
    stored = read_json(store, "users")[0]
    assert stored["password"] != "s3cret"


def test_register_twice_is_rejected(store):
    register_jane(store)
    with pytest.raises(accounts.AccountError) as excinfo:
        register_jane(store)
    assert excinfo.value.code == "email-taken"


def test_register_requires_fields(store):
    with pytest.raises(accounts.AccountError):
        accounts.register_user(store, "", "Doe", "jane@example.com", "s3cret")


def test_login_and_logout(store):
    register_jane(store)
    accounts.logout(store)
    assert accounts.get_current_user(store) is None

    user = accounts.login(store, "jane@example.com", "s3cret")
    assert user["firstName"] == "Jane"

    with pytest.raises(accounts.AccountError):
        accounts.login(store, "jane@example.com", "wrong")


def test_admin_login(store):
    credentials = {"admin@example.com": "admin123"}

    user = accounts.admin_login(store, "admin@example.com", "admin123", credentials)
    assert accounts.is_admin(user)

    with pytest.raises(accounts.AccountError):
        accounts.admin_login(store, "admin@example.com", "nope", credentials)


def test_customers_are_not_admins(store):
    assert not accounts.is_admin(register_jane(store))
    assert not accounts.is_admin(None)


def test_malformed_current_user_means_signed_out():
    store = MemoryStore({"currentUser": "{broken", "users": '"nope"'})
    assert accounts.get_current_user(store) is None
    assert accounts.list_users(store) == []


def test_update_profile_changing_country_clears_region(store):
    register_jane(store)
    accounts.update_profile(store, {"country": "CA", "region": "Ontario"})

    user = accounts.update_profile(store, {"country": "US"})

    assert user["country"] == "US"
    assert user["region"] == ""


def test_update_profile_requires_sign_in(store):
    with pytest.raises(accounts.AccountError):
        accounts.update_profile(store, {"firstName": "X"})


def test_checkout_details_update_profile(store):
    register_jane(store)

    user = accounts.update_profile_from_checkout(store, {
        "firstName": "Janet",
        "lastName": "",
        "email": "jane@example.com",
        "phone": "555-0199",
        "address": "1 Queen Street",
        "country": "CA",
        "region": "Quebec",
    })

    assert user["firstName"] == "Janet"
    assert user["lastName"] == "Doe"
    assert user["phoneNumber"] == "555-0199"
    assert user["region"] == "Quebec"


def test_checkout_without_user_does_nothing(store):
    assert accounts.update_profile_from_checkout(store, {"firstName": "Jane"}) is None
    assert accounts.get_current_user(store) is None
