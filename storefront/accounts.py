"""
Customer accounts and the signed-in user profile.
"""
import logging
import uuid

from werkzeug.security import check_password_hash, generate_password_hash

from storefront.storage import CURRENT_USER_KEY, USERS_KEY, read_json, write_json

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("firstName", "lastName", "email", "phoneNumber", "country", "region", "address")


class AccountError(Exception):
    def __init__(self, code, message):
        super().__init__(message)
        self.code = code
        self.message = message


def get_current_user(store):
    user = read_json(store, CURRENT_USER_KEY)
    return user if isinstance(user, dict) else None


def save_current_user(store, user):
    write_json(store, CURRENT_USER_KEY, user)
    return user


def logout(store):
    store.delete(CURRENT_USER_KEY)


def is_admin(user):
    return bool(user) and user.get("role") == "admin"


def list_users(store):
    users = read_json(store, USERS_KEY, [])
    if not isinstance(users, list):
        return []
    return [user for user in users if isinstance(user, dict)]


def _profile_from_account(account):
    return {
        "firstName": account.get("firstName", ""),
        "lastName": account.get("lastName", ""),
        "email": account.get("email", ""),
        "phoneNumber": account.get("phone", ""),
        "address": account.get("address", ""),
    }


def register_user(store, first_name, last_name, email, password, phone="", address=""):
    if not all([first_name, last_name, email, password]):
        raise AccountError("missing-fields", "Please fill in all required fields")

    users = list_users(store)
    if any(user.get("email") == email for user in users):
        raise AccountError("email-taken", "An account already exists for this email")

    account = {
        "id": uuid.uuid4().hex,
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "password": generate_password_hash(password),
        "phone": phone,
        "address": address,
    }
    users.append(account)
    write_json(store, USERS_KEY, users)
    logger.info("Registered account %s", account["id"])
    return save_current_user(store, _profile_from_account(account))


def login(store, email, password):
    for account in list_users(store):
        if account.get("email") == email and check_password_hash(account.get("password", ""), password or ""):
            return save_current_user(store, _profile_from_account(account))
    raise AccountError("invalid-credentials", "Invalid credentials")


def admin_login(store, email, password, credentials):
    """Credentials come from configuration as an {email: password} mapping."""
    if not email or credentials.get(email) != password:
        raise AccountError("invalid-credentials", "Invalid credentials")
    return save_current_user(store, {"email": email, "role": "admin"})


def update_profile(store, changes):
    user = get_current_user(store)
    if user is None:
        raise AccountError("not-signed-in", "You need to sign in first")

    updated = dict(user)
    for field in PROFILE_FIELDS:
        if field in changes:
            updated[field] = changes[field]
    if "country" in changes and changes["country"] != user.get("country") and "region" not in changes:
        updated["region"] = ""
    return save_current_user(store, updated)


def update_profile_from_checkout(store, customer):
    """Copy the non-empty checkout details onto the signed-in user, if any."""
    user = get_current_user(store)
    if user is None:
        return None

    mapping = {
        "firstName": customer.get("firstName"),
        "lastName": customer.get("lastName"),
        "email": customer.get("email"),
        "phoneNumber": customer.get("phone"),
        "country": customer.get("country"),
        "region": customer.get("region"),
        "address": customer.get("address"),
    }
    updated = dict(user)
    for field, value in mapping.items():
        if value:
            updated[field] = value
    return save_current_user(store, updated)
