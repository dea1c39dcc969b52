"""
Key-value persistence used by the cart, the ledger and the accounts.

Every piece of state is a JSON document stored under a fixed key, the way
the browser client kept it in local storage. Two backends are provided:
an in-memory dict for tests and a SQLite table through peewee.
"""
import json
import logging

from peewee import CharField, Model, SqliteDatabase, TextField

logger = logging.getLogger(__name__)

# Initialised by create_app() from the DATABASE setting
db = SqliteDatabase(None)

CURRENT_USER_KEY = "currentUser"
USERS_KEY = "users"
ORDERS_KEY = "orders"
LAST_ORDER_KEY = "lastOrder"
CART_KEY = "cart"
PROMO_KEY = "activePromoCode"


class BaseModel(Model):
    class Meta:
        database = db


class StoredValue(BaseModel):
    key = CharField(primary_key=True)
    value = TextField()


class MemoryStore:
    """Store backed by a plain dict."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def contains(self, key):
        return key in self._data

    def delete(self, key):
        self._data.pop(key, None)


class DatabaseStore:
    """Store backed by the StoredValue table."""

    def __init__(self, database=db):
        self.database = database

    def _connect(self):
        self.database.connect(reuse_if_open=True)

    def get(self, key):
        self._connect()
        row = StoredValue.get_or_none(StoredValue.key == key)
        return row.value if row is not None else None

    def set(self, key, value):
        self._connect()
        StoredValue.replace(key=key, value=value).execute()

    def contains(self, key):
        self._connect()
        return StoredValue.select().where(StoredValue.key == key).exists()

    def delete(self, key):
        self._connect()
        StoredValue.delete().where(StoredValue.key == key).execute()


def read_json(store, key, default=None):
    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable value stored under %r", key)
        return default


def write_json(store, key, value):
    store.set(key, json.dumps(value))
