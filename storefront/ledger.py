"""
Order ledger.

The ledger is one JSON array stored under the "orders" key. Every write
reads the whole collection, changes it and writes the whole collection
back, so two writers racing on the same store lose updates (last write
wins). Records written by older versions of the storefront may miss
fields; they are brought up to the current schema once, when the ledger
is loaded.
"""
import logging
import random
import string
from datetime import datetime, timedelta, timezone

from storefront.storage import LAST_ORDER_KEY, ORDERS_KEY, read_json, write_json

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

ORDER_STATUSES = ("Processing", "Shipped", "Delivered", "Cancelled")
PAYMENT_STATUSES = ("Paid", "Pending", "Failed")

DEFAULT_STATUS = "Processing"
DEFAULT_PAYMENT_STATUS = "Paid"
DEFAULT_CURRENCY = "CAD"

STATUS_TRANSITIONS = {
    "Processing": ("Shipped", "Cancelled"),
    "Shipped": ("Delivered", "Cancelled"),
    "Delivered": (),
    "Cancelled": (),
}

CUSTOMER_FIELDS = ("firstName", "lastName", "email", "phone", "address", "country", "region")

ORDER_ID_ALPHABET = string.ascii_uppercase + string.digits
ORDER_ID_LENGTH = 9


class InvalidStatusError(ValueError):
    pass


class InvalidStatusTransitionError(InvalidStatusError):
    pass


def generate_order_id():
    return "".join(random.choices(ORDER_ID_ALPHABET, k=ORDER_ID_LENGTH))


def utc_now():
    return datetime.now(timezone.utc)


def parse_order_date(value):
    if not isinstance(value, str) or not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def migrate_order(entry):
    """Back-fill a stored record to the current schema.

    Returns the migrated record and whether anything had to change.
    """
    order = dict(entry)
    changed = False

    defaults = {
        "orderId": generate_order_id,
        "date": lambda: utc_now().isoformat(),
        "items": list,
        "total": lambda: 0,
        "currency": lambda: DEFAULT_CURRENCY,
        "status": lambda: DEFAULT_STATUS,
        "paymentStatus": lambda: DEFAULT_PAYMENT_STATUS,
    }
    for name, factory in defaults.items():
        if order.get(name) in (None, ""):
            order[name] = factory()
            changed = True

    if not isinstance(order["orderId"], str):
        order["orderId"] = str(order["orderId"])
        changed = True

    if not isinstance(order["status"], str):
        order["status"] = DEFAULT_STATUS
        changed = True

    if not isinstance(order["paymentStatus"], str):
        order["paymentStatus"] = DEFAULT_PAYMENT_STATUS
        changed = True

    if not isinstance(order["items"], list):
        order["items"] = []
        changed = True

    stored_customer = order.get("customerDetails")
    if not isinstance(stored_customer, dict):
        stored_customer = {}
        changed = True
    customer = {field: str(stored_customer.get(field) or "") for field in CUSTOMER_FIELDS}
    if customer != stored_customer:
        changed = True
    order["customerDetails"] = customer

    if order.get("schemaVersion") != SCHEMA_VERSION:
        order["schemaVersion"] = SCHEMA_VERSION
        changed = True

    return order, changed


class OrderLedger:
    def __init__(self, store):
        self.store = store

    def _load(self):
        data = read_json(self.store, ORDERS_KEY, [])
        if not isinstance(data, list):
            logger.warning("Stored orders are not a list, treating the ledger as empty")
            return []

        orders = []
        migrated = False
        for entry in data:
            if not isinstance(entry, dict):
                logger.warning("Dropping malformed ledger entry: %r", entry)
                migrated = True
                continue
            order, changed = migrate_order(entry)
            orders.append(order)
            migrated = migrated or changed

        if migrated:
            logger.info("Migrated %d ledger record(s) to schema version %d", len(orders), SCHEMA_VERSION)
            self._save(orders)
        return orders

    def _save(self, orders):
        write_json(self.store, ORDERS_KEY, orders)

    def list_orders(self):
        return self._load()

    def get_order(self, order_id):
        for order in self._load():
            if order["orderId"] == order_id:
                return order
        return None

    def list_orders_by_email(self, email):
        return [order for order in self._load() if order["customerDetails"]["email"] == email]

    def append_order(self, order):
        orders = self._load()
        existing_ids = {entry["orderId"] for entry in orders}

        order_id = generate_order_id()
        while order_id in existing_ids:
            order_id = generate_order_id()

        record = dict(order)
        record["orderId"] = order_id
        record.setdefault("date", utc_now().isoformat())
        record.setdefault("status", DEFAULT_STATUS)
        record.setdefault("paymentStatus", DEFAULT_PAYMENT_STATUS)
        record, _ = migrate_order(record)

        orders.append(record)
        self._save(orders)
        logger.info("Order %s appended to the ledger", order_id)
        return order_id

    def update_order(self, order_id, status=None, payment_status=None, enforce_transitions=False):
        """Set the status and/or payment status of one order.

        Both values are checked before anything is written, so a rejected
        update leaves the stored order untouched. Returns None when the
        order does not exist.
        """
        if status is not None and status not in ORDER_STATUSES:
            raise InvalidStatusError(f"Unknown order status: {status}")
        if payment_status is not None and payment_status not in PAYMENT_STATUSES:
            raise InvalidStatusError(f"Unknown payment status: {payment_status}")

        orders = self._load()
        for order in orders:
            if order["orderId"] != order_id:
                continue
            current = order["status"]
            if (enforce_transitions and status is not None and status != current
                    and status not in STATUS_TRANSITIONS.get(current, ())):
                raise InvalidStatusTransitionError(f"Cannot move order from {current} to {status}")

            if status is not None:
                order["status"] = status
            if payment_status is not None:
                order["paymentStatus"] = payment_status
            self._save(orders)
            logger.info("Order %s updated (status=%s, payment=%s)", order_id, order["status"], order["paymentStatus"])
            return order

        logger.info("Order %s not found, left unchanged", order_id)
        return None

    def update_order_status(self, order_id, status, enforce_transitions=False):
        if status is None:
            raise InvalidStatusError("Missing order status")
        return self.update_order(order_id, status=status, enforce_transitions=enforce_transitions)

    def update_payment_status(self, order_id, payment_status):
        if payment_status is None:
            raise InvalidStatusError("Missing payment status")
        return self.update_order(order_id, payment_status=payment_status)

    def clear(self):
        self.store.delete(ORDERS_KEY)

    def save_last_order(self, order):
        write_json(self.store, LAST_ORDER_KEY, order)

    def last_order(self):
        order = read_json(self.store, LAST_ORDER_KEY)
        return order if isinstance(order, dict) else None


def filter_orders(orders, search="", status="all", date_range="all", now=None):
    """Admin panel filters: free-text search, status and date range."""
    now = now or utc_now()
    term = (search or "").strip().lower()
    status = (status or "all").lower()

    def matches_search(order):
        if not term:
            return True
        customer = order["customerDetails"]
        name = f"{customer['firstName']} {customer['lastName']}".lower()
        return (
            term in order["orderId"].lower()
            or term in name
            or term in customer["email"].lower()
        )

    def matches_date(order):
        if date_range == "all":
            return True
        placed = parse_order_date(order["date"])
        if placed is None:
            return False
        if date_range == "today":
            return placed.astimezone(now.tzinfo).date() == now.date()
        if date_range == "week":
            return placed >= now - timedelta(days=7)
        if date_range == "month":
            return placed >= now - timedelta(days=30)
        return True

    return [
        order for order in orders
        if matches_search(order)
        and (status == "all" or order["status"].lower() == status)
        and matches_date(order)
    ]
