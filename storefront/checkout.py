"""
Checkout: validates the submitted form, prices the cart and records the order.
"""
import logging

from storefront.accounts import update_profile_from_checkout
from storefront.cart import Cart
from storefront.ledger import OrderLedger
from storefront.locations import is_supported_country, is_valid_region
from storefront.pricing import Locale, compute_order_pricing
from storefront.promo import PromoCodeStore
from storefront.shipping import find_shipping_option

logger = logging.getLogger(__name__)

REQUIRED_CUSTOMER_FIELDS = ("firstName", "lastName", "email", "address")


class CheckoutValidationError(Exception):
    def __init__(self, code, message):
        super().__init__(message)
        self.code = code
        self.message = message


def _clean(form, name):
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def customer_details(form):
    return {
        "firstName": _clean(form, "firstName"),
        "lastName": _clean(form, "lastName"),
        "email": _clean(form, "email"),
        "phone": _clean(form, "phone"),
        "address": _clean(form, "address"),
        "country": _clean(form, "country"),
        "region": _clean(form, "region"),
    }


def validate_checkout(items, form):
    if not items:
        raise CheckoutValidationError("empty-cart", "Your cart is empty")

    shipping = _clean(form, "shipping")
    country = _clean(form, "country")
    region = _clean(form, "region")

    if not shipping:
        raise CheckoutValidationError("missing-shipping", "Please select a shipping method")

    if not country or not region:
        raise CheckoutValidationError("missing-location", "Please select your country and region")

    if not is_supported_country(country) or not is_valid_region(country, region):
        raise CheckoutValidationError("invalid-location", "The selected region does not belong to the selected country")

    if find_shipping_option(country, shipping) is None:
        raise CheckoutValidationError("invalid-shipping", "The selected shipping method is not available")

    customer = customer_details(form)
    if not all(customer[field] for field in REQUIRED_CUSTOMER_FIELDS):
        raise CheckoutValidationError("missing-fields", "Please fill in all required fields")

    return customer


def quote(store, form):
    """Pricing of the current cart for a possibly incomplete selection."""
    country = _clean(form, "country")
    locale = Locale(country, _clean(form, "region")) if country else None
    promo = PromoCodeStore(store, lookup=None).active()
    return compute_order_pricing(Cart(store).items(), locale, _clean(form, "shipping"), promo)


def build_order(pricing, customer):
    promo = pricing.promo
    return {
        "items": [item.to_dict() for item in pricing.items],
        "subtotal": pricing.subtotal,
        "taxRates": pricing.tax_rates,
        "taxes": pricing.tax_breakdown,
        "taxAmount": pricing.tax_amount,
        "shipping": pricing.shipping_option,
        "discount": dict(promo.to_dict(), amount=pricing.discount_amount) if promo else None,
        "total": pricing.total,
        "currency": pricing.currency,
        "customerDetails": customer,
    }


def place_order(store, form, notify=None):
    """Record the order for the current cart.

    ``notify`` is called with the stored order once it is in the ledger.
    E-mail failures are logged and never undo the order.
    """
    cart = Cart(store)
    promo_store = PromoCodeStore(store, lookup=None)
    items = cart.items()

    customer = validate_checkout(items, form)
    locale = Locale(customer["country"], customer["region"])
    pricing = compute_order_pricing(items, locale, _clean(form, "shipping"), promo_store.active())

    ledger = OrderLedger(store)
    order_id = ledger.append_order(build_order(pricing, customer))
    order = ledger.get_order(order_id)
    ledger.save_last_order(order)

    update_profile_from_checkout(store, customer)

    if notify is not None:
        try:
            notify(order)
        except Exception:
            logger.exception("Order %s placed but the e-mails could not be sent", order_id)

    cart.clear()
    promo_store.remove()
    logger.info("Order %s placed, total %s %.2f", order_id, order["currency"], order["total"])
    return order
