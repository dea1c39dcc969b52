"""
Cart-scoped promo code: at most one code is active at a time.
"""
import logging

from storefront.pricing import PromoCode
from storefront.storage import PROMO_KEY, read_json, write_json

logger = logging.getLogger(__name__)


class InvalidPromoCodeError(Exception):
    def __init__(self, code, message="Invalid promo code"):
        super().__init__(message)
        self.code = code
        self.message = message


def config_lookup(promo_codes):
    """Lookup over a {code: percent} mapping, case-insensitive."""
    normalized = {code.upper(): discount for code, discount in (promo_codes or {}).items()}

    def lookup(code):
        return normalized.get(code.upper())

    return lookup


class PromoCodeStore:
    def __init__(self, store, lookup):
        self.store = store
        self.lookup = lookup

    def active(self):
        data = read_json(self.store, PROMO_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return PromoCode.from_dict(data)
        except (KeyError, TypeError, ValueError):
            return None

    def apply(self, code):
        code = code.strip() if isinstance(code, str) else ""
        if not code:
            raise InvalidPromoCodeError(code, "Please enter a promo code")

        discount = self.lookup(code)
        if discount is None:
            raise InvalidPromoCodeError(code)
        try:
            discount = float(discount)
        except (TypeError, ValueError):
            raise InvalidPromoCodeError(code)
        if discount < 0 or discount > 100:
            raise InvalidPromoCodeError(code)

        promo = PromoCode(code=code.upper(), discount=discount)
        write_json(self.store, PROMO_KEY, promo.to_dict())
        logger.info("Promo code %s applied (%s%% off)", promo.code, promo.discount)
        return promo

    def remove(self):
        self.store.delete(PROMO_KEY)
