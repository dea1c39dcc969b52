"""
Pricing engine for the checkout.

Turns the cart, the locale selection, the shipping option and the active
promo code into the priced order summary. Nothing here holds state and
nothing raises for a missing selection: unknown locales and shipping
options simply price at zero and the result is flagged as not submittable.
"""
from dataclasses import dataclass, field

from storefront.locations import (
    USD_TO_CAD,
    currency_for,
    currency_symbol_for,
    is_valid_region,
)
from storefront.shipping import find_shipping_option
from storefront.taxes import (
    calculate_tax_breakdown,
    calculate_taxes,
    get_tax_rates,
)


@dataclass(frozen=True)
class LineItem:
    id: str
    name: str
    unit_price: float
    quantity: int = 1

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data):
        price = data.get("price", data.get("unitPrice", 0))
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            unit_price=float(price or 0),
            quantity=int(data.get("quantity") or 1),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.unit_price,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class Locale:
    country: str
    region: str = ""

    def with_country(self, country):
        """Switching country always drops the region."""
        return Locale(country=country, region="")

    def with_region(self, region):
        return Locale(country=self.country, region=region)

    def is_valid(self):
        return is_valid_region(self.country, self.region)


@dataclass(frozen=True)
class PromoCode:
    code: str
    discount: float

    @classmethod
    def from_dict(cls, data):
        return cls(code=data["code"], discount=float(data["discount"]))

    def to_dict(self):
        return {"code": self.code, "discount": self.discount}


@dataclass
class PricingResult:
    subtotal: float
    tax_rates: dict
    tax_breakdown: dict
    tax_amount: float
    shipping_option: dict = None
    shipping_cost: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    currency: str = "CAD"
    currency_symbol: str = "CAD $"
    locale: Locale = None
    promo: PromoCode = None
    items: list = field(default_factory=list)

    @property
    def is_submittable(self):
        return (
            bool(self.items)
            and self.locale is not None
            and self.locale.is_valid()
            and self.shipping_option is not None
        )

    def to_dict(self):
        return {
            "subtotal": self.subtotal,
            "taxRates": dict(self.tax_rates),
            "taxBreakdown": dict(self.tax_breakdown),
            "taxAmount": self.tax_amount,
            "shippingOption": self.shipping_option,
            "shippingCost": self.shipping_cost,
            "discount": self.promo.to_dict() if self.promo else None,
            "discountAmount": self.discount_amount,
            "total": self.total,
            "currency": self.currency,
            "currencySymbol": self.currency_symbol,
            "submittable": self.is_submittable,
        }


def calculate_subtotal(items):
    return sum(item.line_total for item in items)


def convert_subtotal(subtotal, country, usd_to_cad=USD_TO_CAD):
    """Cart prices are in CAD; US orders are shown and charged in USD."""
    if country == "US":
        return subtotal / usd_to_cad
    return subtotal


def compute_order_pricing(items, locale=None, shipping_option_id=None, promo=None,
                          usd_to_cad=USD_TO_CAD):
    items = list(items)
    country = locale.country if locale else None
    region = locale.region if locale else None

    subtotal = round(convert_subtotal(calculate_subtotal(items), country, usd_to_cad), 2)

    tax_rates = get_tax_rates(country, region)
    tax_breakdown = calculate_tax_breakdown(subtotal, tax_rates)
    tax_amount = calculate_taxes(subtotal, tax_rates)

    shipping_option = find_shipping_option(country, shipping_option_id)
    shipping_cost = round(float(shipping_option["price"]), 2) if shipping_option else 0.0

    # The discount is reported on its own line; it is not taken off the
    # taxable base nor off the total.
    discount_amount = round(subtotal * promo.discount / 100, 2) if promo else 0.0

    total = round(subtotal + tax_amount + shipping_cost, 2)

    return PricingResult(
        subtotal=subtotal,
        tax_rates=tax_rates,
        tax_breakdown=tax_breakdown,
        tax_amount=tax_amount,
        shipping_option=shipping_option,
        shipping_cost=shipping_cost,
        discount_amount=discount_amount,
        total=total,
        currency=currency_for(country),
        currency_symbol=currency_symbol_for(country),
        locale=locale,
        promo=promo,
        items=items,
    )
