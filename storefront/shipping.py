"""
Shipping options available for each destination country.
"""
from storefront.locations import SHIPPING_OPTIONS


def get_shipping_options(country):
    return [dict(option) for option in SHIPPING_OPTIONS.get(country, [])]


# Selected option for the country, None when the id is not offered there
def find_shipping_option(country, option_id):
    if not country or not option_id:
        return None

    for option in SHIPPING_OPTIONS.get(country, []):
        if option["id"] == option_id:
            return dict(option)
    return None


def calculate_shipping_price(country, option_id):
    option = find_shipping_option(country, option_id)
    if option is None:
        return 0.0
    return round(float(option["price"]), 2)
