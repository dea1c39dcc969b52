"""
Tax engine: resolves GST/PST/HST rates for a country and region and computes the tax amounts.
"""
from storefront.locations import TAX_TABLES

TAX_COMPONENTS = ("gst", "pst", "hst")


def zero_rates():
    return {component: 0 for component in TAX_COMPONENTS}


# Rates in percent for a (country, region); anything unknown resolves to 0
def get_tax_rates(country, region):
    if not country or not region:
        return zero_rates()

    table = TAX_TABLES.get(country, {})
    rates = table.get(region) or {}
    return {component: rates.get(component) or 0 for component in TAX_COMPONENTS}


def combined_rate(rates):
    return sum(rates.get(component) or 0 for component in TAX_COMPONENTS)


# Amount of each tax component for the subtotal
def calculate_tax_breakdown(subtotal, rates):
    return {
        component: round(subtotal * (rates.get(component) or 0) / 100, 2)
        for component in TAX_COMPONENTS
    }


# Total tax amount, on the whole combined rate
def calculate_taxes(subtotal, rates):
    return round(subtotal * combined_rate(rates) / 100, 2)


def calculate_total_with_tax(subtotal, rates):
    tax_amount = calculate_taxes(subtotal, rates)
    return round(subtotal + tax_amount, 2)
