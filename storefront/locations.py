"""
Static location data: regions, tax rates and shipping options per country.
"""

BASE_CURRENCY = "CAD"

# Fixed conversion rate, 1 USD = 1.35 CAD. Not a live rate.
USD_TO_CAD = 1.35

COUNTRIES = {
    "CA": "Canada",
    "US": "United States",
}

PROVINCES = [
    "Alberta", "British Columbia", "Manitoba", "New Brunswick",
    "Newfoundland and Labrador", "Nova Scotia", "Ontario",
    "Prince Edward Island", "Quebec", "Saskatchewan",
]

STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana",
    "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
    "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada",
    "New Hampshire", "New Jersey", "New Mexico", "New York",
    "North Carolina", "North Dakota", "Ohio", "Oklahoma", "Oregon",
    "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington",
    "West Virginia", "Wisconsin", "Wyoming",
]

REGIONS = {
    "CA": PROVINCES,
    "US": STATES,
}

# Percentages
CANADIAN_TAX_RATES = {
    "Alberta": {"gst": 5},
    "British Columbia": {"gst": 5, "pst": 7},
    "Manitoba": {"gst": 5, "pst": 7},
    "New Brunswick": {"hst": 15},
    "Newfoundland and Labrador": {"hst": 15},
    "Nova Scotia": {"hst": 14},
    "Ontario": {"hst": 13},
    "Prince Edward Island": {"hst": 15},
    "Quebec": {"gst": 5, "pst": 9.975},
    "Saskatchewan": {"gst": 5, "pst": 6},
}

# State base sales tax, stored as a PST-style rate
US_TAX_RATES = {
    "Alabama": {"pst": 4},
    "Alaska": {"pst": 0},
    "Arizona": {"pst": 5.6},
    "Arkansas": {"pst": 6.5},
    "California": {"pst": 7.25},
    "Colorado": {"pst": 2.9},
    "Connecticut": {"pst": 6.35},
    "Delaware": {"pst": 0},
    "Florida": {"pst": 6},
    "Georgia": {"pst": 4},
    "Hawaii": {"pst": 4},
    "Idaho": {"pst": 6},
    "Illinois": {"pst": 6.25},
    "Indiana": {"pst": 7},
    "Iowa": {"pst": 6},
    "Kansas": {"pst": 6.5},
    "Kentucky": {"pst": 6},
    "Louisiana": {"pst": 5},
    "Maine": {"pst": 5.5},
    "Maryland": {"pst": 6},
    "Massachusetts": {"pst": 6.25},
    "Michigan": {"pst": 6},
    "Minnesota": {"pst": 6.875},
    "Mississippi": {"pst": 7},
    "Missouri": {"pst": 4.225},
    "Montana": {"pst": 0},
    "Nebraska": {"pst": 5.5},
    "Nevada": {"pst": 6.85},
    "New Hampshire": {"pst": 0},
    "New Jersey": {"pst": 6.625},
    "New Mexico": {"pst": 4.875},
    "New York": {"pst": 4},
    "North Carolina": {"pst": 4.75},
    "North Dakota": {"pst": 5},
    "Ohio": {"pst": 5.75},
    "Oklahoma": {"pst": 4.5},
    "Oregon": {"pst": 0},
    "Pennsylvania": {"pst": 6},
    "Rhode Island": {"pst": 7},
    "South Carolina": {"pst": 6},
    "South Dakota": {"pst": 4.2},
    "Tennessee": {"pst": 7},
    "Texas": {"pst": 6.25},
    "Utah": {"pst": 6.1},
    "Vermont": {"pst": 6},
    "Virginia": {"pst": 5.3},
    "Washington": {"pst": 6.5},
    "West Virginia": {"pst": 6},
    "Wisconsin": {"pst": 5},
    "Wyoming": {"pst": 4},
}

TAX_TABLES = {
    "CA": CANADIAN_TAX_RATES,
    "US": US_TAX_RATES,
}

# Prices are in the currency of the destination country
SHIPPING_OPTIONS = {
    "CA": [
        {"id": "standard", "name": "Standard", "price": 5.0},
        {"id": "express", "name": "Express", "price": 15.0},
        {"id": "overnight", "name": "Overnight", "price": 30.0},
    ],
    "US": [
        {"id": "standard", "name": "Standard", "price": 8.0},
        {"id": "express", "name": "Express", "price": 20.0},
    ],
}


def is_supported_country(country):
    return country in COUNTRIES


def get_regions(country):
    return list(REGIONS.get(country, []))


def is_valid_region(country, region):
    return region in REGIONS.get(country, [])


def currency_for(country):
    return "USD" if country == "US" else BASE_CURRENCY


def currency_symbol_for(country):
    return "$" if country == "US" else "CAD $"
