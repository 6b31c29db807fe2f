"""
ISO 3166-1 alpha-2 country names, sourced from pycountry.

Used to check that a record's countryName is the canonical name for its
countryISO2, and to label country listings. Callers uppercase the names.
"""
from typing import Dict

import pycountry


def load_country_names() -> Dict[str, str]:
    """Map every assigned alpha-2 code to its ISO short name."""
    return {country.alpha_2: country.name for country in pycountry.countries}
