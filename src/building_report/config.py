"""
Configuration for the NYC Building Report project.

Dataset identifiers and query limits are module constants; credentials and
the network timeout come from the environment (a local ``.env`` is honoured).
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# NYC Open Data (Socrata)
DOMAIN = "data.cityofnewyork.us"
HPD_VIOLATIONS_DATASET_ID = "wvxf-dwi5"  # Housing Maintenance Code Violations
PLUTO_DATASET_ID = "64uk-42ks"  # PLUTO tax lots

# NYC GeoSearch
DEFAULT_GEOSEARCH_URL = "https://geosearch.planninglabs.nyc/v2/search"

# Query limits
VIOLATION_QUERY_LIMIT = 1000
PLUTO_QUERY_LIMIT = 50

# Registry autocomplete
SUGGESTION_LIMIT = 10
SUGGESTION_MIN_CHARS = 3

DEFAULT_TIMEOUT_SECONDS = 10.0


def get_app_token() -> Optional[str]:
    """Return the Socrata app token, or None to use anonymous (throttled) access."""
    return os.getenv("SOCRATA_APP_TOKEN") or None


def get_timeout() -> float:
    """Per-request timeout in seconds for every external call."""
    raw = os.getenv("BUILDING_REPORT_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def get_geosearch_url() -> str:
    return os.getenv("GEOSEARCH_URL") or DEFAULT_GEOSEARCH_URL
