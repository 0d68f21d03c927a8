"""
Address text cleanup and offline parsing.

Both halves are ordered lists of regex rules so each rule can be checked on its
own. Nothing in this module touches the network: ``parse_address`` is what
keeps a search moving when the geocoder is down.
"""

import re
from typing import Optional

from .models import ParsedAddress

BOROUGHS = ("Manhattan", "Brooklyn", "Queens", "Bronx", "Staten Island")
DEFAULT_BOROUGH = "NYC"

# Common misspellings, matched as whole words regardless of case
SPELLING_CORRECTIONS = [
    (re.compile(r"\bmanhatten\b", re.IGNORECASE), "Manhattan"),
    (re.compile(r"\bmanhatan\b", re.IGNORECASE), "Manhattan"),
    (re.compile(r"\bbrookln\b", re.IGNORECASE), "Brooklyn"),
    (re.compile(r"\bquens\b", re.IGNORECASE), "Queens"),
]

# Suffix abbreviations; the trailing lookahead keeps "Stanton" and "Avenue" intact
ABBREVIATIONS = [
    (re.compile(r"\bSt\.?(?!\w)", re.IGNORECASE), "Street"),
    (re.compile(r"\bAve?\.?(?!\w)", re.IGNORECASE), "Avenue"),
]

STATE_TOKEN = re.compile(r"\bNY\b", re.IGNORECASE)
STATE_SUFFIX = ", NY"

HOUSE_AND_STREET = re.compile(r"^(\d+(?:-\d+)?)\s+(.+?)(?:,|$)")
BOROUGH_PATTERN = re.compile(
    r"\b(" + "|".join(BOROUGHS) + r")\b",
    re.IGNORECASE,
)


def apply_rules(text: str, rules) -> str:
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def normalize_address(text: str) -> str:
    """
    Clean free-text address input before geocoding or parsing.

    Applies spelling corrections, then suffix expansion, then appends
    ", NY" if no NY token is present.

    Example:
        >>> normalize_address("350 5th ave, manhatten")
        '350 5th Avenue, Manhattan, NY'
    """
    normalized = text.strip()
    normalized = apply_rules(normalized, SPELLING_CORRECTIONS)
    normalized = apply_rules(normalized, ABBREVIATIONS)
    if not STATE_TOKEN.search(normalized):
        normalized += STATE_SUFFIX
    return normalized


def parse_address(text: str) -> Optional[ParsedAddress]:
    """
    Pull a leading house number and the street that follows it.

    Hyphenated Queens-style numbers ("12-34") are kept whole. The street runs
    to the first comma and is uppercased. Returns None when the text does not
    start with a digit sequence.
    """
    match = HOUSE_AND_STREET.match(text.strip())
    if not match:
        return None
    street = match.group(2).strip().upper()
    if not street:
        return None
    return ParsedAddress(housenumber=match.group(1), street=street)


def extract_borough(text: str) -> str:
    """Return the first borough named in the text, or "NYC" when none is."""
    match = BOROUGH_PATTERN.search(text)
    if not match:
        return DEFAULT_BOROUGH
    found = match.group(1).lower()
    for name in BOROUGHS:
        if name.lower() == found:
            return name
    return DEFAULT_BOROUGH
