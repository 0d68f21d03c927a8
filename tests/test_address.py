import pytest

from building_report.address import (
    ABBREVIATIONS,
    SPELLING_CORRECTIONS,
    apply_rules,
    extract_borough,
    normalize_address,
    parse_address,
)


def test_normalize_fixes_spelling_suffix_and_state():
    normalized = normalize_address("350 5th ave, manhatten")
    assert "Manhattan" in normalized
    assert "Avenue" in normalized
    assert normalized.endswith(", NY")
    assert normalized == "350 5th Avenue, Manhattan, NY"


def test_normalize_keeps_existing_state_token():
    assert normalize_address("  100 Main St, Brooklyn, ny ") == "100 Main Street, Brooklyn, ny"


def test_normalize_does_not_treat_nyc_as_state():
    assert normalize_address("1 Broadway, NYC").endswith("NYC, NY")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10 Stanton St", "10 Stanton Street"),
        ("10 W 4th St.", "10 W 4th Street"),
        ("5 Park Av", "5 Park Avenue"),
        ("5 Park Ave.", "5 Park Avenue"),
        ("5 Park Avenue", "5 Park Avenue"),
        ("5 Avenue C", "5 Avenue C"),
    ],
)
def test_abbreviation_rules_leave_whole_words_alone(text, expected):
    assert apply_rules(text, ABBREVIATIONS) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Manhatan", "Manhattan"),
        ("BROOKLN", "Brooklyn"),
        ("quens blvd", "Queens blvd"),
        ("Manhattanville", "Manhattanville"),
    ],
)
def test_spelling_rules(text, expected):
    assert apply_rules(text, SPELLING_CORRECTIONS) == expected


def test_parse_address_extracts_number_and_street():
    parsed = parse_address("350 5th Avenue, Manhattan, NY")
    assert parsed.housenumber == "350"
    assert parsed.street == "5TH AVENUE"


def test_parse_address_keeps_hyphenated_queens_number():
    parsed = parse_address("12-34 31st Avenue, Queens, NY")
    assert parsed.housenumber == "12-34"
    assert parsed.street == "31ST AVENUE"


def test_parse_address_without_comma_runs_to_end():
    parsed = parse_address("99 Prospect Place")
    assert parsed.street == "PROSPECT PLACE"


@pytest.mark.parametrize("text", ["no digits here", "Apt 4, 350 5th Ave", ""])
def test_parse_address_fails_without_leading_number(text):
    assert parse_address(text) is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("350 5th Avenue, Manhattan, NY", "Manhattan"),
        ("1 Main St, brooklyn", "Brooklyn"),
        ("10 Bay St, STATEN ISLAND, NY", "Staten Island"),
        ("1 Grand Concourse, Bronx", "Bronx"),
        ("1 Main Street, NY", "NYC"),
    ],
)
def test_extract_borough(text, expected):
    assert extract_borough(text) == expected
