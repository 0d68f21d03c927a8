"""
Scoring and estimation for a building report.

All functions here are pure: the same violations and PLUTO values always
give the same grade, issue list and rent estimate.
"""

import math
from typing import Iterable, Optional

from .models import Grade, HealthScore, ViolationCounts, ViolationRecord

# ============================================================================
# HEALTH SCORE
# ============================================================================

# Points per HPD violation by class letter
SEVERITY_WEIGHTS = {
    'A': 10,
    'B': 3,
    'C': 1,
}

# Upper bound (inclusive) of total weight for each grade after A
GRADE_THRESHOLDS = [
    (8, Grade.B),
    (20, Grade.C),
    (40, Grade.D),
]


def violation_weight(violations: Iterable[ViolationRecord]) -> int:
    return sum(
        SEVERITY_WEIGHTS.get(v.severity, 0)
        for v in violations
        if v.source == "HPD"
    )


def grade_for_weight(weight: int) -> Grade:
    if weight <= 0:
        return Grade.A
    for upper, grade in GRADE_THRESHOLDS:
        if weight <= upper:
            return grade
    return Grade.F


def calculate_health_score(violations: Iterable[ViolationRecord]) -> HealthScore:
    """
    Grade a building from its HPD violations.

    Only HPD records count. The grade can only get worse as violations are
    added, since every weight is non-negative.
    """
    weight = violation_weight(violations)
    return HealthScore(grade=grade_for_weight(weight), weight=weight)


def count_by_class(violations: Iterable[ViolationRecord]) -> ViolationCounts:
    totals = {'A': 0, 'B': 0, 'C': 0}
    total = 0
    for v in violations:
        total += 1
        if v.severity in totals:
            totals[v.severity] += 1
    return ViolationCounts(
        total=total,
        class_a=totals['A'],
        class_b=totals['B'],
        class_c=totals['C'],
    )


# ============================================================================
# ISSUES
# ============================================================================

NO_ISSUES = "No major issues found"

# Order here is the order issues are reported in
ISSUE_KEYWORDS = [
    ('Heat/Hot Water', ['heat', 'hot water', 'boiler']),
    ('Pest Infestation', ['roach', 'rat', 'mice', 'pest']),
    ('Mold', ['mold', 'mildew']),
    ('Plumbing', ['plumbing', 'leak', 'pipe']),
]


def extract_issues(violations: Iterable[ViolationRecord]) -> list[str]:
    descriptions = [v.description.lower() for v in violations]
    found = [
        issue
        for issue, keywords in ISSUE_KEYWORDS
        if any(keyword in desc for desc in descriptions for keyword in keywords)
    ]
    return found or [NO_ISSUES]


# ============================================================================
# RENT ESTIMATE
# ============================================================================

MEDIAN_RENTS = {
    'Manhattan': 4200,
    'Brooklyn': 3400,
    'Queens': 2600,
    'Bronx': 2100,
    'Staten Island': 2300,
    'NYC': 3500,
}
DEFAULT_MEDIAN_RENT = 3000


def baseline_rent(borough: Optional[str]) -> int:
    return MEDIAN_RENTS.get(borough or "", DEFAULT_MEDIAN_RENT)


def size_multiplier(total_units: Optional[int]) -> float:
    units = total_units or 0
    if units > 100:
        return 1.15
    if units > 50:
        return 1.08
    return 1.0


def age_multiplier(year_built: Optional[int]) -> float:
    year = year_built or 0
    if year >= 2015:
        return 1.25
    if year >= 2000:
        return 1.12
    if 0 < year < 1950:
        return 0.90
    return 1.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_rent(borough: Optional[str], total_units: Optional[int], year_built: Optional[int]) -> int:
    """
    Estimate market rent from the borough median, building size and age.

    Example:
        >>> estimate_rent("Manhattan", 120, 2016)
        6038
    """
    base = baseline_rent(borough)
    return round_half_up(base * size_multiplier(total_units) * age_multiplier(year_built))
