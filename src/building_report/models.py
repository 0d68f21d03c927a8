"""
Value types shared across the building report pipeline.

Everything here is a frozen dataclass: once built, an address, a violation or a
report is never changed field by field. A new search builds a new report.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ParsedAddress:
    """House number and street pulled out of free text without the geocoder."""

    housenumber: str
    street: str


@dataclass(frozen=True)
class CanonicalAddress:
    """Resolved address used as the key for every dataset query."""

    housenumber: str
    street: str
    borough: str
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    source: str = "parser"

    @property
    def boro_name(self) -> str:
        """Borough as it appears in the HPD ``boro`` column."""
        return self.borough.upper()

    @property
    def formatted(self) -> str:
        return f"{self.housenumber} {self.street}, {self.borough}, NY"

    @property
    def has_coordinates(self) -> bool:
        return self.longitude is not None and self.latitude is not None


@dataclass(frozen=True)
class GeocodeCandidate:
    housenumber: Optional[str]
    street: Optional[str]
    borough: Optional[str]
    longitude: Optional[float] = None
    latitude: Optional[float] = None


@dataclass(frozen=True)
class RegistryEntry:
    """One verified rent-stabilized building from the community registry."""

    number: str
    street: str
    borough: str
    zip: str = ""

    @property
    def full_address(self) -> str:
        return f"{self.number} {self.street}, {self.borough}"


@dataclass(frozen=True)
class ViolationRecord:
    source: str
    description: str
    severity: str
    date: str = ""
    status: str = ""
    type: str = ""


@dataclass(frozen=True)
class PropertyTaxRecord:
    year_built: Optional[int] = None
    total_units: Optional[int] = None
    stabilized_units: Optional[int] = None


@dataclass(frozen=True)
class RentStabilizationStatus:
    is_stabilized: bool
    stabilized_units: int
    source: str = ""
    # Set only for the unconfirmed pre-1974 heuristic; never implies is_stabilized.
    advisory: Optional[str] = None


class Grade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


@dataclass(frozen=True)
class HealthScore:
    grade: Grade
    weight: int


@dataclass(frozen=True)
class ViolationCounts:
    total: int = 0
    class_a: int = 0
    class_b: int = 0
    class_c: int = 0


@dataclass(frozen=True)
class RentComparison:
    estimated_rent: int
    baseline_rent: int
    borough: str
    stabilization: RentStabilizationStatus
    total_units: Optional[int] = None
    year_built: Optional[int] = None


@dataclass(frozen=True)
class CollaboratorFailure:
    """One external call that failed and was treated as returning nothing."""

    stage: str
    message: str


@dataclass(frozen=True)
class DiagnosticTrace:
    """Observability data attached to a report. Never feeds back into scoring."""

    searched_for: str
    address_source: str
    winning_strategy: Optional[str]
    record_count: int = 0
    strategy_counts: tuple[tuple[str, int], ...] = ()
    failures: tuple[CollaboratorFailure, ...] = ()

    @property
    def sources(self) -> str:
        return f"HPD: {self.record_count}"


@dataclass(frozen=True)
class BuildingReport:
    address: CanonicalAddress
    health_score: HealthScore
    counts: ViolationCounts
    total_records: int
    issues: tuple[str, ...]
    rent_comparison: RentComparison
    generated_at: datetime
    trace: Optional[DiagnosticTrace] = None
