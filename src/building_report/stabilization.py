"""
Rent-stabilization classification.

A building counts as stabilized when it appears in the community registry of
verified buildings or when its PLUTO tax-bill data reports stabilized units.
Older mid-size buildings that are neither get an advisory label only; that
rule has no authoritative source and must not be read as confirmed status.
"""

import logging
from typing import Iterable, Optional

from . import config
from .models import CanonicalAddress, PropertyTaxRecord, RegistryEntry, RentStabilizationStatus

logger = logging.getLogger(__name__)

REGISTRY_SOURCE = "Community Registry"
TAX_BILL_SOURCE = "Tax Bills"
POTENTIALLY_STABILIZED = "Potentially Rent Stabilized (pre-1974, 6+ units)"

# Heuristic thresholds for the advisory label
STABILIZATION_CUTOFF_YEAR = 1974
MIN_STABILIZED_UNITS = 6


class RentStabilizationRegistry:
    """Read-only view of the verified registry, built once at startup."""

    def __init__(self, entries: Iterable[RegistryEntry] = ()):
        self._entries = tuple(entries)
        self._index = frozenset(
            (entry.number, entry.street.upper()) for entry in self._entries
        )
        logger.info(f"Loaded {len(self._entries):,} registry entries")

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[RegistryEntry, ...]:
        return self._entries

    def contains(self, housenumber: str, street: str) -> bool:
        return (housenumber, street.upper()) in self._index

    def suggest(self, text: str, limit: int = config.SUGGESTION_LIMIT) -> list[RegistryEntry]:
        """Registry entries whose full address contains the typed text."""
        if len(text) < config.SUGGESTION_MIN_CHARS:
            return []
        needle = text.lower()
        matches = []
        for entry in self._entries:
            if needle in entry.full_address.lower():
                matches.append(entry)
                if len(matches) >= limit:
                    break
        return matches


def classify(
    address: CanonicalAddress,
    tax_record: Optional[PropertyTaxRecord],
    registry: RentStabilizationRegistry,
) -> RentStabilizationStatus:
    in_registry = registry.contains(address.housenumber, address.street)
    tax_record = tax_record or PropertyTaxRecord()
    stabilized_units = tax_record.stabilized_units or 0

    sources = []
    if in_registry:
        sources.append(REGISTRY_SOURCE)
    if stabilized_units > 0:
        sources.append(TAX_BILL_SOURCE)
    is_stabilized = bool(sources)

    advisory = None
    year_built = tax_record.year_built or 0
    total_units = tax_record.total_units or 0
    if (
        not is_stabilized
        and 0 < year_built < STABILIZATION_CUTOFF_YEAR
        and total_units >= MIN_STABILIZED_UNITS
    ):
        advisory = POTENTIALLY_STABILIZED

    return RentStabilizationStatus(
        is_stabilized=is_stabilized,
        stabilized_units=stabilized_units,
        source=" + ".join(sources),
        advisory=advisory,
    )
