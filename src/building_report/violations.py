"""
HPD violation lookup with an ordered query cascade.

HPD street names rarely match geocoder output exactly, so three queries are
tried in order of precision:

1. exact     - house number and street name equal
2. prefix    - house number equal, street name starts with the search street
3. borough   - every row for the house number in the borough, then kept
               only where one street name contains the other

The cascade stops at the first strategy that returns rows, and only that
strategy's rows are used. A failed request counts as an empty result.

Dataset: Housing Maintenance Code Violations
Dataset ID: wvxf-dwi5
URL: https://data.cityofnewyork.us/Housing-Development/Housing-Maintenance-Code-Violations/wvxf-dwi5
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from sodapy import Socrata

from . import config
from .exceptions import CollaboratorUnavailable
from .models import CanonicalAddress, ViolationRecord

logger = logging.getLogger(__name__)

HPD_SOURCE = "HPD"


def soql_quote(value: str) -> str:
    """Quote a string literal for a SoQL $where clause."""
    return "'" + value.replace("'", "''") + "'"


class SocrataViolationsClient:
    """HPD violations queries over the Socrata API (via sodapy)."""

    def __init__(
        self,
        app_token: Optional[str] = None,
        timeout: Optional[float] = None,
        limit: int = config.VIOLATION_QUERY_LIMIT,
        client: Optional[Socrata] = None,
    ):
        self.limit = limit
        self.client = client or Socrata(
            config.DOMAIN,
            app_token,
            timeout=timeout if timeout is not None else config.get_timeout(),
        )

    def _get(self, **params) -> list[dict[str, Any]]:
        try:
            return self.client.get(
                config.HPD_VIOLATIONS_DATASET_ID, limit=self.limit, **params
            )
        except requests.RequestException as e:
            raise CollaboratorUnavailable("hpd_violations", str(e)) from e

    def exact(self, housenumber: str, street: str) -> list[dict[str, Any]]:
        return self._get(housenumber=housenumber, streetname=street)

    def prefix(self, housenumber: str, street: str) -> list[dict[str, Any]]:
        where = (
            f"housenumber={soql_quote(housenumber)} "
            f"AND streetname LIKE {soql_quote(street + '%')}"
        )
        return self._get(where=where)

    def by_borough(self, housenumber: str, boro: str) -> list[dict[str, Any]]:
        return self._get(housenumber=housenumber, boro=boro)

    def close(self) -> None:
        self.client.close()


# =============================================================================
# STRATEGIES
# =============================================================================

def exact_match(address: CanonicalAddress, service) -> list[dict[str, Any]]:
    return service.exact(address.housenumber, address.street.upper())


def prefix_match(address: CanonicalAddress, service) -> list[dict[str, Any]]:
    return service.prefix(address.housenumber, address.street.upper())


def streets_overlap(row_street: str, search_street: str) -> bool:
    """True when either street name contains the other ("5 AVE" vs "5 AVENUE").

    A blank row street never matches.
    """
    row_street = row_street.strip().upper()
    if not row_street:
        return False
    search_street = search_street.upper()
    return row_street in search_street or search_street in row_street


def borough_match(address: CanonicalAddress, service) -> list[dict[str, Any]]:
    rows = service.by_borough(address.housenumber, address.boro_name)
    logger.info(f"Borough query returned {len(rows)} rows for house number {address.housenumber}")
    return [row for row in rows if streets_overlap(row.get("streetname") or "", address.street)]


Strategy = Callable[[CanonicalAddress, Any], list[dict[str, Any]]]

STRATEGIES: list[tuple[str, Strategy]] = [
    ("exact", exact_match),
    ("prefix", prefix_match),
    ("borough", borough_match),
]


@dataclass(frozen=True)
class CascadeResult:
    records: tuple[dict[str, Any], ...]
    strategy: Optional[str]
    attempts: tuple[tuple[str, int], ...]


def run_cascade(
    address: CanonicalAddress,
    service,
    trace=None,
    strategies: Optional[list[tuple[str, Strategy]]] = None,
) -> CascadeResult:
    """
    Try each strategy in order until one returns rows.

    Args:
        address: Canonical address to query
        service: Violations data service (see ``SocrataViolationsClient``)
        trace: Optional ``TraceRecorder`` for failures and per-strategy counts
        strategies: Override of the ordered strategy list

    Returns:
        CascadeResult holding the winning strategy's rows only
    """
    attempts = []
    for name, strategy in strategies or STRATEGIES:
        try:
            rows = list(strategy(address, service))
        except Exception as e:
            if trace is not None:
                trace.failure(f"violations:{name}", e)
            else:
                logger.warning(f"Strategy {name} error: {e}")
            rows = []

        logger.info(f"Strategy {name}: found {len(rows)} violations")
        attempts.append((name, len(rows)))
        if trace is not None:
            trace.strategy(name, len(rows))
        if rows:
            return CascadeResult(records=tuple(rows), strategy=name, attempts=tuple(attempts))

    return CascadeResult(records=(), strategy=None, attempts=tuple(attempts))


def normalize_violation(row: dict[str, Any]) -> ViolationRecord:
    """Map a raw HPD row onto a ViolationRecord, first present field wins."""
    return ViolationRecord(
        source=HPD_SOURCE,
        description=row.get("novdescription") or row.get("violationstatus") or "HPD Violation",
        severity=(row.get("class") or row.get("violationclass") or "C").strip().upper(),
        date=row.get("inspectiondate") or row.get("novissueddate") or "",
        status=row.get("violationstatus") or row.get("currentstatus") or "",
        type="Housing Violation",
    )


def normalize_violations(rows) -> list[ViolationRecord]:
    return [normalize_violation(row) for row in rows]
