"""
Building characteristics from PLUTO tax-lot records.

One free-text query on the lot address; only the first row is used.

Dataset: Primary Land Use Tax Lot Output (PLUTO)
Dataset ID: 64uk-42ks
"""

import logging
from typing import Any, Optional

import requests
from sodapy import Socrata

from . import config
from .exceptions import CollaboratorUnavailable
from .models import CanonicalAddress, PropertyTaxRecord

logger = logging.getLogger(__name__)

# Checked in order; the first field present on the row wins
STABILIZED_UNIT_FIELDS = ("unitsstab2007", "unitsstab")


class SocrataPlutoClient:
    def __init__(
        self,
        app_token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[Socrata] = None,
    ):
        self.client = client or Socrata(
            config.DOMAIN,
            app_token,
            timeout=timeout if timeout is not None else config.get_timeout(),
        )

    def find(self, address_text: str, limit: int = config.PLUTO_QUERY_LIMIT) -> list[dict[str, Any]]:
        try:
            return self.client.get(config.PLUTO_DATASET_ID, address=address_text, limit=limit)
        except requests.RequestException as e:
            raise CollaboratorUnavailable("pluto", str(e)) from e

    def close(self) -> None:
        self.client.close()


def parse_int(value: Any) -> Optional[int]:
    """Parse PLUTO numeric text ("12", "12.0"); None when missing or malformed."""
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric PLUTO value {value!r}")
        return None


def first_present(row: dict[str, Any], fields) -> Any:
    for name in fields:
        if row.get(name) not in (None, ""):
            return row[name]
    return None


def record_from_row(row: dict[str, Any]) -> PropertyTaxRecord:
    return PropertyTaxRecord(
        year_built=parse_int(row.get("yearbuilt")),
        total_units=parse_int(row.get("unitsres")),
        stabilized_units=parse_int(first_present(row, STABILIZED_UNIT_FIELDS)),
    )


def lookup_property(address: CanonicalAddress, service, trace=None) -> Optional[PropertyTaxRecord]:
    """
    Look up year built and unit counts for an address.

    Returns:
        PropertyTaxRecord from the first matching lot, or None when the
        service fails or has no match
    """
    address_text = f"{address.housenumber} {address.street}"
    try:
        rows = service.find(address_text, limit=config.PLUTO_QUERY_LIMIT)
    except Exception as e:
        if trace is not None:
            trace.failure("pluto", e)
        else:
            logger.warning(f"PLUTO fetch error: {e}")
        return None

    if not rows:
        logger.info(f"No PLUTO lot found for {address_text}")
        return None

    record = record_from_row(rows[0])
    logger.info(
        f"PLUTO: built {record.year_built}, {record.total_units} units, "
        f"{record.stabilized_units} stabilized"
    )
    return record
