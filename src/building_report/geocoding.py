"""
Resolve normalized address text to a canonical address.

The NYC GeoSearch service is tried first because it returns authoritative
street names and coordinates. If it errors, times out, or has no usable
candidate, the offline parser in ``address.py`` takes over. Only when both
come up empty does the search fail.
"""

import logging
from typing import Any, Optional

import requests

from . import config
from .address import DEFAULT_BOROUGH, extract_borough, parse_address
from .exceptions import AddressUnresolvable, CollaboratorUnavailable
from .models import CanonicalAddress, GeocodeCandidate

logger = logging.getLogger(__name__)


def _coerce_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def candidate_from_feature(feature: dict[str, Any]) -> GeocodeCandidate:
    """Build a candidate from one GeoJSON feature of a GeoSearch response."""
    properties = feature.get("properties") or {}
    coordinates = (feature.get("geometry") or {}).get("coordinates") or []
    longitude = _coerce_float(coordinates[0]) if len(coordinates) >= 2 else None
    latitude = _coerce_float(coordinates[1]) if len(coordinates) >= 2 else None
    return GeocodeCandidate(
        housenumber=properties.get("housenumber"),
        street=properties.get("street"),
        borough=properties.get("borough"),
        longitude=longitude,
        latitude=latitude,
    )


class GeoSearchClient:
    """Thin client for the NYC GeoSearch v2 ``/search`` endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.get_geosearch_url()
        self.timeout = timeout if timeout is not None else config.get_timeout()
        self.session = session or requests.Session()

    def search(self, text: str) -> list[GeocodeCandidate]:
        try:
            response = self.session.get(self.url, params={"text": text}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise CollaboratorUnavailable("geosearch", str(e)) from e
        return [candidate_from_feature(f) for f in payload.get("features") or []]

    def close(self) -> None:
        self.session.close()


def _from_candidate(candidate: GeocodeCandidate) -> Optional[CanonicalAddress]:
    if not candidate.housenumber or not candidate.street:
        return None
    return CanonicalAddress(
        housenumber=str(candidate.housenumber).strip(),
        street=str(candidate.street).strip().upper(),
        borough=candidate.borough or DEFAULT_BOROUGH,
        longitude=candidate.longitude,
        latitude=candidate.latitude,
        source="geocoder",
    )


def geocode(text: str, geocoder, trace=None) -> Optional[CanonicalAddress]:
    """Return the canonical address from the geocoder's top candidate, if any."""
    if geocoder is None:
        return None
    try:
        candidates = geocoder.search(text)
    except Exception as e:
        if trace is not None:
            trace.failure("geocode", e)
        else:
            logger.warning(f"Geocoding failed: {e}")
        return None

    if not candidates:
        logger.info(f"Geocoder returned no candidates for {text!r}")
        return None

    resolved = _from_candidate(candidates[0])
    if resolved is None:
        logger.info("Top geocoder candidate has no house number or street")
    return resolved


def parse_fallback(text: str) -> Optional[CanonicalAddress]:
    parsed = parse_address(text)
    if parsed is None:
        return None
    return CanonicalAddress(
        housenumber=parsed.housenumber,
        street=parsed.street,
        borough=extract_borough(text),
        source="parser",
    )


def resolve_address(text: str, geocoder=None, trace=None) -> CanonicalAddress:
    """
    Resolve normalized text to a canonical address.

    Args:
        text: Output of ``normalize_address``
        geocoder: Object with ``search(text) -> list[GeocodeCandidate]``; None
                  skips straight to the parser
        trace: Optional ``TraceRecorder`` that receives geocoder failures

    Returns:
        CanonicalAddress with an uppercase street

    Raises:
        AddressUnresolvable: If neither source yields a house number and street
    """
    resolved = geocode(text, geocoder, trace)
    if resolved is not None:
        logger.info(f"Geocoded: {resolved.housenumber} {resolved.street}, {resolved.borough}")
        return resolved

    resolved = parse_fallback(text)
    if resolved is None:
        raise AddressUnresolvable("Could not parse address")
    logger.info(f"Manual parsed: {resolved.housenumber} {resolved.street}, {resolved.borough}")
    return resolved
