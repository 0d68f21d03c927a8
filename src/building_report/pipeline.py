"""
End-to-end building search.

``BuildingSearch`` wires the collaborators together for one search:

    normalize -> geocode (or parse) -> {violation cascade, PLUTO} -> score -> report

``SearchSession`` sits on top and enforces "latest search wins": every search
takes a generation number, and a finished search only becomes the visible
report if no newer search has started since.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from . import config
from .address import normalize_address
from .diagnostics import TraceRecorder
from .exceptions import AddressUnresolvable
from .geocoding import GeoSearchClient, resolve_address
from .models import BuildingReport, RentComparison
from .pluto import SocrataPlutoClient, lookup_property
from .report import assemble_report, utc_now
from .scoring import baseline_rent, calculate_health_score, count_by_class, estimate_rent, extract_issues
from .stabilization import RentStabilizationRegistry, classify
from .violations import SocrataViolationsClient, normalize_violations, run_cascade

logger = logging.getLogger(__name__)

SEARCH_FAILED = "An error occurred"


class BuildingSearch:
    """Runs one address through every data source and builds the report."""

    def __init__(
        self,
        geocoder,
        violations_service,
        property_service,
        registry: Optional[RentStabilizationRegistry] = None,
        clock=utc_now,
    ):
        self.geocoder = geocoder
        self.violations_service = violations_service
        self.property_service = property_service
        self.registry = registry if registry is not None else RentStabilizationRegistry()
        self.clock = clock

    def close(self) -> None:
        """Close every collaborator that holds a connection pool."""
        for service in (self.geocoder, self.violations_service, self.property_service):
            close = getattr(service, "close", None)
            if close is not None:
                close()

    def __enter__(self) -> "BuildingSearch":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def from_config(
        cls,
        registry: Optional[RentStabilizationRegistry] = None,
        app_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "BuildingSearch":
        """Build a search backed by GeoSearch and NYC Open Data."""
        app_token = app_token if app_token is not None else config.get_app_token()
        logger.info(f"Connecting to NYC Open Data (token: {'set' if app_token else 'not set'})")
        return cls(
            geocoder=GeoSearchClient(timeout=timeout),
            violations_service=SocrataViolationsClient(app_token, timeout=timeout),
            property_service=SocrataPlutoClient(app_token, timeout=timeout),
            registry=registry,
        )

    def run(self, text: str) -> BuildingReport:
        """
        Build a report for free-text address input.

        Raises:
            AddressUnresolvable: If the input is blank or cannot be resolved
        """
        if not text or not text.strip():
            raise AddressUnresolvable("Please enter an address")

        trace = TraceRecorder()
        normalized = normalize_address(text)
        address = resolve_address(normalized, self.geocoder, trace)
        trace.address_source = address.source
        trace.searched_for = f"{address.housenumber} {address.street}, {address.borough}"

        # The two lookups are independent; strategies inside the cascade stay sequential
        with ThreadPoolExecutor(max_workers=2) as pool:
            cascade_future = pool.submit(run_cascade, address, self.violations_service, trace)
            property_future = pool.submit(lookup_property, address, self.property_service, trace)
            cascade = cascade_future.result()
            tax_record = property_future.result()

        logger.info(f"FINAL HPD DATA: {len(cascade.records)} violations found")
        trace.winning_strategy = cascade.strategy
        trace.record_count = len(cascade.records)

        violations = normalize_violations(cascade.records)
        stabilization = classify(address, tax_record, self.registry)
        total_units = tax_record.total_units if tax_record else None
        year_built = tax_record.year_built if tax_record else None

        rent_comparison = RentComparison(
            estimated_rent=estimate_rent(address.borough, total_units, year_built),
            baseline_rent=baseline_rent(address.borough),
            borough=address.borough,
            stabilization=stabilization,
            total_units=total_units,
            year_built=year_built,
        )
        return assemble_report(
            address=address,
            health_score=calculate_health_score(violations),
            counts=count_by_class(violations),
            issues=extract_issues(violations),
            rent_comparison=rent_comparison,
            trace=trace.freeze(),
            clock=self.clock,
        )


class SearchSession:
    """
    Holds the visible report and error for a sequence of searches.

    Searches may overlap (e.g. a user retypes the address while the previous
    lookup is still waiting on the network). Each search is stamped with a
    generation; only the newest generation may publish.
    """

    def __init__(self, search_factory: Callable[[], BuildingSearch]):
        self._search_factory = search_factory
        self._lock = threading.Lock()
        self._generation = 0
        self.current_report: Optional[BuildingReport] = None
        self.current_error: Optional[str] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def begin(self) -> int:
        """Start a new search, superseding any in flight. Clears the visible state."""
        with self._lock:
            self._generation += 1
            self.current_report = None
            self.current_error = None
            return self._generation

    def publish(self, generation: int, report: Optional[BuildingReport] = None, error: Optional[str] = None) -> bool:
        """Make a finished search visible if it is still the latest one."""
        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding superseded search {generation} (current is {self._generation})")
                return False
            self.current_report = report
            self.current_error = error
            return True

    def search(self, text: str) -> Optional[BuildingReport]:
        """
        Run a search and publish its outcome.

        Returns:
            The report if it was published, otherwise None (superseded or
            unresolvable; see ``current_error`` for the latter)

        Raises:
            Exception: Anything other than AddressUnresolvable is re-raised
                       after a generic error is published
        """
        generation = self.begin()
        try:
            with self._search_factory() as building_search:
                report = building_search.run(text)
        except AddressUnresolvable as e:
            logger.error(f"Search error: {e}")
            self.publish(generation, error=str(e))
            return None
        except Exception as e:
            logger.exception(f"Search failed: {e}")
            self.publish(generation, error=SEARCH_FAILED)
            raise
        if self.publish(generation, report=report):
            return report
        return None
