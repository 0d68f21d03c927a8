import threading
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from building_report.exceptions import AddressUnresolvable, CollaboratorUnavailable
from building_report.models import Grade, RegistryEntry
from building_report.pipeline import SEARCH_FAILED, BuildingSearch, SearchSession
from building_report.stabilization import RentStabilizationRegistry

from fakes import BlockingGeocoder, FakeGeocoder, FakePluto, FakeViolations, geocode_candidate, hpd_row

FIXED_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_search(geocoder=None, violations=None, pluto=None, registry=None, clock=lambda: FIXED_TIME):
    return BuildingSearch(
        geocoder=geocoder if geocoder is not None else FakeGeocoder(candidates=[geocode_candidate()]),
        violations_service=violations if violations is not None else FakeViolations(),
        property_service=pluto if pluto is not None else FakePluto(),
        registry=registry,
        clock=clock,
    )


def test_full_report():
    violations = FakeViolations(
        prefix=[
            hpd_row("Provide adequate heat", "A"),
            hpd_row("Abate the nuisance of mice", "B"),
            hpd_row("Repair the leaky faucet", "C"),
        ]
    )
    pluto = FakePluto(rows=[{"yearbuilt": "2016", "unitsres": "120", "unitsstab2007": "3"}])
    registry = RentStabilizationRegistry(
        [RegistryEntry(number="350", street="5 Avenue", borough="Manhattan", zip="10118")]
    )
    report = make_search(violations=violations, pluto=pluto, registry=registry).run("350 5th ave, manhatten")

    assert report.address.formatted == "350 5 AVENUE, Manhattan, NY"
    assert report.health_score.grade == Grade.C
    assert report.health_score.weight == 14
    assert (report.counts.class_a, report.counts.class_b, report.counts.class_c) == (1, 1, 1)
    assert report.total_records == 3
    assert report.issues == ("Heat/Hot Water", "Pest Infestation", "Plumbing")

    rent = report.rent_comparison
    assert rent.estimated_rent == 6038
    assert rent.baseline_rent == 4200
    assert rent.stabilization.is_stabilized
    assert rent.stabilization.source == "Community Registry + Tax Bills"
    assert rent.total_units == 120
    assert rent.year_built == 2016

    assert report.generated_at == FIXED_TIME
    assert report.trace.winning_strategy == "prefix"
    assert report.trace.sources == "HPD: 3"
    assert report.trace.searched_for == "350 5 AVENUE, Manhattan"


def test_geocoder_receives_normalized_text():
    geocoder = FakeGeocoder(candidates=[geocode_candidate()])
    make_search(geocoder=geocoder).run("350 5th ave, manhatten")
    assert geocoder.calls == ["350 5th Avenue, Manhattan, NY"]


def test_no_data_is_a_valid_grade_a_report():
    report = make_search().run("350 5th Avenue, Manhattan")
    assert report.health_score.grade == Grade.A
    assert report.counts.total == 0
    assert report.issues == ("No major issues found",)
    assert not report.rent_comparison.stabilization.is_stabilized
    assert report.rent_comparison.estimated_rent == 4200
    assert report.trace.winning_strategy is None


def test_collaborator_failures_do_not_abort_search():
    search = make_search(
        geocoder=FakeGeocoder(error=CollaboratorUnavailable("geosearch", "timeout")),
        violations=FakeViolations(borough=[hpd_row("mold in bathroom", "B", street="5TH AVE")], errors={"exact", "prefix"}),
        pluto=FakePluto(error=CollaboratorUnavailable("pluto", "503")),
    )
    report = search.run("350 5th Avenue, Manhattan, NY")

    assert report.address.source == "parser"
    assert report.trace.winning_strategy == "borough"
    assert report.issues == ("Mold",)
    assert report.rent_comparison.year_built is None
    stages = sorted(f.stage for f in report.trace.failures)
    assert stages == ["geocode", "pluto", "violations:exact", "violations:prefix"]


def test_unresolvable_address():
    with pytest.raises(AddressUnresolvable):
        make_search(geocoder=FakeGeocoder()).run("somewhere in brooklyn")


def test_blank_input():
    with pytest.raises(AddressUnresolvable, match="Please enter an address"):
        make_search().run("   ")


def test_replaying_responses_gives_identical_reports_except_timestamp():
    times = iter([FIXED_TIME, datetime(2025, 1, 1, tzinfo=timezone.utc)])

    def build():
        return make_search(
            violations=FakeViolations(exact=[hpd_row("roach infestation", "B")]),
            pluto=FakePluto(rows=[{"yearbuilt": "1931", "unitsres": "20"}]),
            clock=lambda: next(times),
        )

    first = build().run("350 5th Avenue, Manhattan")
    second = build().run("350 5th Avenue, Manhattan")
    assert first != second
    assert replace(first, generated_at=None) == replace(second, generated_at=None)


def test_report_is_immutable():
    report = make_search().run("350 5th Avenue, Manhattan")
    with pytest.raises(AttributeError):
        report.total_records = 10


def test_session_publishes_latest_report():
    session = SearchSession(make_search)
    report = session.search("350 5th Avenue, Manhattan")
    assert session.current_report is report
    assert session.current_error is None


def test_session_records_unresolvable_error():
    session = SearchSession(lambda: make_search(geocoder=FakeGeocoder()))
    assert session.search("no digits here") is None
    assert session.current_report is None
    assert session.current_error == "Could not parse address"


def test_superseded_search_never_becomes_visible():
    slow_geocoder = BlockingGeocoder(candidates=[geocode_candidate(housenumber="1", street="Slow Street")])
    searches = iter(
        [
            make_search(geocoder=slow_geocoder),
            make_search(geocoder=FakeGeocoder(candidates=[geocode_candidate(housenumber="2", street="Fast Street")])),
        ]
    )
    session = SearchSession(lambda: next(searches))

    results = {}
    first = threading.Thread(target=lambda: results.setdefault("a", session.search("1 Slow Street, Manhattan")))
    first.start()
    assert slow_geocoder.started.wait(timeout=5)

    report_b = session.search("2 Fast Street, Manhattan")
    assert session.current_report is report_b

    slow_geocoder.release.set()
    first.join(timeout=5)

    assert results["a"] is None
    assert session.current_report is report_b
    assert session.current_report.address.street == "FAST STREET"


def test_publish_rejects_stale_generation():
    session = SearchSession(make_search)
    stale = session.begin()
    current = session.begin()
    assert not session.publish(stale, error="late")
    assert session.publish(current, error="fresh")
    assert session.current_error == "fresh"


def test_building_search_closes_collaborators_on_exit():
    geocoder, violations, pluto = FakeGeocoder(candidates=[geocode_candidate()]), FakeViolations(), FakePluto()
    with make_search(geocoder=geocoder, violations=violations, pluto=pluto) as search:
        search.run("350 5th Avenue, Manhattan")
        assert not geocoder.closed
    assert geocoder.closed and violations.closed and pluto.closed


def test_close_skips_collaborators_without_close():
    class NoClose:
        def find(self, address_text, limit=50):
            return []

    make_search(pluto=NoClose()).close()


def test_from_config_clients_are_closeable():
    with BuildingSearch.from_config(app_token=None, timeout=1) as search:
        assert search.geocoder.timeout == 1
    assert callable(search.violations_service.close)
    assert callable(search.property_service.close)


def test_session_closes_each_search():
    geocoders = []

    def factory():
        geocoder = FakeGeocoder(candidates=[geocode_candidate()])
        geocoders.append(geocoder)
        return make_search(geocoder=geocoder)

    session = SearchSession(factory)
    session.search("350 5th Avenue, Manhattan")
    session.search("no digits here")
    assert [g.closed for g in geocoders] == [True, True]


def test_session_publishes_error_on_unexpected_failure():
    def broken_clock():
        raise RuntimeError("clock unavailable")

    geocoder = FakeGeocoder(candidates=[geocode_candidate()])
    session = SearchSession(lambda: make_search(geocoder=geocoder, clock=broken_clock))

    with pytest.raises(RuntimeError):
        session.search("350 5th Avenue, Manhattan")
    assert session.current_report is None
    assert session.current_error == SEARCH_FAILED
    assert geocoder.closed
