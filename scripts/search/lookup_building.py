"""
Look up a single NYC building and print its report.

This script:
1. Loads the rent-stabilized registry (if present)
2. Resolves the address via NYC GeoSearch (falls back to offline parsing)
3. Queries HPD violations and PLUTO on NYC Open Data
4. Prints the graded report, or writes it as JSON

Input:  free-text address, optional data/registry/rent_stabilized_buildings.csv
Output: stdout, optionally outputs/reports/<address>_<date>.json

Usage:
    python scripts/search/lookup_building.py "350 5th ave, manhatten"
    python scripts/search/lookup_building.py "12-34 31st Ave, Queens" --json --save
"""

import argparse
import json
import re
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "src"))

from building_report.exceptions import AddressUnresolvable
from building_report.io_utils import load_registry_csv, write_report_json
from building_report.logging_utils import (
    setup_logger,
    get_timestamped_log_filename,
    log_step_start,
    log_step_complete,
)
from building_report.paths import REPORTS_DIR, ensure_dirs_exist, get_dated_filename, get_registry_path
from building_report.pipeline import BuildingSearch
from building_report.report import report_to_dict
from building_report.stabilization import RentStabilizationRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build a habitability report for an NYC address.")
    parser.add_argument("address", help="Street address, e.g. '350 5th Ave, Manhattan'")
    parser.add_argument(
        "--registry",
        type=Path,
        default=get_registry_path(),
        help="Rent-stabilized registry CSV (default: data/registry/rent_stabilized_buildings.csv)",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--save", action="store_true", help="Also write the report under outputs/reports/.")
    return parser


def load_registry(path: Path, logger) -> RentStabilizationRegistry:
    if not path.exists():
        logger.warning(f"Registry not found at {path}; registry matches disabled")
        return RentStabilizationRegistry()
    try:
        return RentStabilizationRegistry(load_registry_csv(path))
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load registry: {e}")
        return RentStabilizationRegistry()


def print_summary(report) -> None:
    rent = report.rent_comparison
    stab = rent.stabilization
    print()
    print(f"Address:      {report.address.formatted}")
    print(f"Health score: {report.health_score.grade.value} (weight {report.health_score.weight})")
    print(
        f"HPD violations: {report.counts.total} "
        f"(A: {report.counts.class_a}, B: {report.counts.class_b}, C: {report.counts.class_c})"
    )
    print(f"Issues:       {', '.join(report.issues)}")
    print(f"Rent estimate: ${rent.estimated_rent:,} (borough median ${rent.baseline_rent:,})")
    if stab.is_stabilized:
        print(f"Rent stabilized: yes ({stab.source}, {stab.stabilized_units} units on tax bills)")
    elif stab.advisory:
        print(f"Rent stabilized: {stab.advisory}")
    else:
        print("Rent stabilized: no record")
    if report.trace is not None:
        print(f"Searched for: {report.trace.searched_for} [{report.trace.sources}]")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_file = get_timestamped_log_filename("lookup_building")
    # Keep stdout clean for JSON output; the log file still gets everything
    logger = setup_logger("building_report", log_file=log_file, console_output=not args.json)

    log_step_start(logger, f"Lookup {args.address}")
    ensure_dirs_exist()
    registry = load_registry(args.registry, logger)

    try:
        with BuildingSearch.from_config(registry=registry) as search:
            report = search.run(args.address)
    except AddressUnresolvable as e:
        logger.error(f"Search error: {e}")
        return 1

    data = report_to_dict(report)
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        print_summary(report)

    if args.save:
        slug = re.sub(r"[^A-Za-z0-9]+", "_", f"{report.address.housenumber} {report.address.street}").strip("_")
        filepath = REPORTS_DIR / get_dated_filename(slug, "json")
        write_report_json(data, filepath)
        logger.info(f"Saved report to {filepath}")

    log_step_complete(logger, f"Lookup {args.address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
