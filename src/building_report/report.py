"""Assemble the final building report and render it for output."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from .models import (
    BuildingReport,
    CanonicalAddress,
    DiagnosticTrace,
    HealthScore,
    RentComparison,
    ViolationCounts,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def assemble_report(
    address: CanonicalAddress,
    health_score: HealthScore,
    counts: ViolationCounts,
    issues: list[str],
    rent_comparison: RentComparison,
    trace: Optional[DiagnosticTrace] = None,
    clock: Callable[[], datetime] = utc_now,
) -> BuildingReport:
    """Compose already-computed pieces into one immutable report."""
    return BuildingReport(
        address=address,
        health_score=health_score,
        counts=counts,
        total_records=counts.total,
        issues=tuple(issues),
        rent_comparison=rent_comparison,
        generated_at=clock(),
        trace=trace,
    )


def report_to_dict(report: BuildingReport) -> dict[str, Any]:
    """JSON-ready view of a report."""
    data = asdict(report)
    data["address"]["formatted"] = report.address.formatted
    data["health_score"]["grade"] = report.health_score.grade.value
    data["issues"] = list(report.issues)
    data["generated_at"] = report.generated_at.isoformat()
    if report.trace is not None:
        data["trace"]["sources"] = report.trace.sources
        data["trace"]["strategy_counts"] = dict(report.trace.strategy_counts)
    return data
