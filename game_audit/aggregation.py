"""Fold check results into artifact reports and a portfolio summary.

Everything here is a pure function of its inputs. Percentages use integer
arithmetic with halves rounded up so summaries are reproducible exactly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from game_audit.checks.base import CheckResult, Status, ratio_percent

# An artifact with no failures still grades as a warning once it has more
# warnings than this.
COMPOSITE_WARNING_LIMIT = 2

ROI_BASELINE_PERCENT = 200
ROI_COVERAGE_SCALE_PERCENT = 700

# Lower coverage bounds for each tier, best first.
TIER_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (95, "excellent"),
    (80, "good"),
    (60, "needs improvement"),
)
LOWEST_TIER = "critical"

LOAD_TIME_CHECK_ID = "load_time"

STATUSES: tuple[Status, ...] = ("pass", "warning", "fail")


@dataclass(frozen=True, slots=True)
class ArtifactReport:
    """All results for one artifact with its composite grade."""

    artifact: str
    results: tuple[CheckResult, ...]
    score: float
    status: Status

    def by_category(self) -> dict[str, list[CheckResult]]:
        grouped: dict[str, list[CheckResult]] = {}
        for result in self.results:
            grouped.setdefault(result.category, []).append(result)
        return grouped

    def counts(self) -> dict[str, int]:
        return _status_counts(self.results)

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "score": self.score,
            "status": self.status,
            "counts": self.counts(),
            "categories": {
                category: [result.to_dict() for result in results]
                for category, results in self.by_category().items()
            },
        }


@dataclass(frozen=True, slots=True)
class PortfolioSummary:
    """Portfolio-wide totals. Equality ignores ``generated_at``."""

    total: int
    passed: int
    warnings: int
    failed: int
    coverage: int
    roi: int
    tier: str
    status: Status
    artifacts_scanned: int
    artifacts_missing: int
    avg_load_time_ms: int | None
    passing_artifacts_by_check: dict[str, int]
    categories: dict[str, dict[str, int]]
    generated_at: datetime | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, object]:
        generated_at = None
        if self.generated_at is not None:
            generated_at = self.generated_at.isoformat().replace("+00:00", "Z")
        return {
            "total": self.total,
            "passed": self.passed,
            "warnings": self.warnings,
            "failed": self.failed,
            "coverage": self.coverage,
            "roi": self.roi,
            "tier": self.tier,
            "status": self.status,
            "artifacts_scanned": self.artifacts_scanned,
            "artifacts_missing": self.artifacts_missing,
            "avg_load_time_ms": self.avg_load_time_ms,
            "passing_artifacts_by_check": dict(self.passing_artifacts_by_check),
            "categories": {name: dict(counts) for name, counts in self.categories.items()},
            "generated_at": generated_at,
        }


def build_artifact_report(
    artifact: str,
    results: Iterable[CheckResult],
    *,
    warning_limit: int = COMPOSITE_WARNING_LIMIT,
) -> ArtifactReport:
    ordered = tuple(results)
    return ArtifactReport(
        artifact=artifact,
        results=ordered,
        score=composite_score(ordered),
        status=composite_status(ordered, warning_limit=warning_limit),
    )


def composite_score(results: Iterable[CheckResult]) -> float:
    """Exact arithmetic mean of result scores; 100.0 when there are none."""
    scores = [result.score for result in results]
    if not scores:
        return 100.0
    return sum(scores) / len(scores)


def composite_status(
    results: Iterable[CheckResult],
    *,
    warning_limit: int = COMPOSITE_WARNING_LIMIT,
) -> Status:
    counts = _status_counts(results)
    if counts["fail"]:
        return "fail"
    if counts["warning"] > warning_limit:
        return "warning"
    return "pass"


def coverage_percent(passed: int, total: int) -> int:
    if total == 0:
        return 100
    return ratio_percent(passed, total)


def roi_percent(coverage: int) -> int:
    return ROI_BASELINE_PERCENT + ROI_COVERAGE_SCALE_PERCENT * coverage // 100


def status_tier(coverage: int) -> str:
    for lower_bound, tier in TIER_THRESHOLDS:
        if coverage >= lower_bound:
            return tier
    return LOWEST_TIER


def category_breakdown(reports: Iterable[ArtifactReport]) -> dict[str, dict[str, int]]:
    """Count pass/warning/fail per category across all reports."""
    breakdown: dict[str, dict[str, int]] = {}
    for report in reports:
        for result in report.results:
            counts = breakdown.setdefault(result.category, _empty_counts())
            counts[result.status] += 1
    return breakdown


def summarize_portfolio(
    reports: Iterable[ArtifactReport],
    *,
    missing_count: int = 0,
    generated_at: datetime | None = None,
) -> PortfolioSummary:
    """Fold artifact reports into portfolio totals."""
    ordered = list(reports)
    results = [result for report in ordered for result in report.results]
    counts = _status_counts(results)
    total = len(results)
    coverage = coverage_percent(counts["pass"], total)

    passing_by_check: dict[str, int] = {}
    load_times: list[float] = []
    for result in results:
        passing_by_check.setdefault(result.check_id, 0)
        if result.status == "pass":
            passing_by_check[result.check_id] += 1
        if result.check_id == LOAD_TIME_CHECK_ID and result.metric is not None:
            load_times.append(result.metric)

    status: Status = "pass"
    if counts["fail"]:
        status = "fail"
    elif counts["warning"]:
        status = "warning"

    return PortfolioSummary(
        total=total,
        passed=counts["pass"],
        warnings=counts["warning"],
        failed=counts["fail"],
        coverage=coverage,
        roi=roi_percent(coverage),
        tier=status_tier(coverage),
        status=status,
        artifacts_scanned=len(ordered),
        artifacts_missing=missing_count,
        avg_load_time_ms=_rounded_mean(load_times),
        passing_artifacts_by_check=passing_by_check,
        categories=category_breakdown(ordered),
        generated_at=generated_at,
    )


def _rounded_mean(values: list[float]) -> int | None:
    if not values:
        return None
    return math.floor(sum(values) / len(values) + 0.5)


def _status_counts(results: Iterable[CheckResult]) -> dict[str, int]:
    counts = _empty_counts()
    for result in results:
        counts[result.status] += 1
    return counts


def _empty_counts() -> dict[str, int]:
    return {status: 0 for status in STATUSES}
