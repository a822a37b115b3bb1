"""Tests for composite grading and portfolio aggregation."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from game_audit.aggregation import (
    build_artifact_report,
    composite_score,
    composite_status,
    coverage_percent,
    roi_percent,
    status_tier,
    summarize_portfolio,
)
from game_audit.checks.base import CheckResult
from game_audit.scoring import ScanResult


def _result(
    check_id: str,
    status: str,
    score: int,
    *,
    category: str = "visual",
    metric: float | None = None,
) -> CheckResult:
    return CheckResult(
        check_id=check_id,
        name=check_id.replace("_", " ").title(),
        category=category,
        status=status,  # type: ignore[arg-type]
        score=score,
        message="",
        metric=metric,
    )


def _portfolio_with_eight_warnings() -> list:
    reports = []
    for index in range(10):
        results = [_result(f"check_{slot}", "pass", 100) for slot in range(8)]
        if index < 8:
            results[0] = _result("check_0", "warning", 75)
        reports.append(build_artifact_report(f"game-{index}.html", results))
    return reports


def test_ten_artifacts_with_ninety_percent_passing_grade_good() -> None:
    reports = _portfolio_with_eight_warnings()

    summary = summarize_portfolio(reports)
    scan = ScanResult(reports=reports, summary=summary)

    assert (summary.total, summary.passed, summary.warnings, summary.failed) == (80, 72, 8, 0)
    assert summary.coverage == 90
    assert summary.tier == "good"
    assert summary.roi == 830
    assert summary.status == "warning"
    assert scan.exit_code == 0
    assert summary.passing_artifacts_by_check["check_0"] == 2
    assert summary.passing_artifacts_by_check["check_7"] == 10


def test_any_failed_result_sets_exit_code() -> None:
    results = [_result("a", "pass", 100), _result("b", "fail", 0)]
    report = build_artifact_report("game.html", results)

    summary = summarize_portfolio([report])

    assert summary.status == "fail"
    assert ScanResult(reports=[report], summary=summary).exit_code == 1


def test_coverage_handles_empty_portfolio() -> None:
    summary = summarize_portfolio([])

    assert coverage_percent(0, 0) == 100
    assert summary.coverage == 100
    assert summary.tier == "excellent"
    assert summary.status == "pass"
    assert summary.avg_load_time_ms is None


def test_coverage_rounds_half_up() -> None:
    assert coverage_percent(2, 3) == 67
    assert coverage_percent(1, 8) == 13
    assert coverage_percent(0, 5) == 0


def test_composite_score_is_exact_mean() -> None:
    results = [_result("a", "pass", 100), _result("b", "fail", 0), _result("c", "fail", 0)]

    assert composite_score(results) == 100 / 3
    assert composite_score([_result("a", "pass", 100), _result("b", "warning", 75)]) == 87.5
    assert composite_score([]) == 100.0


def test_composite_status_warning_limit() -> None:
    two_warnings = [_result(f"w{index}", "warning", 50) for index in range(2)]
    three_warnings = [_result(f"w{index}", "warning", 50) for index in range(3)]

    assert composite_status(two_warnings) == "pass"
    assert composite_status(three_warnings) == "warning"
    assert composite_status(two_warnings, warning_limit=1) == "warning"
    assert composite_status([*two_warnings, _result("f", "fail", 0)]) == "fail"


@pytest.mark.parametrize(
    ("coverage", "tier"),
    [
        (100, "excellent"),
        (95, "excellent"),
        (94, "good"),
        (80, "good"),
        (79, "needs improvement"),
        (60, "needs improvement"),
        (59, "critical"),
        (0, "critical"),
    ],
)
def test_status_tier_boundaries(coverage: int, tier: str) -> None:
    assert status_tier(coverage) == tier


def test_roi_uses_integer_arithmetic() -> None:
    assert roi_percent(0) == 200
    assert roi_percent(100) == 900
    assert roi_percent(33) == 431


def test_mean_load_time_rounds_half_up() -> None:
    reports = [
        build_artifact_report(
            "a.html", [_result("load_time", "pass", 95, category="performance", metric=10.5)]
        ),
        build_artifact_report(
            "b.html", [_result("load_time", "pass", 95, category="performance", metric=11.0)]
        ),
    ]

    assert summarize_portfolio(reports).avg_load_time_ms == 11


def test_summary_equality_ignores_timestamp() -> None:
    reports = _portfolio_with_eight_warnings()

    first = summarize_portfolio(reports, generated_at=datetime(2026, 1, 1, tzinfo=UTC))
    second = summarize_portfolio(reports, generated_at=datetime(2026, 6, 1, tzinfo=UTC))

    assert first == second
    assert first.to_dict()["generated_at"] == "2026-01-01T00:00:00Z"


def test_category_breakdown_counts_statuses() -> None:
    report = build_artifact_report(
        "game.html",
        [
            _result("a", "pass", 100, category="visual"),
            _result("b", "warning", 50, category="visual"),
            _result("c", "fail", 0, category="sound"),
        ],
    )

    summary = summarize_portfolio([report], missing_count=2)

    assert summary.categories == {
        "visual": {"pass": 1, "warning": 1, "fail": 0},
        "sound": {"pass": 0, "warning": 0, "fail": 1},
    }
    assert summary.artifacts_missing == 2
    assert report.counts() == {"pass": 1, "warning": 1, "fail": 1}
    assert list(report.by_category()) == ["visual", "sound"]
