"""Run checks against artifact text with per-check failure isolation."""

from __future__ import annotations

from dataclasses import replace

import structlog

from game_audit.checks.base import Check, CheckResult, clamp_score

logger = structlog.get_logger(__name__)


def run_check(check: Check, text: str, *, artifact: str) -> CheckResult:
    """Evaluate one check; an exception becomes a failed result instead of propagating."""
    try:
        result = check.evaluate(text, artifact=artifact)
    except Exception as exc:
        reason = f"{exc.__class__.__name__}: {exc}"
        logger.warning(
            "detector_error",
            check_id=check.check_id,
            artifact=artifact,
            error=reason,
        )
        return CheckResult(
            check_id=check.check_id,
            name=check.name,
            category=check.category,
            status="fail",
            score=0,
            message=f"detector error: {reason}",
        )

    clamped = clamp_score(result.score)
    if clamped != result.score:
        result = replace(result, score=clamped)
    return result


def run_checks(checks: list[Check], text: str, *, artifact: str) -> list[CheckResult]:
    """Evaluate checks in order against one artifact."""
    return [run_check(check, text, artifact=artifact) for check in checks]
