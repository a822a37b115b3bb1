"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from game_audit import __version__
from game_audit.checks import CATEGORY_TITLES
from game_audit.fixer import FixOutcome, RemediationResult
from game_audit.scoring import ScanResult

_STATUS_COLORS = {"pass": "green", "warning": "yellow", "fail": "red"}
_STATUS_LABELS = {"pass": "PASS", "warning": "WARN", "fail": "FAIL"}
_OUTCOME_COLORS = {"applied": "green", "skipped": "cyan", "error": "red"}


def render_scan_human(scan: ScanResult) -> str:
    """Render the portfolio summary with per-category and per-artifact lines."""
    summary = scan.summary
    lines: list[str] = [
        click.style(
            f"Compliance coverage: {summary.coverage}% ({summary.tier})",
            fg=_tier_color(summary.tier),
            bold=True,
        )
    ]
    if scan.category:
        lines.append(f"Category filter: {scan.category}")

    if summary.categories:
        lines.append(click.style("Per-category breakdown:", bold=True))
        for category, counts in summary.categories.items():
            title = CATEGORY_TITLES.get(category, category)
            lines.append(
                f"- {title}: {counts['pass']} pass, "
                f"{counts['warning']} warning, {counts['fail']} fail"
            )

    if scan.reports:
        lines.append(click.style("Per-artifact summary:", bold=True))
        for report in scan.reports:
            label = click.style(_STATUS_LABELS[report.status], fg=_STATUS_COLORS[report.status])
            counts = report.counts()
            lines.append(
                f"- [{label}] {report.artifact}: {report.score:.1f}/100 "
                f"({counts['pass']} pass, {counts['warning']} warning, {counts['fail']} fail)"
            )
            for result in report.results:
                if result.status == "pass":
                    continue
                lines.append(f"    {result.status}: [{result.check_id}] {result.message}")

    if scan.missing:
        lines.append(click.style("Missing artifacts:", bold=True, fg="yellow"))
        for artifact, reason in scan.missing.items():
            lines.append(f"- {artifact}: {reason}")

    lines.append(
        f"Totals: {summary.total} checks, {summary.passed} passed, "
        f"{summary.warnings} warnings, {summary.failed} failed"
    )
    lines.append(
        f"Artifacts: {summary.artifacts_scanned} scanned, {summary.artifacts_missing} missing"
    )
    lines.append(f"ROI: {summary.roi}%")
    if summary.avg_load_time_ms is not None:
        lines.append(f"Mean estimated load time: {summary.avg_load_time_ms}ms")
    return "\n".join(lines)


def render_scan_json(
    scan: ScanResult,
    *,
    root: str,
    generated_at: datetime | None = None,
) -> str:
    """Render stable JSON output for CI and automation."""
    payload = build_scan_payload(scan, root=root, generated_at=generated_at)
    return json.dumps(payload, sort_keys=True)


def build_scan_payload(
    scan: ScanResult,
    *,
    root: str,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the report record shared by the console and the persisted file."""
    return {
        "meta": _meta(root=root, category=scan.category, generated_at=generated_at),
        "summary": scan.summary.to_dict(),
        "artifacts": [report.to_dict() for report in scan.reports],
        "missing": dict(scan.missing),
    }


def render_fix_human(result: RemediationResult) -> str:
    """Render one block per fix with an outcome line per target artifact."""
    lines: list[str] = []
    for run in result.runs:
        counts = run.counts()
        lines.append(
            click.style(
                f"{run.fix_id} ({run.name}): {counts['applied']} applied, "
                f"{counts['skipped']} skipped, {counts['error']} errors",
                bold=True,
            )
        )
        for outcome in run.outcomes:
            lines.append(_outcome_line(outcome))

    if not result.runs:
        lines.append("No fixes selected.")

    totals = result.counts()
    lines.append(
        click.style(
            f"Total: {totals['applied']} applied, {totals['skipped']} skipped, "
            f"{totals['error']} errors",
            fg="red" if totals["error"] else "green",
            bold=True,
        )
    )
    return "\n".join(lines)


def render_fix_json(
    result: RemediationResult,
    *,
    root: str,
    generated_at: datetime | None = None,
) -> str:
    payload = build_fix_payload(result, root=root, generated_at=generated_at)
    return json.dumps(payload, sort_keys=True)


def build_fix_payload(
    result: RemediationResult,
    *,
    root: str,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    return {
        "meta": _meta(root=root, category=result.category, generated_at=generated_at),
        "counts": result.counts(),
        "fixes": [run.to_dict() for run in result.runs],
        "backups": {
            artifact: backup.to_dict() for artifact, backup in sorted(result.backups.latest.items())
        },
    }


def _outcome_line(outcome: FixOutcome) -> str:
    label = click.style(outcome.status.upper(), fg=_OUTCOME_COLORS[outcome.status])
    line = f"- [{label}] {outcome.artifact}"
    if outcome.status == "applied":
        line += f": {outcome.changes} change(s)"
        if outcome.backup is not None:
            line += f", backup {outcome.backup.backup_id}"
        transitions = [
            f"{check_id} {outcome.before.get(check_id, '?')} -> {status}"
            for check_id, status in outcome.after.items()
        ]
        if transitions:
            line += f" ({', '.join(transitions)})"
    elif outcome.reason:
        line += f": {outcome.reason}"
    return line


def _meta(*, root: str, category: str | None, generated_at: datetime | None) -> dict[str, Any]:
    moment = generated_at or datetime.now(tz=UTC)
    return {
        "generated_at": moment.replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "version": __version__,
        "root": root,
        "category": category,
    }


def _tier_color(tier: str) -> str:
    if tier in {"excellent", "good"}:
        return "green"
    if tier == "needs improvement":
        return "yellow"
    return "red"
