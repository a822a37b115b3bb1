"""Scan orchestration: read artifacts, run catalog checks, aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import structlog

from game_audit.aggregation import (
    COMPOSITE_WARNING_LIMIT,
    ArtifactReport,
    PortfolioSummary,
    build_artifact_report,
    summarize_portfolio,
)
from game_audit.catalog import Catalog
from game_audit.detector import run_checks
from game_audit.store import ArtifactNotFoundError, ArtifactStore, StoreError

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class ScanResult:
    """Reports for every readable artifact plus the ones that could not be read."""

    reports: list[ArtifactReport]
    summary: PortfolioSummary
    missing: dict[str, str] = field(default_factory=dict)
    category: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.summary.failed else 0


def score_artifact_text(
    catalog: Catalog,
    artifact: str,
    text: str,
    *,
    category: str | None = None,
    warning_limit: int = COMPOSITE_WARNING_LIMIT,
) -> ArtifactReport:
    """Run the catalog's checks against already loaded text."""
    results = run_checks(catalog.checks(category), text, artifact=artifact)
    return build_artifact_report(artifact, results, warning_limit=warning_limit)


def scan_portfolio(
    store: ArtifactStore,
    catalog: Catalog,
    artifacts: list[str],
    *,
    category: str | None = None,
    warning_limit: int = COMPOSITE_WARNING_LIMIT,
    generated_at: datetime | None = None,
) -> ScanResult:
    """Scan each artifact in order; unreadable ones are excluded from aggregation."""
    checks = catalog.checks(category)
    reports: list[ArtifactReport] = []
    missing: dict[str, str] = {}

    for artifact in artifacts:
        try:
            text = store.read(artifact)
        except ArtifactNotFoundError:
            missing[artifact] = "artifact not found"
            logger.warning("artifact_missing", artifact=artifact)
            continue
        except StoreError as exc:
            missing[artifact] = str(exc)
            logger.warning("artifact_unreadable", artifact=artifact, error=str(exc))
            continue

        results = run_checks(checks, text, artifact=artifact)
        reports.append(build_artifact_report(artifact, results, warning_limit=warning_limit))

    summary = summarize_portfolio(
        reports,
        missing_count=len(missing),
        generated_at=generated_at,
    )
    return ScanResult(reports=reports, summary=summary, missing=missing, category=category)
