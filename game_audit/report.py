"""Persist compliance reports as timestamped JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog

from game_audit.store import format_timestamp, utc_now

logger = structlog.get_logger(__name__)

REPORT_PREFIX = "compliance-report-"


@dataclass(frozen=True, slots=True)
class ReportWrite:
    """Where a report landed, or why it did not."""

    path: Path | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def report_filename(moment: datetime) -> str:
    return f"{REPORT_PREFIX}{format_timestamp(moment)}.json"


def write_report(
    payload: dict[str, Any],
    report_dir: Path,
    *,
    now: datetime | None = None,
) -> ReportWrite:
    """Write ``payload`` to a new report file.

    The file is created exclusively and never merged with earlier reports.
    Failures are logged and returned rather than raised.
    """
    path = report_dir / report_filename(now or utc_now())
    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
    except OSError as exc:
        error = f"{exc.__class__.__name__}: {exc}"
        logger.warning("report_write_failed", path=str(path), error=error)
        return ReportWrite(path=None, error=error)

    logger.info("report_written", path=str(path))
    return ReportWrite(path=path)
