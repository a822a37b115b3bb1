"""Apply catalog fixes to artifacts with backups and re-verification."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

import structlog

from game_audit.catalog import Catalog
from game_audit.detector import run_check
from game_audit.fixes.base import AnchorNotFoundError, Fix
from game_audit.store import ArtifactNotFoundError, ArtifactStore, Backup, BackupIndex, StoreError

logger = structlog.get_logger(__name__)

OutcomeStatus = Literal["applied", "skipped", "error"]

ALREADY_APPLIED = "already applied"
ARTIFACT_NOT_FOUND = "artifact not found"
ANCHOR_NOT_FOUND = "anchor not found"


@dataclass(frozen=True, slots=True)
class FixOutcome:
    """What happened when one fix met one artifact."""

    fix_id: str
    artifact: str
    status: OutcomeStatus
    reason: str = ""
    changes: int = 0
    backup: Backup | None = None
    before: dict[str, str] = field(default_factory=dict)
    after: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "fix_id": self.fix_id,
            "artifact": self.artifact,
            "status": self.status,
            "reason": self.reason,
            "changes": self.changes,
            "backup": self.backup.to_dict() if self.backup is not None else None,
            "before": dict(self.before),
            "after": dict(self.after),
        }


@dataclass(slots=True)
class FixRun:
    """Outcomes of one fix across its targets."""

    fix_id: str
    name: str
    category: str
    outcomes: list[FixOutcome] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        counts = {"applied": 0, "skipped": 0, "error": 0}
        for outcome in self.outcomes:
            counts[outcome.status] += 1
        return counts

    def to_dict(self) -> dict[str, object]:
        return {
            "fix_id": self.fix_id,
            "name": self.name,
            "category": self.category,
            "counts": self.counts(),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


@dataclass(slots=True)
class RemediationResult:
    runs: list[FixRun]
    backups: BackupIndex
    category: str | None = None

    def outcomes(self) -> list[FixOutcome]:
        return [outcome for run in self.runs for outcome in run.outcomes]

    def counts(self) -> dict[str, int]:
        counts = {"applied": 0, "skipped": 0, "error": 0}
        for outcome in self.outcomes():
            counts[outcome.status] += 1
        return counts

    @property
    def exit_code(self) -> int:
        return 1 if any(outcome.status == "error" for outcome in self.outcomes()) else 0


def apply_fix(
    fix: Fix,
    artifact: str,
    *,
    store: ArtifactStore,
    catalog: Catalog,
    backups: BackupIndex | None = None,
) -> FixOutcome:
    """Apply ``fix`` to one artifact.

    Artifacts that carry the fix marker, or already pass every associated check,
    are skipped untouched. The transformation is computed in memory before
    anything touches disk, so a missing anchor leaves neither a backup nor a
    partial write. The backup is taken immediately before the artifact is
    replaced.
    """
    try:
        text = store.read(artifact)
    except ArtifactNotFoundError:
        return _error(fix, artifact, ARTIFACT_NOT_FOUND)
    except StoreError as exc:
        return _error(fix, artifact, str(exc))

    before = _statuses(fix, catalog, text, artifact=artifact)
    if fix.is_applied(text) or _compliant(before):
        logger.info("fix_skipped", fix_id=fix.fix_id, artifact=artifact, reason=ALREADY_APPLIED)
        return FixOutcome(
            fix_id=fix.fix_id,
            artifact=artifact,
            status="skipped",
            reason=ALREADY_APPLIED,
            before=before,
            after=before,
        )

    try:
        transformation = fix.transform(text)
    except AnchorNotFoundError as exc:
        return _error(fix, artifact, ANCHOR_NOT_FOUND, detail=str(exc), before=before)

    backup: Backup | None = None
    try:
        backup = store.create_backup(artifact, text)
        if backups is not None:
            backups.record(backup)
        store.write(artifact, transformation.text)
    except StoreError as exc:
        return replace(_error(fix, artifact, str(exc), before=before), backup=backup)

    after = _statuses(fix, catalog, transformation.text, artifact=artifact)
    logger.info(
        "fix_applied",
        fix_id=fix.fix_id,
        artifact=artifact,
        changes=transformation.changes,
        backup=backup.backup_id,
    )
    return FixOutcome(
        fix_id=fix.fix_id,
        artifact=artifact,
        status="applied",
        changes=transformation.changes,
        backup=backup,
        before=before,
        after=after,
    )


def apply_fixes(
    catalog: Catalog,
    store: ArtifactStore,
    *,
    category: str | None = None,
    fix_ids: list[str] | None = None,
) -> RemediationResult:
    """Apply the selected catalog fixes to each of their target artifacts in order."""
    selected = catalog.select_fixes(category=category, fix_ids=fix_ids)
    backups = BackupIndex()
    runs: list[FixRun] = []

    for fix in selected:
        run = FixRun(fix_id=fix.fix_id, name=fix.name, category=fix.category)
        for artifact in fix.targets:
            try:
                outcome = apply_fix(fix, artifact, store=store, catalog=catalog, backups=backups)
            except Exception as exc:
                reason = f"{exc.__class__.__name__}: {exc}"
                outcome = _error(fix, artifact, reason)
            run.outcomes.append(outcome)
        runs.append(run)

    return RemediationResult(runs=runs, backups=backups, category=category)


def _statuses(fix: Fix, catalog: Catalog, text: str, *, artifact: str) -> dict[str, str]:
    statuses: dict[str, str] = {}
    for check_id in fix.check_ids:
        check = catalog.find_check(check_id)
        if check is None:
            continue
        statuses[check_id] = run_check(check, text, artifact=artifact).status
    return statuses


def _compliant(statuses: dict[str, str]) -> bool:
    # Checks missing from the catalog leave nothing to compare against.
    return bool(statuses) and all(status == "pass" for status in statuses.values())


def _error(
    fix: Fix,
    artifact: str,
    reason: str,
    *,
    detail: str = "",
    before: dict[str, str] | None = None,
) -> FixOutcome:
    logger.warning(
        "fix_error",
        fix_id=fix.fix_id,
        artifact=artifact,
        reason=reason,
        detail=detail or None,
    )
    return FixOutcome(
        fix_id=fix.fix_id,
        artifact=artifact,
        status="error",
        reason=reason,
        before=dict(before or {}),
    )
