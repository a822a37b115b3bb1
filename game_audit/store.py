"""Filesystem access for game artifacts and their backups."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

BACKUP_INFIX = ".backup."
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


class StoreError(RuntimeError):
    """Raised when reading or writing an artifact fails."""


class ArtifactNotFoundError(StoreError):
    """Raised when a configured artifact does not exist."""


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Return a sortable, filename-safe UTC timestamp."""
    return moment.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True, slots=True)
class Backup:
    """Verbatim copy of an artifact taken before a fix mutated it."""

    artifact: str
    path: Path
    created_at: datetime

    @property
    def backup_id(self) -> str:
        return self.path.name

    def to_dict(self) -> dict[str, str]:
        return {
            "artifact": self.artifact,
            "backup_id": self.backup_id,
            "path": str(self.path),
            "created_at": self.created_at.isoformat().replace("+00:00", "Z"),
        }


@dataclass(slots=True)
class BackupIndex:
    """Most recent backup per artifact within one remediation run."""

    latest: dict[str, Backup] = field(default_factory=dict)

    def record(self, backup: Backup) -> None:
        self.latest[backup.artifact] = backup

    def get(self, artifact: str) -> Backup | None:
        return self.latest.get(artifact)

    def __len__(self) -> int:
        return len(self.latest)


class ArtifactStore:
    """Reads, writes and backs up artifacts below a games directory.

    Writes go through a temporary file in the target directory followed by
    ``os.replace`` so an interrupted write never leaves a truncated artifact.
    Backups default to the artifact's own directory.
    """

    def __init__(
        self,
        root: Path,
        *,
        backup_dir: Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.root = root
        self.backup_dir = backup_dir
        self._clock = clock or utc_now

    def path_for(self, name: str) -> Path:
        candidate = Path(name)
        if not name or candidate.is_absolute() or ".." in candidate.parts:
            raise StoreError(f"invalid artifact name: {name!r}")
        return self.root / candidate

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> str:
        path = self.path_for(name)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise ArtifactNotFoundError(f"artifact not found: {name}") from exc
        except OSError as exc:
            raise StoreError(f"failed to read {name}: {exc}") from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StoreError(f"artifact is not valid UTF-8: {name}") from exc

    def write(self, name: str, text: str) -> None:
        path = self.path_for(name)
        _atomic_write(path, text.encode("utf-8"))

    def create_backup(self, name: str, text: str) -> Backup:
        """Persist ``text`` as a new backup of ``name`` and return it."""
        created_at = self._clock()
        directory = self._backup_directory(name)
        stem = f"{Path(name).name}{BACKUP_INFIX}{format_timestamp(created_at)}"
        payload = text.encode("utf-8")

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"failed to create backup directory {directory}: {exc}") from exc

        attempt = 0
        while True:
            candidate = directory / (stem if attempt == 0 else f"{stem}-{attempt}")
            try:
                with candidate.open("xb") as handle:
                    handle.write(payload)
            except FileExistsError:
                attempt += 1
                continue
            except OSError as exc:
                raise StoreError(f"failed to write backup for {name}: {exc}") from exc
            break

        backup = Backup(artifact=name, path=candidate, created_at=created_at)
        logger.info("backup_created", artifact=name, backup=str(candidate))
        return backup

    def list_backups(self, name: str) -> list[Backup]:
        """Return existing backups of ``name``, oldest first."""
        directory = self._backup_directory(name)
        prefix = f"{Path(name).name}{BACKUP_INFIX}"
        if not directory.is_dir():
            return []

        backups: list[tuple[tuple[str, int], Backup]] = []
        for entry in directory.iterdir():
            if not entry.is_file() or not entry.name.startswith(prefix):
                continue
            parsed = _parse_backup_suffix(entry.name[len(prefix) :])
            if parsed is None:
                continue
            created_at, stamp, attempt = parsed
            backups.append(
                ((stamp, attempt), Backup(artifact=name, path=entry, created_at=created_at))
            )
        backups.sort(key=lambda item: item[0])
        return [backup for _, backup in backups]

    def latest_backup(self, name: str) -> Backup | None:
        backups = self.list_backups(name)
        return backups[-1] if backups else None

    def restore(self, name: str, backup: Backup | None = None) -> Backup:
        """Copy a backup (the newest one by default) over the artifact."""
        chosen = backup or self.latest_backup(name)
        if chosen is None:
            raise StoreError(f"no backup found for {name}")
        try:
            payload = chosen.path.read_bytes()
        except OSError as exc:
            raise StoreError(f"failed to read backup {chosen.path}: {exc}") from exc
        _atomic_write(self.path_for(name), payload)
        logger.info("artifact_restored", artifact=name, backup=chosen.backup_id)
        return chosen

    def _backup_directory(self, name: str) -> Path:
        path = self.path_for(name)
        if self.backup_dir is not None:
            # Mirrors the artifact's subdirectory under the backup directory.
            return self.backup_dir / path.relative_to(self.root).parent
        return path.parent


def _parse_backup_suffix(suffix: str) -> tuple[datetime, str, int] | None:
    stamp, sep, attempt_text = suffix.partition("-")
    attempt = 0
    if sep:
        if not attempt_text.isdigit():
            return None
        attempt = int(attempt_text)
    try:
        created_at = datetime.strptime(stamp, TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        return None
    return (created_at, stamp, attempt)


def _atomic_write(path: Path, payload: bytes) -> None:
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(payload)
            temp_path = Path(handle.name)
    except OSError as exc:
        raise StoreError(f"failed to write {path}: {exc}") from exc

    try:
        if path.exists():
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise StoreError(f"failed to replace {path}: {exc}") from exc
