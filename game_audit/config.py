"""Configuration loading for game-audit."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from game_audit.aggregation import COMPOSITE_WARNING_LIMIT
from game_audit.catalog import DEFAULT_ARTIFACTS, Catalog, build_catalog

CONFIG_FILENAMES = (".game-audit.toml", "game-audit.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("game_audit", "game-audit")


@dataclass(slots=True)
class ChecksConfig:
    """Check selection."""

    enable: list[str] | None = None
    disable: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enable": list(self.enable) if self.enable is not None else None,
            "disable": list(self.disable),
        }


@dataclass(slots=True)
class FixesConfig:
    """Fix selection and per-fix target overrides."""

    enable: list[str] | None = None
    disable: list[str] = field(default_factory=list)
    targets: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enable": list(self.enable) if self.enable is not None else None,
            "disable": list(self.disable),
            "targets": {fix_id: list(names) for fix_id, names in self.targets.items()},
        }


@dataclass(slots=True)
class ScoringConfig:
    composite_warning_limit: int = COMPOSITE_WARNING_LIMIT

    def to_dict(self) -> dict[str, Any]:
        return {"composite_warning_limit": self.composite_warning_limit}


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    games_dir: str = "games"
    report_dir: str = "reports"
    backup_dir: str = ""
    format: str = "human"
    save_report: bool = True
    artifacts: list[str] = field(default_factory=lambda: list(DEFAULT_ARTIFACTS))
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    fixes: FixesConfig = field(default_factory=FixesConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "games_dir": self.games_dir,
            "report_dir": self.report_dir,
            "backup_dir": self.backup_dir,
            "format": self.format,
            "save_report": self.save_report,
            "artifacts": list(self.artifacts),
            "checks": self.checks.to_dict(),
            "fixes": self.fixes.to_dict(),
            "scoring": self.scoring.to_dict(),
            "source": self.source,
        }

    def games_path(self, root: Path) -> Path:
        return _under(root, self.games_dir)

    def report_path(self, root: Path) -> Path:
        return _under(root, self.report_dir)

    def backup_path(self, root: Path) -> Path | None:
        if not self.backup_dir:
            return None
        return _under(root, self.backup_dir)

    def catalog(self) -> Catalog:
        """Build the catalog this configuration selects."""
        return build_catalog(
            enabled_check_ids=self.checks.enable,
            disabled_check_ids=self.checks.disable,
            enabled_fix_ids=self.fixes.enable,
            disabled_fix_ids=self.fixes.disable,
            fix_targets=self.fixes.targets,
        )


def load_app_config(root: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or project-local files with precedence."""
    root = root.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (root / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = root / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = root / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    artifact_lines = [f'  "{name}",' for name in DEFAULT_ARTIFACTS]
    return "\n".join(
        [
            'games_dir = "games"',
            'report_dir = "reports"',
            "# Empty keeps backups next to each artifact.",
            'backup_dir = ""',
            'format = "human"',
            "save_report = true",
            "artifacts = [",
            *artifact_lines,
            "]",
            "",
            "[checks]",
            '# enable = ["null_safety", "responsive_design"]',
            "disable = []",
            "",
            "[fixes]",
            '# enable = ["responsive", "error_handler"]',
            "disable = []",
            "",
            "[fixes.targets]",
            '# responsive = ["color-match-game.html"]',
            "",
            "[scoring]",
            f"composite_warning_limit = {COMPOSITE_WARNING_LIMIT}",
            "",
        ]
    )


def _under(root: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else root / path


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    checks_mapping = _as_table(mapping.get("checks"), "checks")
    fixes_mapping = _as_table(mapping.get("fixes"), "fixes")
    scoring_mapping = _as_table(mapping.get("scoring"), "scoring")

    artifacts = mapping.get("artifacts")
    artifact_names = list(DEFAULT_ARTIFACTS) if artifacts is None else _as_str_list(artifacts)

    warning_limit = _as_int(
        scoring_mapping.get("composite_warning_limit", COMPOSITE_WARNING_LIMIT),
        "scoring.composite_warning_limit",
    )
    if warning_limit < 0:
        raise ValueError("scoring.composite_warning_limit must be >= 0")

    config = AppConfig(
        games_dir=_as_str(mapping.get("games_dir", "games"), "games_dir"),
        report_dir=_as_str(mapping.get("report_dir", "reports"), "report_dir"),
        backup_dir=_as_str(mapping.get("backup_dir", ""), "backup_dir"),
        format=_as_choice(mapping.get("format", "human"), {"human", "json"}, "format"),
        save_report=_as_bool(mapping.get("save_report", True), "save_report"),
        artifacts=artifact_names,
        checks=ChecksConfig(
            enable=_as_str_list_or_none(checks_mapping.get("enable")),
            disable=_as_str_list(checks_mapping.get("disable")),
        ),
        fixes=FixesConfig(
            enable=_as_str_list_or_none(fixes_mapping.get("enable")),
            disable=_as_str_list(fixes_mapping.get("disable")),
            targets=_as_str_list_mapping(fixes_mapping.get("targets"), "fixes.targets"),
        ),
        scoring=ScoringConfig(composite_warning_limit=warning_limit),
        source=source,
    )
    # Unknown check or fix ids surface here rather than at first use.
    config.catalog()
    return config


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Expected a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Expected a list of strings")
        items.append(item)
    return items


def _as_str_list_or_none(value: Any) -> list[str] | None:
    if value is None:
        return None
    return _as_str_list(value)


def _as_str_list_mapping(value: Any, field_name: str) -> dict[str, list[str]]:
    table = _as_table(value, field_name)
    parsed: dict[str, list[str]] = {}
    for key, raw in table.items():
        if not isinstance(raw, list):
            raise ValueError(f"{field_name}.{key} must be a list of strings")
        parsed[key] = _as_str_list(raw)
    return parsed


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_choice(raw: Any, allowed: set[str], field_name: str) -> str:
    value = str(raw).lower()
    if value not in allowed:
        choices = ", ".join(sorted(allowed))
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return raw
