"""Tests for config loading and the checks/fixes/config CLI commands."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from game_audit.cli import app
from game_audit.config import AppConfig, default_config_template, load_app_config

runner = CliRunner()


def _project(tmp_path: Path, config_lines: list[str] | None = None) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    if config_lines is not None:
        (root / ".game-audit.toml").write_text("\n".join(config_lines), encoding="utf-8")
    return root


def test_load_app_config_prefers_dot_file_over_pyproject(tmp_path: Path) -> None:
    root = _project(
        tmp_path,
        [
            'games_dir = "html"',
            'format = "json"',
            'artifacts = ["alpha-game.html"]',
            "",
            "[checks]",
            'disable = ["load_time"]',
            "",
            "[scoring]",
            "composite_warning_limit = 4",
        ],
    )
    (root / "pyproject.toml").write_text(
        "\n".join(["[tool.game_audit]", 'games_dir = "elsewhere"']),
        encoding="utf-8",
    )

    config = load_app_config(root)

    assert config.games_dir == "html"
    assert config.format == "json"
    assert config.artifacts == ["alpha-game.html"]
    assert config.checks.enable is None
    assert config.checks.disable == ["load_time"]
    assert config.scoring.composite_warning_limit == 4
    assert config.source == str(root / ".game-audit.toml")
    assert config.games_path(root) == root / "html"


def test_load_app_config_reads_pyproject_hyphenated_key(tmp_path: Path) -> None:
    root = _project(tmp_path)
    (root / "pyproject.toml").write_text(
        "\n".join(
            [
                '[tool."game-audit"]',
                'backup_dir = "backups"',
                "",
                '[tool."game-audit".fixes.targets]',
                'responsive = ["alpha-game.html"]',
            ]
        ),
        encoding="utf-8",
    )

    config = load_app_config(root)

    assert config.backup_path(root) == root / "backups"
    assert config.fixes.targets == {"responsive": ["alpha-game.html"]}
    assert config.source == str(root / "pyproject.toml")


def test_defaults_when_no_config_present(tmp_path: Path) -> None:
    root = _project(tmp_path)

    config = load_app_config(root)

    assert config == AppConfig()
    assert config.backup_path(root) is None
    assert len(config.artifacts) == 10
    assert config.scoring.composite_warning_limit == 2


@pytest.mark.parametrize(
    ("lines", "message"),
    [
        (['format = "xml"'], "format must be one of"),
        (["[checks]", 'enable = ["nope"]'], "Unknown check ids: nope"),
        (["[fixes]", 'disable = ["nope"]'], "Unknown fix ids: nope"),
        (["[fixes.targets]", 'responsive = "alpha-game.html"'], "fixes.targets.responsive"),
        (["[scoring]", "composite_warning_limit = -1"], "composite_warning_limit must be >= 0"),
        (["artifacts = 3"], "Expected a list of strings"),
        (["save_report = 1"], "save_report must be a boolean"),
        (["games_dir = ["], "Invalid TOML"),
    ],
)
def test_invalid_config_raises_value_error(
    tmp_path: Path, lines: list[str], message: str
) -> None:
    root = _project(tmp_path, lines)

    with pytest.raises(ValueError, match=message):
        load_app_config(root)


def test_default_template_round_trips(tmp_path: Path) -> None:
    template = default_config_template()
    assert isinstance(tomllib.loads(template), dict)

    root = _project(tmp_path, [template])
    config = load_app_config(root)

    assert config.backup_dir == ""
    assert config.scoring.composite_warning_limit == 2
    assert config.fixes.targets == {}


def test_checks_command_json_lists_enabled_state_from_config(tmp_path: Path) -> None:
    root = _project(tmp_path, ["[checks]", 'disable = ["load_time", "rtl_support"]'])

    result = runner.invoke(app, ["checks", "--root", str(root), "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    enabled = {item["check_id"]: item["enabled"] for item in payload["checks"]}
    assert len(enabled) == 12
    assert enabled["load_time"] is False
    assert enabled["rtl_support"] is False
    assert enabled["null_safety"] is True
    assert payload["meta"]["config_source"] == str(root / ".game-audit.toml")


def test_fixes_command_reports_target_overrides(tmp_path: Path) -> None:
    root = _project(
        tmp_path,
        [
            "[fixes]",
            'disable = ["console_hygiene"]',
            "",
            "[fixes.targets]",
            'responsive = ["alpha-game.html"]',
        ],
    )

    result = runner.invoke(app, ["fixes", "--root", str(root), "--format", "json"])

    assert result.exit_code == 0
    fixes = {item["fix_id"]: item for item in json.loads(result.stdout)["fixes"]}
    assert fixes["responsive"]["targets"] == ["alpha-game.html"]
    assert fixes["responsive"]["check_ids"] == ["responsive_design"]
    assert fixes["console_hygiene"]["enabled"] is False
    assert len(fixes["error_handler"]["targets"]) == 10


def test_fixes_command_human_output(tmp_path: Path) -> None:
    root = _project(tmp_path)

    result = runner.invoke(app, ["fixes", "--root", str(root)])

    assert result.exit_code == 0
    assert "Available fixes:" in result.stdout
    assert "- undefined_checks (type_safety) [enabled]" in result.stdout


def test_config_command_json_shows_active_ids(tmp_path: Path) -> None:
    root = _project(tmp_path, ["[fixes]", 'enable = ["responsive"]'])

    result = runner.invoke(app, ["config", "--root", str(root), "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["active_fix_ids"] == ["responsive"]
    assert len(payload["active_check_ids"]) == 12
    assert payload["fixes"]["enable"] == ["responsive"]
    assert payload["games_dir"] == "games"


def test_config_init_writes_template_and_refuses_overwrite(tmp_path: Path) -> None:
    out = tmp_path / "cfg" / ".game-audit.toml"

    first = runner.invoke(app, ["config-init", "--out", str(out)])
    second = runner.invoke(app, ["config-init", "--out", str(out)])
    forced = runner.invoke(app, ["config-init", "--out", str(out), "--force"])

    assert first.exit_code == 0
    assert out.read_text(encoding="utf-8") == default_config_template()
    assert second.exit_code != 0
    assert forced.exit_code == 0


def test_config_validate_reports_ok_and_rejects_bad_config(tmp_path: Path) -> None:
    root = _project(tmp_path, ["[checks]", 'enable = ["null_safety"]'])
    bad = root / "bad.toml"
    bad.write_text('format = "yaml"\n', encoding="utf-8")

    good = runner.invoke(
        app,
        [
            "config-validate",
            "--root",
            str(root),
            "--config",
            ".game-audit.toml",
            "--format",
            "json",
        ],
    )
    invalid = runner.invoke(app, ["config-validate", "--root", str(root), "--config", "bad.toml"])

    assert good.exit_code == 0
    payload = json.loads(good.stdout)
    assert payload["ok"] is True
    assert payload["active_check_ids"] == ["null_safety"]
    assert invalid.exit_code == 2
