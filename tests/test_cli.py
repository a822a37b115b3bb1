"""CLI tests for scanning, fixing and restoring."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from game_audit import __version__
from game_audit.cli import app
from tests.helpers_games import VIEWPORT_META, build_game_html, compliant_html, write_games

runner = CliRunner()


def _project(tmp_path: Path, games: dict[str, str], extra: list[str] | None = None) -> Path:
    root = tmp_path / "project"
    write_games(root / "games", games)
    artifacts = ", ".join(f'"{name}"' for name in games)
    lines = [f"artifacts = [{artifacts}]", *(extra or [])]
    (root / ".game-audit.toml").write_text("\n".join(lines), encoding="utf-8")
    return root


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("run-report", "run-fix", "restore", "checks", "fixes", "config-init"):
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_run_report_json_for_compliant_portfolio(tmp_path: Path) -> None:
    games = {"alpha-game.html": compliant_html(), "beta-game.html": compliant_html()}
    root = _project(tmp_path, games)

    result = runner.invoke(
        app, ["run-report", "--root", str(root), "--format", "json", "--no-save"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["summary"]["coverage"] == 100
    assert payload["summary"]["tier"] == "excellent"
    assert payload["summary"]["roi"] == 900
    assert payload["meta"]["root"] == str(root.resolve())
    assert not (root / "reports").exists()


def test_run_report_saves_report_and_exits_nonzero_on_failures(tmp_path: Path) -> None:
    games = {"alpha-game.html": compliant_html(), "beta-game.html": build_game_html()}
    root = _project(tmp_path, games)

    result = runner.invoke(app, ["run-report", "--root", str(root)])

    assert result.exit_code == 1
    assert "Report written to:" in result.stdout
    reports = list((root / "reports").glob("compliance-report-*.json"))
    assert len(reports) == 1
    saved = json.loads(reports[0].read_text(encoding="utf-8"))
    assert set(saved) == {"meta", "summary", "artifacts", "missing"}
    assert saved["summary"]["failed"] > 0


def test_run_report_category_filter(tmp_path: Path) -> None:
    root = _project(tmp_path, {"alpha-game.html": compliant_html()})

    result = runner.invoke(
        app,
        ["run-report", "--root", str(root), "--category", "sound", "--format", "json", "--no-save"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["meta"]["category"] == "sound"
    assert payload["summary"]["total"] == 3


def test_run_report_rejects_unknown_category(tmp_path: Path) -> None:
    root = _project(tmp_path, {"alpha-game.html": compliant_html()})

    result = runner.invoke(app, ["run-report", "--root", str(root), "--category", "audio"])

    assert result.exit_code == 2


def test_run_fix_then_rerun_then_restore(tmp_path: Path) -> None:
    original = build_game_html(head=VIEWPORT_META)
    root = _project(
        tmp_path,
        {"alpha-game.html": original},
        [
            "[fixes]",
            'enable = ["responsive"]',
            "",
            "[fixes.targets]",
            'responsive = ["alpha-game.html"]',
        ],
    )
    artifact = root / "games" / "alpha-game.html"

    first = runner.invoke(app, ["run-fix", "--root", str(root), "--format", "json"])
    fixed_text = artifact.read_text(encoding="utf-8")
    second = runner.invoke(app, ["run-fix", "--root", str(root), "--format", "json"])
    restored = runner.invoke(app, ["restore", "alpha-game.html", "--root", str(root)])

    assert first.exit_code == 0
    first_payload = json.loads(first.stdout)
    assert first_payload["counts"] == {"applied": 1, "skipped": 0, "error": 0}
    outcome = first_payload["fixes"][0]["outcomes"][0]
    assert outcome["after"] == {"responsive_design": "pass"}
    assert fixed_text != original

    assert second.exit_code == 0
    assert json.loads(second.stdout)["counts"] == {"applied": 0, "skipped": 1, "error": 0}
    assert len(list((root / "games").glob("alpha-game.html.backup.*"))) == 1

    assert restored.exit_code == 0
    assert "Restored alpha-game.html from alpha-game.html.backup." in restored.stdout
    assert artifact.read_text(encoding="utf-8") == original


def test_run_fix_reports_errors_with_exit_code(tmp_path: Path) -> None:
    root = _project(
        tmp_path,
        {"alpha-game.html": build_game_html(include_style=False)},
        ["[fixes.targets]", 'visual_feedback = ["alpha-game.html"]'],
    )

    result = runner.invoke(
        app, ["run-fix", "--root", str(root), "--fix", "visual_feedback"]
    )

    assert result.exit_code == 1
    assert "alpha-game.html: anchor not found" in result.stdout


def test_run_fix_rejects_unknown_fix(tmp_path: Path) -> None:
    root = _project(tmp_path, {"alpha-game.html": compliant_html()})

    result = runner.invoke(app, ["run-fix", "--root", str(root), "--fix", "bogus"])

    assert result.exit_code == 2


def test_run_fix_uses_configured_backup_dir(tmp_path: Path) -> None:
    root = _project(
        tmp_path,
        {"alpha-game.html": build_game_html()},
        ['backup_dir = "backups"', "", "[fixes.targets]", 'console_hygiene = ["alpha-game.html"]'],
    )
    artifact = root / "games" / "alpha-game.html"
    artifact.write_text(build_game_html(script="console.error('x');"), encoding="utf-8")

    result = runner.invoke(
        app, ["run-fix", "--root", str(root), "--fix", "console_hygiene", "--format", "json"]
    )

    assert result.exit_code == 0
    assert len(list((root / "backups").glob("alpha-game.html.backup.*"))) == 1
    assert list((root / "games").glob("*.backup.*")) == []


def test_restore_without_backup_fails(tmp_path: Path) -> None:
    root = _project(tmp_path, {"alpha-game.html": compliant_html()})

    result = runner.invoke(app, ["restore", "alpha-game.html", "--root", str(root)])

    assert result.exit_code == 1
