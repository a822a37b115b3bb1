"""Output rendering tests."""

from __future__ import annotations

import json
from pathlib import Path

from game_audit import __version__
from game_audit.catalog import build_catalog, default_catalog
from game_audit.fixer import apply_fixes
from game_audit.output import (
    build_scan_payload,
    render_fix_human,
    render_fix_json,
    render_scan_human,
    render_scan_json,
)
from game_audit.scoring import scan_portfolio
from game_audit.store import ArtifactStore
from tests.helpers_games import FIXED_NOW, build_game_html, compliant_html, fixed_clock, write_games


def _scan(tmp_path: Path):
    games = write_games(
        tmp_path / "games",
        {"alpha-game.html": compliant_html(), "beta-game.html": build_game_html()},
    )
    return scan_portfolio(
        ArtifactStore(games),
        default_catalog(),
        ["alpha-game.html", "beta-game.html", "ghost-game.html"],
        generated_at=FIXED_NOW,
    )


def test_render_scan_human_has_breakdown_artifacts_and_missing(tmp_path: Path) -> None:
    scan = _scan(tmp_path)

    output = render_scan_human(scan)

    assert f"Compliance coverage: {scan.summary.coverage}% ({scan.summary.tier})" in output
    assert "Per-category breakdown:" in output
    assert "- Error Recovery:" in output
    assert "alpha-game.html: 100.0/100 (12 pass, 0 warning, 0 fail)" in output
    assert "fail: [responsive_design] Responsive Design: 0/4 signals" in output
    assert "Missing artifacts:" in output
    assert "- ghost-game.html: artifact not found" in output
    assert "Artifacts: 2 scanned, 1 missing" in output
    assert f"ROI: {scan.summary.roi}%" in output
    assert "Mean estimated load time: " in output


def test_scan_json_has_stable_schema_keys(tmp_path: Path) -> None:
    scan = _scan(tmp_path)

    payload = json.loads(render_scan_json(scan, root="/srv/games", generated_at=FIXED_NOW))

    assert set(payload) == {"meta", "summary", "artifacts", "missing"}
    assert payload["meta"] == {
        "generated_at": "2026-01-02T03:04:05Z",
        "version": __version__,
        "root": "/srv/games",
        "category": None,
    }
    assert payload["missing"] == {"ghost-game.html": "artifact not found"}
    assert [item["artifact"] for item in payload["artifacts"]] == [
        "alpha-game.html",
        "beta-game.html",
    ]
    assert set(payload["artifacts"][0]["categories"]) == {
        "type_safety",
        "visual",
        "performance",
        "sound",
        "resilience",
    }
    assert payload["summary"]["artifacts_missing"] == 1
    assert payload == build_scan_payload(scan, root="/srv/games", generated_at=FIXED_NOW)


def test_render_fix_outputs(tmp_path: Path) -> None:
    games = write_games(
        tmp_path / "games",
        {"alpha-game.html": build_game_html(), "beta-game.html": build_game_html()},
    )
    store = ArtifactStore(games, clock=fixed_clock)
    catalog = build_catalog(
        fix_targets={"responsive": ["alpha-game.html", "ghost-game.html"]},
        enabled_fix_ids=["responsive"],
    )
    result = apply_fixes(catalog, store)

    human = render_fix_human(result)
    payload = json.loads(render_fix_json(result, root="/srv", generated_at=FIXED_NOW))

    assert "responsive (Responsive Design): 1 applied, 0 skipped, 1 errors" in human
    assert "responsive_design fail -> warning" in human
    assert "ghost-game.html: artifact not found" in human
    assert payload["counts"] == {"applied": 1, "skipped": 0, "error": 1}
    outcomes = payload["fixes"][0]["outcomes"]
    assert outcomes[0]["backup"]["backup_id"].startswith("alpha-game.html.backup.")
    assert outcomes[1]["backup"] is None
    assert list(payload["backups"]) == ["alpha-game.html"]


def test_render_fix_human_without_selection() -> None:
    result = apply_fixes(build_catalog(enabled_fix_ids=[]), ArtifactStore(Path(".")))

    assert "No fixes selected." in render_fix_human(result)
    assert result.exit_code == 0
