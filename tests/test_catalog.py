"""Tests for catalog construction and validation."""

from __future__ import annotations

import pytest

from game_audit.catalog import DEFAULT_ARTIFACTS, Catalog, Category, build_catalog, default_catalog
from game_audit.checks.visual import ResponsiveDesignCheck, VisualFeedbackCheck
from game_audit.fixes.visual import responsive_fix


def test_default_catalog_groups_checks_by_category() -> None:
    catalog = default_catalog()

    assert catalog.category_names() == [
        "type_safety",
        "visual",
        "performance",
        "sound",
        "resilience",
    ]
    assert len(catalog.checks()) == 12
    assert [check.check_id for check in catalog.checks("sound")] == [
        "audio_system",
        "audio_fallback",
        "pronunciation",
    ]
    assert [fix.fix_id for fix in catalog.fixes] == [
        "responsive",
        "visual_feedback",
        "nullish_coalescing",
        "undefined_checks",
        "error_handler",
        "console_hygiene",
    ]
    assert len(DEFAULT_ARTIFACTS) == 10


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown category 'audio'"):
        default_catalog().checks("audio")


def test_duplicate_check_ids_are_rejected() -> None:
    visual = Category(
        name="visual",
        title="Visual",
        checks=(ResponsiveDesignCheck(), ResponsiveDesignCheck()),
    )

    with pytest.raises(ValueError, match="Duplicate check id"):
        Catalog(categories=(visual,))


def test_check_listed_under_wrong_category_is_rejected() -> None:
    sound = Category(name="sound", title="Sound", checks=(VisualFeedbackCheck(),))

    with pytest.raises(ValueError, match="declares category 'visual'"):
        Catalog(categories=(sound,))


def test_fix_with_unknown_category_is_rejected() -> None:
    sound = Category(name="sound", title="Sound", checks=())

    with pytest.raises(ValueError, match="unknown category 'visual'"):
        Catalog(categories=(sound,), fixes=(responsive_fix(("game.html",)),))


def test_build_catalog_applies_target_overrides_and_filters() -> None:
    catalog = build_catalog(
        disabled_check_ids=["load_time"],
        enabled_fix_ids=["responsive", "console_hygiene"],
        fix_targets={"responsive": ["alpha-game.html"]},
    )

    assert catalog.find_check("load_time") is None
    assert [fix.fix_id for fix in catalog.fixes] == ["responsive", "console_hygiene"]
    assert catalog.fixes[0].targets == ("alpha-game.html",)
    assert len(catalog.fixes[1].targets) == 10


def test_select_fixes_by_category_and_id() -> None:
    catalog = default_catalog()

    visual = catalog.select_fixes(category="visual")
    picked = catalog.select_fixes(fix_ids=["error_handler"])

    assert [fix.fix_id for fix in visual] == ["responsive", "visual_feedback"]
    assert [fix.fix_id for fix in picked] == ["error_handler"]
    with pytest.raises(ValueError, match="Unknown fix ids: bogus"):
        catalog.select_fixes(fix_ids=["bogus"])


def test_build_catalog_rejects_unknown_fix_target_override() -> None:
    with pytest.raises(ValueError, match="Unknown fix ids: bogus"):
        build_catalog(fix_targets={"bogus": ["game.html"]})
