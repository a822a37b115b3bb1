"""Fixes package."""

from collections.abc import Callable
from dataclasses import dataclass

from game_audit.fixes.base import (
    AnchorNotFoundError,
    Fix,
    InjectionFix,
    Rewrite,
    RewriteFix,
    Transformation,
)
from game_audit.fixes.resilience import console_hygiene_fix, error_handler_fix
from game_audit.fixes.type_safety import nullish_coalescing_fix, undefined_checks_fix
from game_audit.fixes.visual import responsive_fix, visual_feedback_fix

__all__ = [
    "AnchorNotFoundError",
    "Fix",
    "FixInfo",
    "InjectionFix",
    "Rewrite",
    "RewriteFix",
    "Transformation",
    "build_fixes",
    "default_fixes",
    "list_fix_info",
]

ALL_GAMES = (
    "color-match-game.html",
    "math-quiz-game.html",
    "memory-match-game.html",
    "puzzle-slider-game.html",
    "quick-draw-game.html",
    "simon-says-game.html",
    "snakes-and-ladders-game.html",
    "tic-tac-toe-game.html",
    "word-scramble-game.html",
    "hebrew-english-learning-game.html",
)


@dataclass(frozen=True, slots=True)
class FixInfo:
    """Fix metadata for listing and selection."""

    fix_id: str
    name: str
    category: str
    check_ids: tuple[str, ...]
    targets: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class _FixSpec:
    fix_id: str
    factory: Callable[[tuple[str, ...]], Fix]
    targets: tuple[str, ...]


def default_fixes() -> list[Fix]:
    """Return every known fix with its default targets."""
    return build_fixes()


def build_fixes(
    *,
    enabled_fix_ids: list[str] | None = None,
    disabled_fix_ids: list[str] | None = None,
    target_overrides: dict[str, list[str]] | None = None,
) -> list[Fix]:
    """Build fix instances applying enable/disable filters and target overrides."""
    specs = _ordered_fix_specs()
    registry = {spec.fix_id: spec for spec in specs}
    overrides = target_overrides or {}
    requested = set(enabled_fix_ids or []) | set(disabled_fix_ids or []) | set(overrides)

    unknown = [fix_id for fix_id in requested if fix_id not in registry]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown fix ids: {joined}")

    selected_ids = [spec.fix_id for spec in specs]
    if enabled_fix_ids is not None:
        enabled = set(enabled_fix_ids)
        selected_ids = [fix_id for fix_id in selected_ids if fix_id in enabled]
    disabled = set(disabled_fix_ids or [])
    selected_ids = [fix_id for fix_id in selected_ids if fix_id not in disabled]

    fixes: list[Fix] = []
    for fix_id in selected_ids:
        spec = registry[fix_id]
        targets = tuple(overrides[fix_id]) if fix_id in overrides else spec.targets
        fixes.append(spec.factory(targets))
    return fixes


def list_fix_info() -> list[FixInfo]:
    """List all fixes with metadata and default targets."""
    info: list[FixInfo] = []
    for fix in default_fixes():
        info.append(
            FixInfo(
                fix_id=fix.fix_id,
                name=fix.name,
                category=fix.category,
                check_ids=fix.check_ids,
                targets=fix.targets,
            )
        )
    return info


def _ordered_fix_specs() -> list[_FixSpec]:
    return [
        _FixSpec(
            fix_id="responsive",
            factory=responsive_fix,
            targets=(
                "color-match-game.html",
                "math-quiz-game.html",
                "memory-match-game.html",
                "puzzle-slider-game.html",
                "quick-draw-game.html",
                "simon-says-game.html",
                "snakes-and-ladders-game.html",
                "tic-tac-toe-game.html",
            ),
        ),
        _FixSpec(
            fix_id="visual_feedback",
            factory=visual_feedback_fix,
            targets=(
                "color-match-game.html",
                "math-quiz-game.html",
                "memory-match-game.html",
                "tic-tac-toe-game.html",
            ),
        ),
        _FixSpec(
            fix_id="nullish_coalescing",
            factory=nullish_coalescing_fix,
            targets=tuple(game for game in ALL_GAMES if game != "tic-tac-toe-game.html"),
        ),
        _FixSpec(
            fix_id="undefined_checks",
            factory=undefined_checks_fix,
            targets=tuple(
                game for game in ALL_GAMES if game != "hebrew-english-learning-game.html"
            ),
        ),
        _FixSpec(fix_id="error_handler", factory=error_handler_fix, targets=ALL_GAMES),
        _FixSpec(fix_id="console_hygiene", factory=console_hygiene_fix, targets=ALL_GAMES),
    ]
