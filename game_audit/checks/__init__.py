"""Checks package."""

from collections.abc import Callable
from dataclasses import dataclass

from game_audit.checks.base import Check, CheckResult
from game_audit.checks.performance import LoadTimeCheck, ResourceOptimizationCheck
from game_audit.checks.resilience import ConsoleHygieneCheck, ErrorHandlerCheck
from game_audit.checks.sound import AudioFallbackCheck, AudioSystemCheck, PronunciationCheck
from game_audit.checks.type_safety import NullSafetyCheck, VariableDeclarationsCheck
from game_audit.checks.visual import ResponsiveDesignCheck, RtlSupportCheck, VisualFeedbackCheck

__all__ = [
    "CATEGORY_TITLES",
    "KNOWN_CATEGORIES",
    "Check",
    "CheckInfo",
    "CheckResult",
    "build_checks",
    "default_checks",
    "list_check_info",
]

KNOWN_CATEGORIES = (
    "type_safety",
    "visual",
    "performance",
    "sound",
    "resilience",
)

CATEGORY_TITLES = {
    "type_safety": "Type Safety",
    "visual": "Visual",
    "performance": "Performance",
    "sound": "Sound",
    "resilience": "Error Recovery",
}


@dataclass(frozen=True, slots=True)
class CheckInfo:
    """Check metadata for listing and selection."""

    check_id: str
    name: str
    description: str
    category: str


@dataclass(frozen=True, slots=True)
class _CheckSpec:
    check_id: str
    factory: Callable[[], Check]
    name: str
    description: str
    category: str


def default_checks() -> list[Check]:
    """Return every known check in catalog order."""
    return build_checks()


def build_checks(
    *,
    enabled_check_ids: list[str] | None = None,
    disabled_check_ids: list[str] | None = None,
    categories: list[str] | None = None,
) -> list[Check]:
    """Build check instances applying category and enable/disable filters."""
    specs = _ordered_check_specs()
    registry = {spec.check_id: spec for spec in specs}
    requested = set(enabled_check_ids or []) | set(disabled_check_ids or [])

    unknown = [check_id for check_id in requested if check_id not in registry]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown check ids: {joined}")

    unknown_categories = [item for item in categories or [] if item not in KNOWN_CATEGORIES]
    if unknown_categories:
        joined = ", ".join(sorted(set(unknown_categories)))
        raise ValueError(f"Unknown check categories: {joined}")

    selected_ids = [spec.check_id for spec in specs]
    if enabled_check_ids is not None:
        enabled = set(enabled_check_ids)
        selected_ids = [check_id for check_id in selected_ids if check_id in enabled]
    disabled = set(disabled_check_ids or [])
    selected_ids = [check_id for check_id in selected_ids if check_id not in disabled]
    if categories is not None:
        wanted = set(categories)
        selected_ids = [
            check_id for check_id in selected_ids if registry[check_id].category in wanted
        ]

    return [registry[check_id].factory() for check_id in selected_ids]


def list_check_info() -> list[CheckInfo]:
    """List all checks with metadata."""
    return [
        CheckInfo(
            check_id=spec.check_id,
            name=spec.name,
            description=spec.description,
            category=spec.category,
        )
        for spec in _ordered_check_specs()
    ]


def _ordered_check_specs() -> list[_CheckSpec]:
    return [
        _spec(NullSafetyCheck),
        _spec(VariableDeclarationsCheck),
        _spec(ResponsiveDesignCheck),
        _spec(VisualFeedbackCheck),
        _spec(RtlSupportCheck),
        _spec(LoadTimeCheck),
        _spec(ResourceOptimizationCheck),
        _spec(AudioSystemCheck),
        _spec(AudioFallbackCheck),
        _spec(PronunciationCheck),
        _spec(ErrorHandlerCheck),
        _spec(ConsoleHygieneCheck),
    ]


def _spec(check_cls: type[Check]) -> _CheckSpec:
    instance = check_cls()
    if not instance.check_id or instance.category not in KNOWN_CATEGORIES:
        raise ValueError(f"Malformed check definition: {check_cls.__name__}")
    return _CheckSpec(
        check_id=instance.check_id,
        factory=check_cls,
        name=instance.name,
        description=(check_cls.__doc__ or "").strip(),
        category=instance.category,
    )
