"""Immutable rule catalog: categories of checks plus the fixes that remediate them."""

from __future__ import annotations

from dataclasses import dataclass

from game_audit.checks import CATEGORY_TITLES, KNOWN_CATEGORIES, build_checks, list_check_info
from game_audit.checks.base import Check
from game_audit.fixes import ALL_GAMES, build_fixes
from game_audit.fixes.base import Fix

DEFAULT_ARTIFACTS = ALL_GAMES


@dataclass(frozen=True, slots=True)
class Category:
    """Named group of checks."""

    name: str
    title: str
    checks: tuple[Check, ...]


@dataclass(frozen=True, slots=True)
class Catalog:
    """Checks grouped by category and the fixes tied to them.

    Built once per run and handed to the scanner and the fixer, so both read
    the same definitions.
    """

    categories: tuple[Category, ...]
    fixes: tuple[Fix, ...] = ()

    def __post_init__(self) -> None:
        category_names = [category.name for category in self.categories]
        if len(set(category_names)) != len(category_names):
            raise ValueError("Duplicate category names in catalog")

        seen_checks: set[str] = set()
        for category in self.categories:
            for check in category.checks:
                if check.category != category.name:
                    raise ValueError(
                        f"Check '{check.check_id}' declares category '{check.category}' "
                        f"but is listed under '{category.name}'"
                    )
                if check.check_id in seen_checks:
                    raise ValueError(f"Duplicate check id in catalog: {check.check_id}")
                seen_checks.add(check.check_id)

        # Fixes may name checks that configuration disabled, but never unknown ones.
        known_checks = seen_checks | {info.check_id for info in list_check_info()}
        seen_fixes: set[str] = set()
        for fix in self.fixes:
            if fix.category not in category_names:
                raise ValueError(f"Fix '{fix.fix_id}' has unknown category '{fix.category}'")
            unknown = [check_id for check_id in fix.check_ids if check_id not in known_checks]
            if unknown:
                raise ValueError(f"Fix '{fix.fix_id}' names unknown checks: {', '.join(unknown)}")
            if fix.fix_id in seen_fixes:
                raise ValueError(f"Duplicate fix id in catalog: {fix.fix_id}")
            seen_fixes.add(fix.fix_id)

    def category_names(self) -> list[str]:
        return [category.name for category in self.categories]

    def checks(self, category: str | None = None) -> list[Check]:
        """Return checks in catalog order, optionally limited to one category."""
        if category is not None:
            self._require_category(category)
        return [
            check
            for item in self.categories
            if category is None or item.name == category
            for check in item.checks
        ]

    def find_check(self, check_id: str) -> Check | None:
        for check in self.checks():
            if check.check_id == check_id:
                return check
        return None

    def select_fixes(
        self,
        *,
        category: str | None = None,
        fix_ids: list[str] | None = None,
    ) -> list[Fix]:
        """Return fixes in catalog order filtered by category and explicit ids."""
        if category is not None:
            self._require_category(category)
        known = {fix.fix_id for fix in self.fixes}
        unknown = [fix_id for fix_id in fix_ids or [] if fix_id not in known]
        if unknown:
            joined = ", ".join(sorted(set(unknown)))
            raise ValueError(f"Unknown fix ids: {joined}")

        wanted = set(fix_ids) if fix_ids else None
        return [
            fix
            for fix in self.fixes
            if (category is None or fix.category == category)
            and (wanted is None or fix.fix_id in wanted)
        ]

    def _require_category(self, category: str) -> None:
        if category not in self.category_names():
            choices = ", ".join(self.category_names())
            raise ValueError(f"Unknown category '{category}'. Expected one of: {choices}")


def default_catalog() -> Catalog:
    """Return the catalog with every check and fix enabled."""
    return build_catalog()


def build_catalog(
    *,
    enabled_check_ids: list[str] | None = None,
    disabled_check_ids: list[str] | None = None,
    enabled_fix_ids: list[str] | None = None,
    disabled_fix_ids: list[str] | None = None,
    fix_targets: dict[str, list[str]] | None = None,
) -> Catalog:
    """Assemble the catalog from the check and fix registries."""
    checks = build_checks(
        enabled_check_ids=enabled_check_ids,
        disabled_check_ids=disabled_check_ids,
    )
    fixes = build_fixes(
        enabled_fix_ids=enabled_fix_ids,
        disabled_fix_ids=disabled_fix_ids,
        target_overrides=fix_targets,
    )
    categories = tuple(
        Category(
            name=name,
            title=CATEGORY_TITLES[name],
            checks=tuple(check for check in checks if check.category == name),
        )
        for name in KNOWN_CATEGORIES
    )
    return Catalog(categories=categories, fixes=tuple(fixes))
