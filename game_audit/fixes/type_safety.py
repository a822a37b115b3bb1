"""Null-safety fixes."""

from __future__ import annotations

from game_audit.fixes.base import InjectionFix, Rewrite, RewriteFix

NULLISH_REWRITES = (
    Rewrite(r"\|\| 0\b", "?? 0", standalone=True),
    Rewrite(r"\|\| ''", "?? ''", standalone=True),
    Rewrite(r"\|\| false\b", "?? false", standalone=True),
    Rewrite(r"\|\| 1\b", "?? 1", standalone=True),
    Rewrite(r"\|\| \[\]", "?? []", standalone=True),
    Rewrite(r"\|\| \{\}", "?? {}", standalone=True),
)

# Last script block that closes immediately before the body does.
CLOSING_SCRIPT_ANCHOR = r"</script>\s*</body>"

UNDEFINED_MARKER = "// Undefined check pattern"

UNDEFINED_CHECK_JS = """
// Undefined check pattern - Added by game-audit
if (typeof window !== 'undefined' && window.localStorage !== undefined) {
    window.__storageAvailable = true;
}
"""


def nullish_coalescing_fix(targets: tuple[str, ...]) -> RewriteFix:
    return RewriteFix(
        fix_id="nullish_coalescing",
        name="Nullish Coalescing",
        category="type_safety",
        check_ids=("null_safety",),
        targets=targets,
        rewrites=NULLISH_REWRITES,
    )


def undefined_checks_fix(targets: tuple[str, ...]) -> InjectionFix:
    return InjectionFix(
        fix_id="undefined_checks",
        name="Explicit Undefined Checks",
        category="type_safety",
        check_ids=("null_safety",),
        targets=targets,
        anchor=CLOSING_SCRIPT_ANCHOR,
        marker=UNDEFINED_MARKER,
        block=UNDEFINED_CHECK_JS,
        anchor_is_regex=True,
    )
