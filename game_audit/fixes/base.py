"""Fix protocol and the two text transformation kinds."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Protocol


class AnchorNotFoundError(ValueError):
    """Raised when a fix cannot locate the structural anchor it inserts before."""


@dataclass(frozen=True, slots=True)
class Transformation:
    """Mutated text plus the number of edits that produced it."""

    text: str
    changes: int


class Fix(Protocol):
    """Protocol for idempotent text remediations."""

    fix_id: str
    name: str
    category: str
    check_ids: tuple[str, ...]
    targets: tuple[str, ...]

    def is_applied(self, text: str) -> bool:
        """Return True when the artifact no longer needs this fix."""

    def transform(self, text: str) -> Transformation:
        """Return the remediated text without touching the artifact."""

    def with_targets(self, targets: tuple[str, ...]) -> Fix:
        """Return a copy of the fix aimed at different artifacts."""


@dataclass(frozen=True, slots=True)
class InjectionFix:
    """Inserts a fixed block right before the last occurrence of an anchor.

    The block must carry ``marker``; its presence is how a second run knows
    the fix was already applied. ``anchor`` is a literal substring unless
    ``anchor_is_regex`` is set.
    """

    fix_id: str
    name: str
    category: str
    check_ids: tuple[str, ...]
    targets: tuple[str, ...]
    anchor: str
    marker: str
    block: str
    anchor_is_regex: bool = False

    def __post_init__(self) -> None:
        if self.marker not in self.block:
            raise ValueError(f"Fix '{self.fix_id}' block does not contain its marker")

    def is_applied(self, text: str) -> bool:
        return self.marker in text

    def transform(self, text: str) -> Transformation:
        index = self._anchor_index(text)
        if index is None:
            raise AnchorNotFoundError(f"anchor not found: {self.anchor}")
        return Transformation(text=text[:index] + self.block + text[index:], changes=1)

    def with_targets(self, targets: tuple[str, ...]) -> InjectionFix:
        return replace(self, targets=targets)

    def _anchor_index(self, text: str) -> int | None:
        if self.anchor_is_regex:
            last: re.Match[str] | None = None
            for match in re.finditer(self.anchor, text):
                last = match
            return last.start() if last is not None else None
        index = text.rfind(self.anchor)
        return index if index != -1 else None


_STATEMENT_BOUNDARY = re.compile(r"[;{}\n]")
_LOGICAL_OPERATOR = re.compile(r"\|\||&&")


@dataclass(frozen=True, slots=True)
class Rewrite:
    """One ordered from-to substitution.

    With ``standalone`` set, a match is left alone when its statement holds
    another ``||`` or ``&&``: JavaScript rejects ``??`` mixed with either
    operator unless parenthesised.
    """

    pattern: str
    replacement: str
    standalone: bool = False

    def eligible(self, text: str, match: re.Match[str]) -> bool:
        if not self.standalone:
            return True
        start, end = _statement_bounds(text, match.start(), match.end())
        rest = text[start : match.start()] + text[match.end() : end]
        return _LOGICAL_OPERATOR.search(rest) is None

    def pending(self, text: str) -> bool:
        return any(self.eligible(text, match) for match in re.finditer(self.pattern, text))

    def apply(self, text: str) -> tuple[str, int]:
        changes = 0

        def substitute(match: re.Match[str]) -> str:
            nonlocal changes
            if not self.eligible(text, match):
                return match.group(0)
            changes += 1
            return self.replacement

        return re.sub(self.pattern, substitute, text), changes


@dataclass(frozen=True, slots=True)
class RewriteFix:
    """Applies ordered regex substitutions and counts the replacements.

    Replacement output must never match any rewrite pattern, so a rewritten
    artifact reads as already applied.
    """

    fix_id: str
    name: str
    category: str
    check_ids: tuple[str, ...]
    targets: tuple[str, ...]
    rewrites: tuple[Rewrite, ...]

    def is_applied(self, text: str) -> bool:
        return not any(rewrite.pending(text) for rewrite in self.rewrites)

    def transform(self, text: str) -> Transformation:
        changes = 0
        for rewrite in self.rewrites:
            text, count = rewrite.apply(text)
            changes += count
        return Transformation(text=text, changes=changes)

    def with_targets(self, targets: tuple[str, ...]) -> RewriteFix:
        return replace(self, targets=targets)


def _statement_bounds(text: str, start: int, end: int) -> tuple[int, int]:
    begin = 0
    for boundary in _STATEMENT_BOUNDARY.finditer(text, 0, start):
        begin = boundary.end()
    following = _STATEMENT_BOUNDARY.search(text, end)
    return begin, following.start() if following is not None else len(text)
