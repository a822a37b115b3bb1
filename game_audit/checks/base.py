"""Base check protocol, result model, and signal grading."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal, Protocol

Status = Literal["pass", "warning", "fail"]

STATUS_RANK: dict[str, int] = {"fail": 0, "warning": 1, "pass": 2}

# Share of a multi-signal check's markers that must be present to reach the
# warning tier instead of failing. Single-signal checks have no warning tier.
WARNING_SIGNAL_FRACTION = 0.5


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of running one check against one artifact."""

    check_id: str
    name: str
    category: str
    status: Status
    score: int
    message: str
    metric: float | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "check_id": self.check_id,
            "name": self.name,
            "category": self.category,
            "status": self.status,
            "score": self.score,
            "message": self.message,
            "metric": self.metric,
        }


class Check(Protocol):
    """Protocol for deterministic compliance checks."""

    check_id: str
    name: str
    category: str

    def evaluate(self, text: str, *, artifact: str) -> CheckResult:
        """Evaluate artifact text and return a graded result."""


class Signal(Protocol):
    """One atomic textual marker a check looks for."""

    label: str

    def matches(self, text: str) -> bool:
        """Return True when the marker is present in the text."""


@dataclass(frozen=True, slots=True)
class Contains:
    """Present when any of the needles occurs in the text."""

    label: str
    needles: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(needle in text for needle in self.needles)


@dataclass(frozen=True, slots=True)
class Lacks:
    """Present when the needle does not occur in the text."""

    label: str
    needle: str

    def matches(self, text: str) -> bool:
        return self.needle not in text


@dataclass(frozen=True, slots=True)
class Pattern:
    """Present when the regular expression matches anywhere in the text."""

    label: str
    regex: str

    def matches(self, text: str) -> bool:
        return re.search(self.regex, text) is not None


@dataclass(frozen=True, slots=True)
class FewerThan:
    """Present when the regular expression matches fewer than ``limit`` times."""

    label: str
    regex: str
    limit: int

    def matches(self, text: str) -> bool:
        return len(re.findall(self.regex, text)) < self.limit


class MarkerCheck:
    """Grades a check by how many of its textual signals are present."""

    check_id: str = ""
    name: str = ""
    category: str = ""
    signals: tuple[Signal, ...] = ()

    def evaluate(self, text: str, *, artifact: str) -> CheckResult:
        _ = artifact
        hits = [signal.matches(text) for signal in self.signals]
        present = sum(1 for hit in hits if hit)
        status, score = grade_signals(present, len(self.signals))
        flags = ", ".join(
            f"{signal.label}={'yes' if hit else 'no'}"
            for signal, hit in zip(self.signals, hits, strict=True)
        )
        return CheckResult(
            check_id=self.check_id,
            name=self.name,
            category=self.category,
            status=status,
            score=score,
            message=f"{self.name}: {present}/{len(self.signals)} signals ({flags})",
        )


class MetricCheck:
    """Grades a check from a numeric measurement against upper bounds."""

    check_id: str = ""
    name: str = ""
    category: str = ""
    pass_below: float = 0.0
    warn_below: float = 0.0

    def measure(self, text: str) -> float:
        """Return the numeric signal for the text."""
        raise NotImplementedError

    def score_for(self, value: float) -> int:
        """Map the measurement to a 0-100 score."""
        raise NotImplementedError

    def describe(self, value: float) -> str:
        return f"{self.name}: {value:g}"

    def evaluate(self, text: str, *, artifact: str) -> CheckResult:
        _ = artifact
        value = self.measure(text)
        status: Status
        if value < self.pass_below:
            status = "pass"
        elif value < self.warn_below:
            status = "warning"
        else:
            status = "fail"
        return CheckResult(
            check_id=self.check_id,
            name=self.name,
            category=self.category,
            status=status,
            score=clamp_score(self.score_for(value)),
            message=self.describe(value),
            metric=value,
        )


def warning_floor(signal_count: int) -> int | None:
    """Return the fewest present signals that still grade as a warning."""
    if signal_count <= 1:
        return None
    return math.ceil(signal_count * WARNING_SIGNAL_FRACTION)


def grade_signals(present: int, total: int) -> tuple[Status, int]:
    """Map a present/total signal count to a status and score."""
    if total <= 0:
        raise ValueError(f"signal total must be positive, got {total}")
    if present >= total:
        return ("pass", 100)
    score = ratio_percent(present, total)
    floor = warning_floor(total)
    if floor is not None and present >= floor:
        return ("warning", score)
    return ("fail", score)


def ratio_percent(numerator: int, denominator: int) -> int:
    """Return ``round(100 * numerator / denominator)`` with halves rounded up."""
    return (200 * numerator + denominator) // (2 * denominator)


def clamp_score(value: int, lower: int = 0, upper: int = 100) -> int:
    return max(lower, min(upper, value))


def status_at_least(status: str, floor: str) -> bool:
    """Return True when ``status`` is as good as or better than ``floor``."""
    return STATUS_RANK[status] >= STATUS_RANK[floor]
