"""Performance checks derived from static content measurements."""

from __future__ import annotations

import math
import re

from game_audit.checks.base import MetricCheck

# Rough estimate used across the portfolio: one millisecond per KiB of markup.
BYTES_PER_LOAD_MS = 1024

EXTERNAL_RESOURCE_PATTERNS = {
    "scripts": r"<script\s+src=",
    "styles": r"<link\s+[^>]*href=",
    "images": r"<img\s+src=",
}


class LoadTimeCheck(MetricCheck):
    """Estimates load time from the artifact's encoded size."""

    check_id = "load_time"
    name = "Page Load Time"
    category = "performance"
    pass_below = 100.0
    warn_below = 200.0

    def measure(self, text: str) -> float:
        return len(text.encode("utf-8")) / BYTES_PER_LOAD_MS

    def score_for(self, value: float) -> int:
        return max(0, 100 - math.floor(value / 2))

    def describe(self, value: float) -> str:
        return f"Estimated load time: {value:.0f}ms ({value:.1f}KB)"


class ResourceOptimizationCheck(MetricCheck):
    """Counts external scripts, stylesheets and images the artifact depends on."""

    check_id = "resource_optimization"
    name = "Resource Optimization"
    category = "performance"
    pass_below = 1.0
    warn_below = 3.0

    def measure(self, text: str) -> float:
        total = 0
        for regex in EXTERNAL_RESOURCE_PATTERNS.values():
            total += len(re.findall(regex, text))
        return float(total)

    def score_for(self, value: float) -> int:
        return max(0, 100 - int(value) * 20)

    def describe(self, value: float) -> str:
        return f"External resources: {int(value)}"
