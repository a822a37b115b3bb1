"""Visual and accessibility checks."""

from __future__ import annotations

from game_audit.checks.base import Contains, MarkerCheck


class ResponsiveDesignCheck(MarkerCheck):
    """Checks for viewport, media queries, flexible layout and fluid sizing."""

    check_id = "responsive_design"
    name = "Responsive Design"
    category = "visual"
    signals = (
        Contains("viewport", ("viewport",)),
        Contains("media-queries", ("@media",)),
        Contains("flex-layout", ("flex", "grid")),
        Contains("clamp", ("clamp(",)),
    )


class VisualFeedbackCheck(MarkerCheck):
    """Checks for hover, active and keyboard focus states."""

    check_id = "visual_feedback"
    name = "Visual Feedback"
    category = "visual"
    signals = (
        Contains("hover", (":hover",)),
        Contains("active", (":active",)),
        Contains("focus", (":focus",)),
        Contains("focus-visible", (":focus-visible",)),
    )


class RtlSupportCheck(MarkerCheck):
    """Checks right-to-left direction and Hebrew language declarations."""

    check_id = "rtl_support"
    name = "RTL Support"
    category = "visual"
    signals = (
        Contains("rtl", ('dir="rtl"', "direction: rtl")),
        Contains("hebrew-lang", ('lang="he"',)),
    )
