"""Type-safety checks."""

from __future__ import annotations

from game_audit.checks.base import Contains, FewerThan, MarkerCheck, Pattern


class NullSafetyCheck(MarkerCheck):
    """Looks for null, undefined, optional-chaining and nullish-coalescing guards."""

    check_id = "null_safety"
    name = "Null/Undefined Handling"
    category = "type_safety"
    signals = (
        Contains("null-check", ("!== null", "!= null")),
        Contains("undefined-check", ("!== undefined", "typeof")),
        Contains("optional-chaining", ("?.",)),
        Contains("nullish-coalescing", ("??",)),
    )


class VariableDeclarationsCheck(MarkerCheck):
    """Prefers block-scoped declarations over ``var``."""

    check_id = "variable_declarations"
    name = "Variable Declarations"
    category = "type_safety"
    signals = (
        Pattern("let", r"\blet\s+\w+"),
        Pattern("const", r"\bconst\s+\w+"),
        FewerThan("minimal-var", r"\bvar\s+", 3),
    )
