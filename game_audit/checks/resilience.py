"""Error-recovery checks."""

from __future__ import annotations

from game_audit.checks.base import Contains, Lacks, MarkerCheck


class ErrorHandlerCheck(MarkerCheck):
    """Checks that the safe-execution helpers of the error handler are present."""

    check_id = "error_handler"
    name = "Error Handler"
    category = "resilience"
    signals = (
        Contains("safe-execute", ("safeExecute",)),
        Contains("safe-query", ("safeQuery",)),
        Contains("safe-json", ("safeJSON",)),
        Contains("safe-storage", ("safeStorage",)),
    )


class ConsoleHygieneCheck(MarkerCheck):
    """Flags ``console.error`` calls that surface as script errors."""

    check_id = "console_hygiene"
    name = "Script Execution"
    category = "resilience"
    signals = (Lacks("no-console-error", "console.error"),)
