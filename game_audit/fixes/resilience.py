"""Error-recovery fixes."""

from __future__ import annotations

from game_audit.fixes.base import InjectionFix, Rewrite, RewriteFix

HEAD_CLOSE = "</head>"

ERROR_HANDLER_MARKER = "<!-- Error Handler v6.0"

ERROR_HANDLER_SCRIPT = """
<!-- Error Handler v6.0 - Added by game-audit -->
<script>
(function () {
    function report(error, context) {
        if (window.errorManager && window.errorManager.captureError) {
            window.errorManager.captureError(error, context);
        } else {
            console.warn('Recovered error:', error, context);
        }
    }

    async function safeExecute(fn, context = {}) {
        try {
            return await fn();
        } catch (error) {
            report(error, context);
            return null;
        }
    }

    function safeQuery(selector, root = document) {
        const element = root.querySelector(selector);
        if (element === null) {
            report(new Error('Element not found: ' + selector), { selector });
        }
        return element;
    }

    function safeJSON(text, fallback = null) {
        try {
            return JSON.parse(text);
        } catch (error) {
            report(error, { text: String(text).substring(0, 100) });
            return fallback;
        }
    }

    function safeStorage(key, value) {
        try {
            if (value === undefined) {
                return localStorage.getItem(key);
            }
            if (value === null) {
                localStorage.removeItem(key);
                return null;
            }
            localStorage.setItem(key, typeof value === 'string' ? value : JSON.stringify(value));
            return true;
        } catch (error) {
            report(error, { key });
            return false;
        }
    }

    window.safeExecute = safeExecute;
    window.safeQuery = safeQuery;
    window.safeJSON = safeJSON;
    window.safeStorage = safeStorage;
})();
</script>
"""


def error_handler_fix(targets: tuple[str, ...]) -> InjectionFix:
    return InjectionFix(
        fix_id="error_handler",
        name="Error Handler",
        category="resilience",
        check_ids=("error_handler",),
        targets=targets,
        anchor=HEAD_CLOSE,
        marker=ERROR_HANDLER_MARKER,
        block=ERROR_HANDLER_SCRIPT,
    )


def console_hygiene_fix(targets: tuple[str, ...]) -> RewriteFix:
    return RewriteFix(
        fix_id="console_hygiene",
        name="Console Hygiene",
        category="resilience",
        check_ids=("console_hygiene",),
        targets=targets,
        rewrites=(Rewrite(r"console\.error\b", "console.warn"),),
    )
