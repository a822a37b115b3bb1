"""CSS injection fixes for responsive layout and interaction states."""

from __future__ import annotations

from game_audit.fixes.base import InjectionFix

STYLE_CLOSE = "</style>"

RESPONSIVE_MARKER = "/* Responsive Design Fixes"
FOCUS_MARKER = "/* Focus States"

RESPONSIVE_CSS = """
/* Responsive Design Fixes - Added by game-audit */
@media (max-width: 768px) {
    .game-container {
        padding: 15px;
        max-width: 100%;
    }

    .game-board {
        width: 90vw;
        max-width: 500px;
    }

    .button, button {
        min-height: 48px;
        font-size: 1.1rem;
    }

    .stats {
        display: flex;
        flex-wrap: wrap;
        gap: 10px;
    }
}

@media (max-width: 480px) {
    .game-title {
        font-size: 1.8rem !important;
    }

    .game-board {
        width: 95vw;
        padding: 10px;
    }

    .button, button {
        width: 100%;
        min-height: 50px;
    }
}

/* Clamp() Responsive Sizing - Added by game-audit */
.game-title {
    font-size: clamp(1.5rem, 5vw, 3rem) !important;
}

.button, button {
    font-size: clamp(0.9rem, 2vw, 1.2rem);
    padding: clamp(10px, 2vw, 20px) clamp(15px, 3vw, 30px);
}

.score, .stat-value {
    font-size: clamp(1.2rem, 3vw, 2rem);
}

.game-container {
    padding: clamp(10px, 3vw, 30px);
}

.game-board {
    width: clamp(280px, 90vw, 600px);
    max-width: 100%;
}
"""

FEEDBACK_CSS = """
/* Focus States - Added by game-audit */
button:focus,
.clickable:focus,
.card:focus,
.game-cell:focus {
    outline: 3px solid #4facfe;
    outline-offset: 2px;
    z-index: 10;
}

button:focus-visible {
    outline: 3px solid #00f2fe;
    outline-offset: 4px;
    box-shadow: 0 0 20px rgba(79, 172, 254, 0.5);
}

button:focus:not(:focus-visible) {
    outline: none;
}

/* Active States - Added by game-audit */
button:active,
.clickable:active {
    transform: scale(0.95);
    box-shadow: inset 0 3px 5px rgba(0, 0, 0, 0.3);
}

.card:active {
    transform: scale(0.98);
    box-shadow: 0 2px 5px rgba(0, 0, 0, 0.3);
}

.game-cell:active {
    background: rgba(79, 172, 254, 0.3);
    transform: scale(0.97);
}
"""


def responsive_fix(targets: tuple[str, ...]) -> InjectionFix:
    return InjectionFix(
        fix_id="responsive",
        name="Responsive Design",
        category="visual",
        check_ids=("responsive_design",),
        targets=targets,
        anchor=STYLE_CLOSE,
        marker=RESPONSIVE_MARKER,
        block=RESPONSIVE_CSS,
    )


def visual_feedback_fix(targets: tuple[str, ...]) -> InjectionFix:
    return InjectionFix(
        fix_id="visual_feedback",
        name="Focus and Active States",
        category="visual",
        check_ids=("visual_feedback",),
        targets=targets,
        anchor=STYLE_CLOSE,
        marker=FOCUS_MARKER,
        block=FEEDBACK_CSS,
    )
