"""Sound checks: audio system deployment, visual fallback, pronunciation."""

from __future__ import annotations

import fnmatch

from game_audit.checks.base import CheckResult, Contains, MarkerCheck


class AudioSystemCheck(MarkerCheck):
    """Checks that the shared audio manager is deployed."""

    check_id = "audio_system"
    name = "Audio System"
    category = "sound"
    signals = (
        Contains("audio-manager", ("AudioManager", "audioManager")),
        Contains("audio-v6", ("Audio System v6.0", "Audio Manager v6.0")),
    )


class AudioFallbackCheck(MarkerCheck):
    """Checks for a visual fallback when audio cannot play."""

    check_id = "audio_fallback"
    name = "Visual Fallback"
    category = "sound"
    signals = (Contains("visual-fallback", ("flashScreen", "provideVisualFeedback")),)


class PronunciationCheck(MarkerCheck):
    """Checks speech synthesis support in language-learning games."""

    check_id = "pronunciation"
    name = "Pronunciation Support"
    category = "sound"
    applies_to: tuple[str, ...] = ("*hebrew-english*",)
    signals = (
        Contains("speech-api", ("speechSynthesis", "SpeechSynthesisUtterance")),
        Contains("speak-button", ("speakWord", "speak-button")),
    )

    def evaluate(self, text: str, *, artifact: str) -> CheckResult:
        if not any(fnmatch.fnmatch(artifact, pattern) for pattern in self.applies_to):
            return CheckResult(
                check_id=self.check_id,
                name=self.name,
                category=self.category,
                status="pass",
                score=100,
                message=f"{self.name}: not applicable",
            )
        return MarkerCheck.evaluate(self, text, artifact=artifact)
