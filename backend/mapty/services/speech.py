"""Speech synthesis queue. The page drains it and speaks each utterance with the browser API."""

from __future__ import annotations

from mapty.schemas.view import Utterance


class SpeechAnnouncer:
    def __init__(self, lang: str = "en-US", rate: float = 0.7, enabled: bool = True):
        self.lang = lang
        self.rate = rate
        self.enabled = enabled
        self._queue: list[Utterance] = []

    def speak(self, text: str) -> None:
        if self.enabled:
            self._queue.append(Utterance(text=text, lang=self.lang, rate=self.rate))

    def cancel(self) -> None:
        """Drop everything not yet spoken."""
        self._queue.clear()

    @property
    def pending(self) -> list[str]:
        return [u.text for u in self._queue]

    def drain(self) -> list[Utterance]:
        out, self._queue = self._queue, []
        return out
