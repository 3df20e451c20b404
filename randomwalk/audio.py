"""Text-to-speech announcements for RandomWalk."""

import subprocess
from typing import Callable, Optional

from .logger import Logger


class Audio:
    """Speaks short announcements.

    Tries espeak first (available in Termux), then pyttsx3, and finally just
    logs the text so announcements are never lost.
    """

    def __init__(self, rate: int = 150, logger: Optional[Logger] = None,
                 callback: Optional[Callable[[str], None]] = None):
        self.rate = rate
        self.logger = logger
        self.callback = callback
        self._engine = None
        self._use_espeak = True

    def speak(self, text: str):
        if self.callback:
            self.callback(text)

        if self._use_espeak:
            try:
                subprocess.run(
                    ["espeak", "-s", str(self.rate), text],
                    capture_output=True,
                    timeout=10
                )
                return
            except FileNotFoundError:
                self._use_espeak = False
            except subprocess.TimeoutExpired:
                self.fallback(text, "espeak timed out")
                return

        try:
            engine = self._pyttsx3_engine()
            engine.say(text)
            engine.runAndWait()
        except Exception as e:
            self.fallback(text, f"pyttsx3 unavailable: {e}")

    def _pyttsx3_engine(self):
        if self._engine is None:
            import pyttsx3
            self._engine = pyttsx3.init()
            self._engine.setProperty("rate", self.rate)
        return self._engine

    def fallback(self, text: str, reason: str):
        if self.logger:
            self.logger.log(f"[AUDIO] {text}", {"reason": reason})
        else:
            print(f"[AUDIO] {text}")
