"""Observers that receive walk events."""

import queue
import threading
from typing import Optional

from .audio import Audio
from .logger import Logger


class NotificationSink:
    """Receives anchor, point and replay events. Methods default to no-ops."""

    def on_anchor_updated(self, lat: float, lon: float):
        pass

    def on_point_generated(self, ordinal: int, lat: float, lon: float):
        pass

    def on_replay_status(self, starting: bool):
        pass


def format_point(ordinal: int, lat: float, lon: float) -> str:
    return f"Random Walk #{ordinal} Lat: {lat:.2f} Lon: {lon:.2f}"


class ConsoleSink(NotificationSink):
    """Prints a status line for every event"""

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger
        self.status = "Random Walk (running)"

    def _show(self, status: str, data: Optional[dict] = None):
        self.status = status
        if self.logger:
            self.logger.log(status, data)
        else:
            print(status)

    def on_anchor_updated(self, lat: float, lon: float):
        self._show(f"Random Walk anchored at {lat:.5f}, {lon:.5f}")

    def on_point_generated(self, ordinal: int, lat: float, lon: float):
        self._show(format_point(ordinal, lat, lon))

    def on_replay_status(self, starting: bool):
        if starting:
            self._show("Random Walk (replay starting)")
        else:
            self._show("Random Walk (replay finished)")


class AudioSink(NotificationSink):
    """Speaks point numbers and replay transitions.

    Speech runs on a worker thread fed by a queue. espeak can take seconds
    per phrase, and the walk notifies sinks from inside scheduler ticks, so
    the event methods only enqueue and return. Phrases are spoken in the
    order the events arrived.
    """

    def __init__(self, audio: Optional[Audio] = None):
        self.audio = audio or Audio()
        self._queue: queue.Queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="randomwalk-audio", daemon=True)
        self._thread.start()

    def on_anchor_updated(self, lat: float, lon: float):
        self._queue.put("Location found. Starting random walk")

    def on_point_generated(self, ordinal: int, lat: float, lon: float):
        self._queue.put(f"Random walk number {ordinal}")

    def on_replay_status(self, starting: bool):
        self._queue.put("Replay starting" if starting else "Replay finished")

    def close(self, timeout: Optional[float] = None) -> bool:
        """Finish speaking what is queued, then stop the worker.

        Returns False if the worker was still busy when timeout ran out.
        """
        self._queue.put(None)
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self):
        while True:
            text = self._queue.get()
            if text is None:
                return
            try:
                self.audio.speak(text)
            except Exception as e:
                self.audio.fallback(text, f"speech failed: {e}")
