"""The random walk engine: anchor, bounded history, persistence and observers."""

import sqlite3
import threading
import time
from typing import Iterable, Optional

from .config import CONFIG
from .generator import WalkGenerator
from .geo import LATITUDE_SPAN_DEGREES, haversine_distance, longitude_span_degrees
from .history import HistoryDB
from .logger import Logger
from .models import Location, WalkPoint
from .notify import NotificationSink
from .store import HistoryStore


class RandomWalk:
    """Owns the walk state for one run.

    Generation, insertion and persistence run under one lock so ticks from
    any thread are serialized.
    """

    def __init__(self, config: Optional[dict] = None,
                 generator: Optional[WalkGenerator] = None,
                 db: Optional[HistoryDB] = None,
                 sinks: Optional[Iterable[NotificationSink]] = None,
                 logger: Optional[Logger] = None):
        self.config = config or CONFIG
        self.logger = logger or Logger()
        self.generator = generator or WalkGenerator(self.config)
        self.history = HistoryStore(self.config["max_history_size"])
        self.db = db
        self.sinks: list[NotificationSink] = list(sinks or [])

        self.anchor: Optional[Location] = None
        self.latitude_delta = LATITUDE_SPAN_DEGREES
        self.longitude_delta: Optional[float] = None

        self._lock = threading.RLock()

    def add_sink(self, sink: NotificationSink):
        self.sinks.append(sink)

    def load(self) -> int:
        """Repopulate the history from the saved walk. Returns points loaded."""
        if not self.db:
            return 0
        try:
            points = self.db.load()
        except sqlite3.Error as e:
            self.logger.log("Could not load saved walk", {"error": str(e)})
            points = None

        with self._lock:
            self.history.clear()
            if not points:
                self.logger.log("No saved walk, starting fresh")
                return 0
            count = self.history.restore(points)
        self.logger.log("Loaded saved walk", {
            "points": count,
            "latest": self.history.latest().ordinal,
        })
        return count

    def on_fix(self, lat: float, lon: float, accuracy: Optional[float] = None) -> bool:
        """Accept the first location fix as the anchor. Later fixes are ignored."""
        with self._lock:
            if self.anchor is not None:
                self.logger.log("Ignoring location fix, anchor already set", {"lat": lat, "lon": lon})
                return False
            self.longitude_delta = longitude_span_degrees(lat)
            self.anchor = Location(lat=lat, lon=lon, accuracy=accuracy, timestamp=time.time())

        self.logger.log("Anchor set", {
            "lat": lat,
            "lon": lon,
            "latitude_delta": self.latitude_delta,
            "longitude_delta": self.longitude_delta,
        })
        self._notify("on_anchor_updated", lat, lon)
        return True

    @property
    def has_anchor(self) -> bool:
        return self.anchor is not None

    def step(self) -> Optional[WalkPoint]:
        """Generate, store, save and announce one point.

        Returns None without doing anything while there is no anchor.
        """
        with self._lock:
            if self.anchor is None:
                self.logger.log("No anchor yet, skipping generation")
                return None

            point = self.generator.next(self.anchor, self.history)
            evicted = self.history.insert(point)
            self._save()

            data = {"ordinal": point.ordinal, "lat": point.lat, "lon": point.lon,
                    "from_anchor_m": round(haversine_distance(
                        self.anchor.lat, self.anchor.lon, point.lat, point.lon), 1)}
            if evicted:
                data["evicted"] = evicted.ordinal
            self.logger.log("Generated point", data)

        self._notify("on_point_generated", point.ordinal, point.lat, point.lon)
        return point

    def snapshot(self) -> list[WalkPoint]:
        with self._lock:
            return self.history.snapshot()

    def clear(self):
        """Forget the walk, in memory and on disk"""
        with self._lock:
            self.history.clear()
            if self.db:
                try:
                    self.db.clear()
                except sqlite3.Error as e:
                    self.logger.log("Could not clear saved walk", {"error": str(e)})
        self.logger.log("Walk cleared")

    def announce_point(self, point: WalkPoint):
        self._notify("on_point_generated", point.ordinal, point.lat, point.lon)

    def announce_replay(self, starting: bool):
        self._notify("on_replay_status", starting)

    def _save(self):
        if not self.db:
            return
        try:
            self.db.save(self.history.snapshot())
        except sqlite3.Error as e:
            self.logger.log("Could not save walk", {"error": str(e)})

    def _notify(self, event: str, *args):
        for sink in list(self.sinks):
            try:
                getattr(sink, event)(*args)
            except Exception as e:
                self.logger.log("Notification failed", {
                    "sink": type(sink).__name__,
                    "event": event,
                    "error": str(e),
                })
