"""Main RandomWalk application."""

import random
import threading
import time
from typing import Optional

from .audio import Audio
from .config import CONFIG
from .generator import WalkGenerator
from .gps import GPS, AnchorWatcher, StaticLocation
from .gpx import export_gpx
from .history import HistoryDB
from .logger import Logger
from .notify import AudioSink, ConsoleSink, NotificationSink
from .scheduler import Mode, WalkScheduler
from .walk import RandomWalk


class CountingSink(NotificationSink):
    """Signals when a number of live points has been generated"""

    def __init__(self, target: int):
        self.target = target
        self.count = 0
        self.replaying = False
        self.done = threading.Event()

    def on_replay_status(self, starting: bool):
        self.replaying = starting

    def on_point_generated(self, ordinal: int, lat: float, lon: float):
        if self.replaying:
            return
        self.count += 1
        if self.count >= self.target:
            self.done.set()


class RandomWalkApp:
    """Wires the walk, its storage, location source, sinks and scheduler"""

    def __init__(self, config: Optional[dict] = None, log_path: Optional[str] = None,
                 start_location: Optional[tuple[float, float]] = None,
                 speak: bool = False, seed: Optional[int] = None,
                 logger: Optional[Logger] = None):
        self.config = config or CONFIG
        self.logger = logger or Logger(log_path)
        self.db = HistoryDB(self.config["db_path"], self.config["max_history_size"],
                            logger=self.logger)

        generator = WalkGenerator(self.config, rng=random.Random(seed))
        self.walk = RandomWalk(self.config, generator=generator, db=self.db,
                               logger=self.logger)
        self.console = ConsoleSink(self.logger)
        self.walk.add_sink(self.console)
        self.audio_sink: Optional[AudioSink] = None
        if speak:
            self.audio_sink = AudioSink(Audio(logger=self.logger))
            self.walk.add_sink(self.audio_sink)

        self.scheduler = WalkScheduler(self.walk, self.config, self.logger)

        if start_location:
            self.location_source = StaticLocation(*start_location)
        else:
            self.location_source = GPS()
        self.anchor_watcher = AnchorWatcher(self.location_source, self.walk,
                                            self.config, self.logger)
        self.start_time = 0.0

    def run(self, count: Optional[int] = None):
        """Generate points until interrupted (or until count points are made)"""
        print("\n=== Random Walk ===")
        print(f"Update interval: {self.config['update_time_interval']}s")
        print("Press Ctrl+C to stop")
        print()

        counter = None
        if count:
            counter = CountingSink(count)
            self.walk.add_sink(counter)

        self.start_time = time.time()
        self.walk.load()
        self.anchor_watcher.start()
        self.scheduler.start(immediate=True)
        try:
            if counter:
                while not counter.done.wait(1):
                    pass
            else:
                while True:
                    time.sleep(1)
        except KeyboardInterrupt:
            print("\nRandom walk interrupted")
            self.logger.log("Walk interrupted by user")
        finally:
            self.shutdown()

    def replay(self):
        """Replay the saved walk once, then exit"""
        self.walk.load()
        self.scheduler.replay()
        try:
            self.scheduler.wait_idle()
        except KeyboardInterrupt:
            print("\nReplay interrupted")
            self.logger.log("Replay interrupted by user")
        finally:
            self.shutdown()

    def reset(self) -> int:
        """Erase the saved walk. Returns how many points were erased."""
        saved = self.db.load() or []
        self.walk.clear()
        self.shutdown()
        return len(saved)

    def export(self, path: str) -> int:
        points = self.db.load() or []
        written = export_gpx(points, path)
        self.logger.log("Exported walk", {"path": path, "points": written})
        self.shutdown()
        return written

    def summary(self) -> dict:
        snapshot = self.walk.snapshot()
        return {
            "points": len(snapshot),
            "latest": snapshot[-1].ordinal if snapshot else None,
            "anchor": self.walk.anchor.to_dict() if self.walk.anchor else None,
            "duration": time.time() - self.start_time if self.start_time else 0,
        }

    def shutdown(self):
        if self.scheduler.mode is not Mode.IDLE:
            self.scheduler.stop()
        self.anchor_watcher.stop()
        if self.audio_sink and not self.audio_sink.close(timeout=15):
            self.logger.log("Audio still speaking at shutdown")
        self.logger.log("Walk summary", self.summary())
        self.db.close()
        self.logger.close()
