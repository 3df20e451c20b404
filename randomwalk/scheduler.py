"""Live generation and replay timers."""

import threading
from enum import Enum
from typing import Callable, Optional

from .config import CONFIG
from .logger import Logger
from .models import WalkPoint
from .walk import RandomWalk


class Mode(Enum):
    IDLE = "idle"
    LIVE = "live"
    REPLAYING = "replaying"


class RepeatingTimer:
    """Calls callback every interval seconds on a daemon thread until cancelled"""

    def __init__(self, interval: float, callback: Callable[[], None],
                 name: str = "randomwalk-timer"):
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self):
        self._thread.start()

    def cancel(self):
        self._stopped.set()

    @property
    def cancelled(self) -> bool:
        return self._stopped.is_set()

    def _run(self):
        while not self._stopped.wait(self.interval):
            self.callback()


class WalkScheduler:
    """Drives the walk in one of two mutually exclusive modes.

    LIVE generates a point every update_time_interval seconds. REPLAYING
    re-announces the stored walk one point per replay_time_interval seconds,
    then drops back to the mode it came from. Only one timer is ever active:
    every mode switch cancels the previous timer under the lock, and each
    tick carries the generation it was scheduled under so a tick that was
    already in flight when its timer got cancelled does nothing.
    """

    def __init__(self, walk: RandomWalk, config: Optional[dict] = None,
                 logger: Optional[Logger] = None,
                 timer_factory: Optional[Callable[[float, Callable[[], None]], RepeatingTimer]] = None):
        self.walk = walk
        self.config = config or walk.config or CONFIG
        self.logger = logger or walk.logger
        self.timer_factory = timer_factory or RepeatingTimer

        self.mode = Mode.IDLE
        self._lock = threading.RLock()
        self._timer: Optional[RepeatingTimer] = None
        self._generation = 0
        self._replay_queue: list[WalkPoint] = []
        self._resume_live = False
        self._idle = threading.Event()
        self._idle.set()

    def start(self, immediate: bool = False):
        """Begin (or resume) live generation"""
        with self._lock:
            if self.mode is Mode.REPLAYING:
                self._end_replay()
            self._go_live(immediate)

    def restart(self, immediate: bool = False):
        """Throw away the walk and start generating a new one"""
        with self._lock:
            self._cancel_timer()
            if self.mode is Mode.REPLAYING:
                self._end_replay()
            self.walk.clear()
            self.logger.log("Walk restarted")
            self._go_live(immediate)

    def replay(self) -> bool:
        """Replay the stored walk. Returns False if a replay is already running."""
        with self._lock:
            if self.mode is Mode.REPLAYING:
                self.logger.log("Replay already running")
                return False

            self._resume_live = self.mode is Mode.LIVE
            self._cancel_timer()
            self._replay_queue = self.walk.snapshot()
            self._set_mode(Mode.REPLAYING)
            self.logger.log("Replay starting", {"points": len(self._replay_queue)})
            self.walk.announce_replay(True)
            self._schedule(self.config["replay_time_interval"], self._replay_tick)
            return True

    def stop(self):
        """Cancel all ticking"""
        with self._lock:
            self._cancel_timer()
            if self.mode is Mode.REPLAYING:
                self._end_replay()
            self._set_mode(Mode.IDLE)
            self.logger.log("Scheduler stopped")

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the scheduler is idle, e.g. after a replay-only run"""
        return self._idle.wait(timeout)

    def _live_tick(self, generation: int):
        with self._lock:
            if generation != self._generation or self.mode is not Mode.LIVE:
                return
            try:
                self.walk.step()
            except Exception as e:
                self.logger.log("Live tick failed", {"error": str(e)})

    def _replay_tick(self, generation: int):
        with self._lock:
            if generation != self._generation or self.mode is not Mode.REPLAYING:
                return
            if self._replay_queue:
                point = self._replay_queue.pop(0)
                self.walk.announce_point(point)
                return

            self._cancel_timer()
            self._end_replay()
            if self._resume_live:
                self._go_live()
            else:
                self._set_mode(Mode.IDLE)

    def _go_live(self, immediate: bool = False):
        self._set_mode(Mode.LIVE)
        self._schedule(self.config["update_time_interval"], self._live_tick)
        self.logger.log("Live generation started", {
            "interval": self.config["update_time_interval"],
        })
        if immediate:
            self._live_tick(self._generation)

    def _end_replay(self):
        self._replay_queue = []
        self.logger.log("Replay finished")
        self.walk.announce_replay(False)

    def _schedule(self, interval: float, tick: Callable[[int], None]):
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._timer = self.timer_factory(interval, lambda: tick(generation))
        self._timer.start()

    def _cancel_timer(self):
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _set_mode(self, mode: Mode):
        self.mode = mode
        if mode is Mode.IDLE:
            self._idle.set()
        else:
            self._idle.clear()
