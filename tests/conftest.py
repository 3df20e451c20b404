"""Shared fixtures for the RandomWalk tests."""

import random

import pytest

from randomwalk import CONFIG, HistoryDB, Logger, NotificationSink, RandomWalk, WalkGenerator


class RecordingSink(NotificationSink):
    """Keeps every event in order as tuples"""

    def __init__(self):
        self.events: list[tuple] = []

    def on_anchor_updated(self, lat, lon):
        self.events.append(("anchor", lat, lon))

    def on_point_generated(self, ordinal, lat, lon):
        self.events.append(("point", ordinal, lat, lon))

    def on_replay_status(self, starting):
        self.events.append(("replay", starting))

    def points(self) -> list[int]:
        return [e[1] for e in self.events if e[0] == "point"]

    def kinds(self) -> list:
        return [e[1] if e[0] == "replay" else e[0] for e in self.events]


class ManualTimer:
    """Stand-in for RepeatingTimer; tests fire it by hand"""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        # A real timer thread may still call back once after cancel
        self.callback()


class TimerFactory:
    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, interval, callback):
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def current(self) -> ManualTimer:
        return self.timers[-1]

    def active(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def logger():
    return Logger(echo=False)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def timers():
    return TimerFactory()


@pytest.fixture
def db(tmp_path, logger):
    history_db = HistoryDB(str(tmp_path / "walk.db"), CONFIG["max_history_size"], logger=logger)
    yield history_db
    history_db.close()


@pytest.fixture
def walk(db, sink, logger, rng):
    return RandomWalk(CONFIG, generator=WalkGenerator(CONFIG, rng=rng), db=db,
                      sinks=[sink], logger=logger)
