"""Tests for the walk engine."""

import math

import pytest

from randomwalk import CONFIG, RandomWalk, WalkGenerator, WalkPoint
from randomwalk.geo import longitude_span_degrees


class BrokenSink:
    def on_anchor_updated(self, lat, lon):
        raise RuntimeError("display gone")

    def on_point_generated(self, ordinal, lat, lon):
        raise RuntimeError("display gone")

    def on_replay_status(self, starting):
        raise RuntimeError("display gone")


class TestAnchor:

    def test_first_fix_sets_anchor(self, walk, sink):
        assert walk.on_fix(40.0, -74.0) is True
        assert walk.anchor.lat == 40.0
        assert walk.anchor.lon == -74.0
        assert walk.longitude_delta == pytest.approx(longitude_span_degrees(40.0))
        assert sink.events == [("anchor", 40.0, -74.0)]

    def test_later_fixes_are_ignored(self, walk, sink):
        walk.on_fix(40.0, -74.0)
        assert walk.on_fix(10.0, 10.0) is False
        assert walk.anchor.lat == 40.0
        assert len(sink.events) == 1

    def test_anchor_where_longitude_span_is_infinite(self, walk, sink):
        lat = 69.0 * 69.0 / 90.0

        assert walk.on_fix(lat, 10.0) is True

        assert walk.anchor.lat == lat
        assert walk.longitude_delta == math.inf
        assert sink.events == [("anchor", lat, 10.0)]
        assert walk.step() is not None


class TestStep:

    def test_no_anchor_skips(self, walk, sink, db):
        assert walk.step() is None
        assert walk.history.is_empty
        assert sink.events == []
        assert db.load() is None

    def test_step_inserts_saves_and_notifies(self, walk, sink, db):
        walk.on_fix(40.0, -74.0)

        first = walk.step()
        second = walk.step()

        assert (first.ordinal, second.ordinal) == (1, 2)
        assert walk.snapshot() == [first, second]
        assert db.load() == [first, second]
        assert sink.points() == [1, 2]

    def test_history_stays_bounded(self, walk):
        walk.on_fix(40.0, -74.0)
        for _ in range(CONFIG["max_history_size"] + 5):
            walk.step()
        snapshot = walk.snapshot()
        assert len(snapshot) == CONFIG["max_history_size"]
        assert snapshot[0].ordinal == 6

    def test_failing_sink_does_not_stop_generation(self, walk, sink):
        walk.sinks.insert(0, BrokenSink())
        walk.on_fix(40.0, -74.0)
        assert walk.step().ordinal == 1
        assert sink.points() == [1]

    def test_persistence_failure_is_not_fatal(self, walk, db):
        walk.on_fix(40.0, -74.0)
        db.close()
        assert walk.step().ordinal == 1
        assert len(walk.history) == 1


class TestLoad:

    def test_load_continues_saved_walk(self, walk, db):
        db.save([WalkPoint(11, 40.2, -74.1), WalkPoint(12, 40.21, -74.1)])

        assert walk.load() == 2
        walk.on_fix(40.0, -74.0)

        assert walk.step().ordinal == 13

    def test_load_without_save_bootstraps(self, walk):
        assert walk.load() == 0
        walk.on_fix(40.0, -74.0)
        assert walk.step().ordinal == 1

    def test_load_without_db(self, logger):
        walk = RandomWalk(CONFIG, logger=logger)
        assert walk.load() == 0

    def test_clear_forgets_saved_walk(self, walk, db):
        walk.on_fix(40.0, -74.0)
        walk.step()
        walk.clear()
        assert walk.history.is_empty
        assert db.load() is None
        assert walk.step().ordinal == 1


def test_engine_without_storage_or_sinks(logger, rng):
    walk = RandomWalk(CONFIG, generator=WalkGenerator(CONFIG, rng=rng), logger=logger)
    walk.on_fix(1.0, 2.0)
    assert walk.step().ordinal == 1
