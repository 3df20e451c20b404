"""Tests for location sources and anchor acquisition."""

import json
import subprocess
from types import SimpleNamespace

from randomwalk import GPS, AnchorWatcher, Location, StaticLocation, make_config
from randomwalk import geo, gps


class FlakySource:
    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def get_location(self, timeout=30):
        self.calls += 1
        if self.calls <= self.failures:
            return None
        return Location(lat=51.5, lon=-0.12, accuracy=5.0)

    def get_status(self):
        return f"{self.calls} calls"


class TestGPS:

    def test_parses_termux_output(self, monkeypatch):
        payload = json.dumps({"latitude": 40.1, "longitude": -74.2, "accuracy": 8.0})
        monkeypatch.setattr(gps.subprocess, "run",
                            lambda *a, **k: SimpleNamespace(returncode=0, stdout=payload, stderr=""))

        location = GPS().get_location()

        assert (location.lat, location.lon, location.accuracy) == (40.1, -74.2, 8.0)

    def test_missing_termux_counts_failure(self, monkeypatch):
        def missing(*args, **kwargs):
            raise FileNotFoundError("termux-location")

        monkeypatch.setattr(gps.subprocess, "run", missing)
        source = GPS()

        assert source.get_location() is None
        assert source.get_location() is None
        assert source.consecutive_failures == 2
        assert "2 consecutive failures" in source.get_status()

    def test_timeout_counts_failure(self, monkeypatch):
        def slow(*args, **kwargs):
            raise subprocess.TimeoutExpired("termux-location", 1)

        monkeypatch.setattr(gps.subprocess, "run", slow)
        source = GPS()
        assert source.get_location() is None
        assert source.last_error == "timeout"

    def test_failed_command_reports_stderr(self, monkeypatch):
        monkeypatch.setattr(gps.subprocess, "run",
                            lambda *a, **k: SimpleNamespace(returncode=1, stdout="", stderr="permission denied\n"))
        source = GPS()

        assert source.get_location() is None
        assert source.last_error == "permission denied"

    def test_out_of_range_fix_is_rejected(self, monkeypatch):
        payload = json.dumps({"latitude": 123.0, "longitude": 10.0})
        monkeypatch.setattr(gps.subprocess, "run",
                            lambda *a, **k: SimpleNamespace(returncode=0, stdout=payload, stderr=""))
        source = GPS()

        assert source.get_location() is None
        assert source.last_error.startswith("bad response")

    def test_success_resets_failures_and_uses_provider(self, monkeypatch):
        commands = []
        replies = iter(["", json.dumps({"latitude": 1.0, "longitude": 2.0, "accuracy": 12.0})])

        def run(cmd, **kwargs):
            commands.append(cmd)
            return SimpleNamespace(returncode=0, stdout=next(replies), stderr="")

        monkeypatch.setattr(gps.subprocess, "run", run)
        source = GPS(provider="network")

        assert source.get_location() is None
        assert source.last_error == "bad response: empty response"
        assert source.get_location().lat == 1.0
        assert source.consecutive_failures == 0
        assert source.get_status() == "GPS OK, accuracy 12m"
        assert commands[0][:3] == ["termux-location", "-p", "network"]

    def test_static_location(self):
        location = StaticLocation(12.5, 45.0).get_location()
        assert (location.lat, location.lon) == (12.5, 45.0)


class TestAnchorWatcher:

    def test_first_fix_becomes_anchor(self, monkeypatch, walk, sink, logger):
        monkeypatch.setattr(geo.time, "sleep", lambda s: None)
        source = FlakySource(failures=2)
        watcher = AnchorWatcher(source, walk, make_config(gps_retry_time=3600), logger)

        location = watcher.run()

        assert location.lat == 51.5
        assert walk.anchor.lat == 51.5
        assert source.calls == 3
        assert sink.events == [("anchor", 51.5, -0.12)]

    def test_stopped_watcher_gives_up(self, walk, logger):
        watcher = AnchorWatcher(FlakySource(failures=100), walk, logger=logger)
        watcher.stop()
        assert watcher.run() is None
        assert not walk.has_anchor

    def test_background_thread(self, walk, logger):
        watcher = AnchorWatcher(StaticLocation(1.0, 2.0), walk, logger=logger)
        watcher.start()
        watcher.join(5)
        assert walk.anchor.lat == 1.0
