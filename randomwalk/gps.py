"""Location sources for the walk anchor."""

import json
import subprocess
import threading
import time
from typing import Optional

from .config import CONFIG
from .geo import retry_with_backoff
from .logger import Logger
from .models import Location
from .walk import RandomWalk


class GPS:
    """One-shot fixes from the Termux location API.

    Every failed request bumps consecutive_failures and records the reason
    in last_error; a good fix resets both.
    """

    def __init__(self, provider: str = "gps"):
        self.provider = provider
        self.last_location: Optional[Location] = None
        self.consecutive_failures = 0
        self.last_error: Optional[str] = None

    def get_location(self, timeout: int = 30) -> Optional[Location]:
        try:
            output = self._request(timeout)
        except subprocess.TimeoutExpired:
            return self._failed("timeout")
        except FileNotFoundError:
            return self._failed("termux-location not installed")
        except subprocess.CalledProcessError as e:
            return self._failed((e.stderr or "").strip() or f"exit status {e.returncode}")

        try:
            location = self._parse(output)
        except (KeyError, TypeError, ValueError) as e:
            return self._failed(f"bad response: {e}")

        self.last_location = location
        self.consecutive_failures = 0
        self.last_error = None
        return location

    def _request(self, timeout: int) -> str:
        result = subprocess.run(
            ["termux-location", "-p", self.provider, "-r", "once"],
            capture_output=True, text=True, timeout=timeout,
        )
        if result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, "termux-location",
                                                output=result.stdout, stderr=result.stderr)
        return result.stdout or ""

    @staticmethod
    def _parse(output: str) -> Location:
        if not output.strip():
            raise ValueError("empty response")
        data = json.loads(output)
        lat, lon = float(data["latitude"]), float(data["longitude"])
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            raise ValueError(f"coordinates out of range ({lat}, {lon})")
        return Location(lat=lat, lon=lon, accuracy=data.get("accuracy"), timestamp=time.time())

    def _failed(self, reason: str) -> None:
        self.consecutive_failures += 1
        self.last_error = reason
        return None

    def get_status(self) -> str:
        if self.consecutive_failures:
            return f"GPS: {self.consecutive_failures} consecutive failures ({self.last_error})"
        if self.last_location and self.last_location.accuracy:
            return f"GPS OK, accuracy {self.last_location.accuracy:.0f}m"
        return "GPS OK"


class StaticLocation:
    """A fixed location, for running without GPS"""

    def __init__(self, lat: float, lon: float):
        self.location = Location(lat=lat, lon=lon, accuracy=0)

    def get_location(self, timeout: int = 30) -> Optional[Location]:
        return Location(lat=self.location.lat, lon=self.location.lon,
                        accuracy=0, timestamp=time.time())

    def get_status(self) -> str:
        return f"Static location {self.location.lat:.5f}, {self.location.lon:.5f}"


class AnchorWatcher:
    """Waits for the first location fix on a background thread.

    The fix is handed to the walk once and the watcher stops; the anchor is
    never moved afterwards. While it keeps failing the walk just has no
    anchor and live ticks skip generation.
    """

    def __init__(self, source, walk: RandomWalk, config: Optional[dict] = None,
                 logger: Optional[Logger] = None):
        self.source = source
        self.walk = walk
        self.config = config or CONFIG
        self.logger = logger or walk.logger
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self):
        self._thread = threading.Thread(target=self.run, name="randomwalk-anchor", daemon=True)
        self._thread.start()

    def stop(self):
        self._stopped.set()

    def join(self, timeout: Optional[float] = None):
        if self._thread:
            self._thread.join(timeout)

    def run(self) -> Optional[Location]:
        """Keep trying until a fix arrives or the watcher is stopped"""
        while not self._stopped.is_set():
            location = retry_with_backoff(
                self._try_fix,
                max_time=self.config["gps_retry_time"],
                initial_delay=1.0,
                max_delay=8.0,
                description="GPS fix",
                logger=self.logger,
                should_stop=self._stopped.is_set,
            )
            if location:
                self.walk.on_fix(location.lat, location.lon, location.accuracy)
                return location
            if self._stopped.wait(self.config["gps_retry_time"]):
                break
        return None

    def _try_fix(self) -> Optional[Location]:
        location = self.source.get_location(timeout=self.config["gps_timeout"])
        if location:
            self.logger.log("GPS fix obtained", {"lat": location.lat, "lon": location.lon,
                                                 "accuracy": location.accuracy})
        else:
            status = self.source.get_status() if hasattr(self.source, "get_status") else "unknown"
            self.logger.log("GPS attempt failed", {"status": status})
        return location
