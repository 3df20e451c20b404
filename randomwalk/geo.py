"""Great-circle geometry for the random walk."""

from __future__ import annotations

import math
import random
import time
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

if TYPE_CHECKING:
    from .logger import Logger

T = TypeVar("T")

EARTH_RADIUS_METERS = 6372797.6

# 1 degree of latitude is always ~69 miles, so a 100 mile display span is
# 100 / 69 degrees. Longitude degrees shrink with latitude, see
# longitude_span_degrees().
LATITUDE_SPAN_DEGREES = 100.0 / 69.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in meters using Haversine formula"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def bearing_between(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate bearing from point 1 to point 2 in degrees (0-360, 0=North)"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    y = math.sin(delta_lambda) * math.cos(phi2)
    x = (math.cos(phi1) * math.sin(phi2) -
         math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda))

    bearing = math.degrees(math.atan2(y, x))
    # a tiny negative angle plus 360 can round to exactly 360
    return ((bearing + 360) % 360) % 360 + 0.0


def destination_point(lat: float, lon: float, bearing: float,
                      distance_meters: float) -> tuple[float, float]:
    """Point reached by travelling distance_meters from (lat, lon) along bearing.

    Bearings outside 0-360 are fine; they are plain angles to the trig
    functions. Latitude is clamped to [-90, 90] and longitude is normalized
    into [-180, 180).
    """
    dist_radians = distance_meters / EARTH_RADIUS_METERS

    lat1 = math.radians(lat)
    lon1 = math.radians(lon)
    bearing_radians = math.radians(bearing)

    sin_lat2 = (math.sin(lat1) * math.cos(dist_radians) +
                math.cos(lat1) * math.sin(dist_radians) * math.cos(bearing_radians))
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))

    y = math.sin(bearing_radians) * math.sin(dist_radians) * math.cos(lat1)
    x = math.cos(dist_radians) - math.sin(lat1) * math.sin(lat2)
    lon2 = lon1 + math.atan2(y, x)

    new_lat = max(-90.0, min(90.0, math.degrees(lat2)))
    new_lon = (math.degrees(lon2) + 540.0) % 360 - 180
    return new_lat, new_lon


def randomize_bearing(bearing: float, max_delta: float,
                      rng: Optional[random.Random] = None) -> float:
    """Add or subtract (coin flip) a random amount in [0, max_delta) degrees.

    The result is not wrapped back into 0-360.
    """
    rng = rng or random
    adjustment = rng.random() * max_delta
    if rng.randrange(2) == 0:
        return bearing - adjustment
    return bearing + adjustment


def longitude_span_degrees(lat: float) -> float:
    """Longitude degrees covering ~100 miles at the given latitude.

    The linear miles-per-degree estimate reaches zero at |lat| = 52.9, where
    the span is reported as infinite.
    """
    miles_per_degree = 69.0 - (90.0 / 69.0) * abs(lat)
    if miles_per_degree == 0:
        return math.inf
    return 100.0 / miles_per_degree


def retry_with_backoff(func: Callable[[], Optional[T]], max_time: float = 30.0,
                       initial_delay: float = 1.0, max_delay: float = 8.0,
                       description: str = "operation",
                       logger: Optional["Logger"] = None,
                       should_stop: Optional[Callable[[], bool]] = None) -> Optional[T]:
    """Retry a function with exponential backoff.

    Args:
        func: Function that returns a truthy value on success, falsy on failure
        max_time: Maximum total time to retry (seconds)
        initial_delay: Initial delay between retries (seconds)
        max_delay: Maximum delay between retries (seconds)
        description: Description for logging
        logger: Where retry messages go (printed if not given)
        should_stop: Checked before every attempt; True abandons the retry

    Returns:
        The result of func() on success, or None if all retries failed
    """
    def report(message: str):
        if logger:
            logger.log(message)
        else:
            print(message)

    start_time = time.time()
    delay = initial_delay
    attempt = 1

    while True:
        if should_stop and should_stop():
            return None

        result = func()
        if result:
            return result

        elapsed = time.time() - start_time
        if elapsed >= max_time:
            report(f"Failed to complete {description} after {elapsed:.1f}s ({attempt} attempts)")
            return None

        remaining = max_time - elapsed
        sleep_time = min(delay, remaining, max_delay)
        if sleep_time > 0:
            report(f"Retrying {description} in {sleep_time:.1f}s (attempt {attempt})...")
            time.sleep(sleep_time)

        delay = min(delay * 2, max_delay)
        attempt += 1
