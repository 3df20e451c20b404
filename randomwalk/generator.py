"""Next-point generation for the random walk."""

import random
from typing import Optional

from .config import CONFIG
from .geo import bearing_between, destination_point, randomize_bearing
from .models import Location, WalkPoint
from .store import HistoryStore


class WalkGenerator:
    """Produces the next walk point from the anchor and the stored history.

    The first point lands near the edge of a circle of radius_meters around
    the anchor. Every following point steps a short distance from the latest
    point, heading roughly back toward the anchor, so the walk drifts home
    over time instead of wandering off.
    """

    def __init__(self, config: Optional[dict] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or CONFIG
        self.rng = rng or random.Random()

    def next(self, anchor: Location, history: HistoryStore) -> WalkPoint:
        """Generate (but do not store) the next point"""
        if history.is_empty:
            return self._first_point(anchor)
        return self._continue_from(history.latest(), anchor)

    def _first_point(self, anchor: Location) -> WalkPoint:
        radius = self.config["radius_meters"]
        min_distance = radius * self.config["bootstrap_min_fraction"]
        distance = self.rng.uniform(min_distance, radius)
        bearing = self.rng.random() * 360.0

        lat, lon = destination_point(anchor.lat, anchor.lon, bearing, distance)
        return WalkPoint(ordinal=1, lat=lat, lon=lon)

    def _continue_from(self, last: WalkPoint, anchor: Location) -> WalkPoint:
        distance = self.movement_distance()
        homeward = bearing_between(last.lat, last.lon, anchor.lat, anchor.lon)
        bearing = randomize_bearing(
            homeward, self.config["random_bearing_adjustment"], self.rng
        )

        lat, lon = destination_point(last.lat, last.lon, bearing, distance)
        return WalkPoint(ordinal=last.ordinal + 1, lat=lat, lon=lon)

    def movement_distance(self) -> float:
        """Step length in meters.

        Draws from [0, movement_delta_max) and lifts short draws by
        movement_delta_min rather than clamping them.
        """
        distance = self.rng.random() * self.config["movement_delta_max"]
        if distance < self.config["movement_delta_min"]:
            distance += self.config["movement_delta_min"]
        return distance
