"""RandomWalk - Simulated wandering positions anchored to a real location."""

from .config import CONFIG, make_config
from .errors import RandomWalkError, ConfigError, EmptyHistoryError, DuplicateOrdinalError
from .models import Location, WalkPoint
from .logger import Logger
from .geo import (
    EARTH_RADIUS_METERS,
    haversine_distance,
    bearing_between,
    destination_point,
    randomize_bearing,
    longitude_span_degrees,
    retry_with_backoff,
)
from .store import HistoryStore
from .generator import WalkGenerator
from .history import HistoryDB
from .audio import Audio
from .notify import NotificationSink, ConsoleSink, AudioSink
from .walk import RandomWalk
from .scheduler import Mode, RepeatingTimer, WalkScheduler
from .gps import GPS, StaticLocation, AnchorWatcher
from .gpx import walk_to_gpx, export_gpx
from .app import RandomWalkApp

__all__ = [
    "CONFIG",
    "make_config",
    "RandomWalkError",
    "ConfigError",
    "EmptyHistoryError",
    "DuplicateOrdinalError",
    "Location",
    "WalkPoint",
    "Logger",
    "EARTH_RADIUS_METERS",
    "haversine_distance",
    "bearing_between",
    "destination_point",
    "randomize_bearing",
    "longitude_span_degrees",
    "retry_with_backoff",
    "HistoryStore",
    "WalkGenerator",
    "HistoryDB",
    "Audio",
    "NotificationSink",
    "ConsoleSink",
    "AudioSink",
    "RandomWalk",
    "Mode",
    "RepeatingTimer",
    "WalkScheduler",
    "GPS",
    "StaticLocation",
    "AnchorWatcher",
    "walk_to_gpx",
    "export_gpx",
    "RandomWalkApp",
]
