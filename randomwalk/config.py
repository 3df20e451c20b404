"""Configuration settings for RandomWalk."""

from .errors import ConfigError

CONFIG = {
    # Walk generation
    "radius_meters": 160935.0,  # meters (100 miles) - first point distance from the anchor
    "bootstrap_min_fraction": 0.90,  # first point is at least this fraction of radius_meters away
    "movement_delta_min": 1000.0,  # meters - minimum move from the last point
    "movement_delta_max": 3218.7,  # meters (2 miles) - maximum move from the last point
    "random_bearing_adjustment": 45.0,  # degrees - plus or minus applied to the homeward bearing
    "max_history_size": 48,  # points kept in the bounded history
    # Scheduling
    "update_time_interval": 30,  # seconds between generated points
    "replay_time_interval": 1,  # seconds between replayed points
    # Storage / location
    "db_path": "randomwalk_history.db",
    "gps_timeout": 10,  # seconds per termux-location attempt
    "gps_retry_time": 30.0,  # seconds of backoff before an anchor attempt gives up
}


def make_config(**overrides) -> dict:
    """Copy CONFIG with overrides applied; unknown keys are rejected"""
    unknown = set(overrides) - set(CONFIG)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    config = dict(CONFIG)
    config.update(overrides)
    return config
