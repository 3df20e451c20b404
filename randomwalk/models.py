"""Data classes for RandomWalk."""

import math
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class Location:
    """A real position fix. The first one becomes the walk's anchor."""
    lat: float
    lon: float
    accuracy: Optional[float] = None
    timestamp: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WalkPoint:
    """A generated position, identified by its generation ordinal"""
    ordinal: int
    lat: float
    lon: float

    def to_dict(self) -> dict:
        """Persisted record shape"""
        return {"id": self.ordinal, "lat": self.lat, "lon": self.lon}

    @classmethod
    def from_dict(cls, d: dict) -> "WalkPoint":
        """Build from a persisted record.

        Raises KeyError, TypeError or ValueError when the record is malformed.
        """
        ordinal = d["id"]
        lat = d["lat"]
        lon = d["lon"]
        for value in (ordinal, lat, lon):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Non-numeric field in record: {d!r}")
            if not math.isfinite(value):
                raise ValueError(f"Non-finite field in record: {d!r}")
        if ordinal != int(ordinal) or ordinal < 1:
            raise ValueError(f"Invalid ordinal in record: {d!r}")
        return cls(ordinal=int(ordinal), lat=float(lat), lon=float(lon))
