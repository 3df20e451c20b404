"""Bounded, ordinal-ordered history of generated walk points."""

from typing import Iterable, Iterator, Optional

from .errors import DuplicateOrdinalError, EmptyHistoryError
from .models import WalkPoint


class HistoryStore:
    """Keeps at most max_size points; when full the lowest ordinal is replaced.

    Slots are unordered. Ordinals only ever grow, so replacing the minimum
    ordinal drops the oldest point.
    """

    def __init__(self, max_size: int = 48):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._points: list[WalkPoint] = []
        self._ordinals: set[int] = set()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[WalkPoint]:
        return iter(self.snapshot())

    @property
    def is_empty(self) -> bool:
        return not self._points

    def insert(self, point: WalkPoint) -> Optional[WalkPoint]:
        """Add a point, returning the evicted point if the store was full"""
        if point.ordinal in self._ordinals:
            raise DuplicateOrdinalError(point.ordinal)

        if len(self._points) < self.max_size:
            self._points.append(point)
            self._ordinals.add(point.ordinal)
            return None

        lowest_index = 0
        for index, stored in enumerate(self._points):
            if stored.ordinal < self._points[lowest_index].ordinal:
                lowest_index = index

        evicted = self._points[lowest_index]
        self._points[lowest_index] = point
        self._ordinals.discard(evicted.ordinal)
        self._ordinals.add(point.ordinal)
        return evicted

    def latest(self) -> WalkPoint:
        """Point with the highest ordinal"""
        if not self._points:
            raise EmptyHistoryError("History has no points")
        latest = self._points[0]
        for point in self._points:
            # >= so that on a tie the entry seen last wins
            if point.ordinal >= latest.ordinal:
                latest = point
        return latest

    def snapshot(self) -> list[WalkPoint]:
        """Copy of the stored points in ascending ordinal order"""
        return sorted(self._points, key=lambda p: p.ordinal)

    def restore(self, points: Iterable[WalkPoint]) -> int:
        """Repopulate from saved points, skipping duplicate ordinals.

        Returns the number of points that ended up in the store.
        """
        for point in sorted(points, key=lambda p: p.ordinal):
            if point.ordinal in self._ordinals:
                continue
            self.insert(point)
        return len(self._points)

    def clear(self):
        self._points.clear()
        self._ordinals.clear()
