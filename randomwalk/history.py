"""SQLite persistence for the saved walk."""

import json
import sqlite3
from datetime import datetime
from typing import Iterable, Optional

from .logger import Logger
from .models import WalkPoint

WALK_KEY = "random_locations"


class HistoryDB:
    """Saves and loads the bounded walk history.

    The walk is stored as one JSON list of {"id", "lat", "lon"} records under
    a fixed key, so a save replaces the previous walk in a single write.
    """

    def __init__(self, db_path: str = "randomwalk_history.db", max_size: int = 48,
                 logger: Optional[Logger] = None):
        self.db_path = db_path
        self.max_size = max_size
        self.logger = logger or Logger()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._init_schema()

    def _init_schema(self):
        """Create database tables"""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS saved_walks (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self.conn.commit()

    def save(self, points: Iterable[WalkPoint]):
        """Replace the saved walk, keeping the max_size highest ordinals"""
        ordered = sorted(points, key=lambda p: p.ordinal)[-self.max_size:]
        value = json.dumps([p.to_dict() for p in ordered])
        now = datetime.now().isoformat()
        self.conn.execute("""
            INSERT INTO saved_walks (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, (WALK_KEY, value, now))
        self.conn.commit()

    def load(self) -> Optional[list[WalkPoint]]:
        """Load the saved walk, or None when nothing usable is saved.

        Malformed records are dropped; the rest of the walk still loads.
        """
        try:
            cursor = self.conn.execute(
                "SELECT value FROM saved_walks WHERE key = ?", (WALK_KEY,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            self.logger.log("Could not read saved walk", {"error": str(e)})
            return None

        if not row:
            return None

        try:
            records = json.loads(row[0])
        except json.JSONDecodeError as e:
            self.logger.log("Saved walk is not valid JSON", {"error": str(e)})
            return None

        if not isinstance(records, list):
            self.logger.log("Saved walk has unexpected shape", {"type": type(records).__name__})
            return None

        points = []
        dropped = 0
        for record in records:
            try:
                points.append(WalkPoint.from_dict(record))
            except (KeyError, TypeError, ValueError):
                dropped += 1
        if dropped:
            self.logger.log("Dropped malformed saved records", {"dropped": dropped, "kept": len(points)})
        return points

    def clear(self):
        """Delete the saved walk"""
        self.conn.execute("DELETE FROM saved_walks WHERE key = ?", (WALK_KEY,))
        self.conn.commit()

    def close(self):
        self.conn.close()
