#!/usr/bin/env python3
"""
Local Storage for Received Bouquets

Simple SQLite-based key-value store. The surrounding application keeps the
already-encoded link string here verbatim; the codec never looks inside the
stored value.
"""

import sqlite3
import time
from dataclasses import dataclass
from typing import Optional

from .models import DEFAULT_DB_PATH


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class StoredValue:
    """A stored entry with the time it was written."""
    key: str
    value: str
    saved_at: int


# =============================================================================
# Storage Manager
# =============================================================================

class BouquetStore:
    """
    SQLite-based key-value storage.

    One row per key; writing a key again replaces its value.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Initialize storage.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    saved_at INTEGER NOT NULL
                )
            """)
            conn.commit()

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO kv (key, value, saved_at)
                VALUES (?, ?, ?)
                """,
                (key, value, int(time.time()))
            )
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under a key, or None."""
        entry = self.get_entry(key)
        return entry.value if entry else None

    def get_entry(self, key: str) -> Optional[StoredValue]:
        """Return the full stored entry for a key, or None."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT key, value, saved_at FROM kv WHERE key = ?",
                (key,)
            ).fetchone()

        if row is None:
            return None
        return StoredValue(key=row["key"], value=row["value"], saved_at=row["saved_at"])

    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if a value was removed.
        """
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0
