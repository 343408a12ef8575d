"""
SQLite-backed key-value store.

One table, one row per key. Expired rows are invisible to get() and are
purged lazily on write.

Database: data/scheduling.db
    - kv_store: key TEXT PRIMARY KEY, value TEXT, expires_at REAL (epoch seconds)
"""

from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Callable

from cadence.logging_config import get_logger
from cadence.storage.base import KeyValueStore, StorageUnavailableError

logger = get_logger(__name__)


class SQLiteStore(KeyValueStore):
    name = "sqlite"

    def __init__(self, db_path: Path | str, clock: Callable[[], float] | None = None):
        self.db_path = Path(db_path)
        self._clock = clock or time.time

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating the table if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                expires_at REAL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_kv_expires ON kv_store(expires_at)")

        conn.commit()
        return conn

    def get(self, key: str) -> str | None:
        try:
            conn = self.get_connection()
            try:
                row = conn.execute(
                    "SELECT value, expires_at FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"SQLite read failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "get", e) from e

        if row is None:
            return None
        if row["expires_at"] is not None and row["expires_at"] <= self._clock():
            return None
        return row["value"]

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        now = self._clock()
        expires_at = now + ttl_seconds if ttl_seconds else None
        try:
            conn = self.get_connection()
            try:
                conn.execute(
                    "DELETE FROM kv_store WHERE expires_at IS NOT NULL AND expires_at <= ?",
                    (now,),
                )
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, expires_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        expires_at = excluded.expires_at
                """,
                    (key, value, expires_at),
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"SQLite write failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "set", e) from e

    def delete(self, key: str) -> None:
        try:
            conn = self.get_connection()
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"SQLite delete failed for {key}: {e}")
            raise StorageUnavailableError(self.name, "delete", e) from e
