"""SQLite-backed key-value store with expiry."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from shared.dal.kv_store import KeyValueStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteKeyValueStore(KeyValueStore):
    """SQLite implementation of KeyValueStore.

    Expiry is stored as a wall-clock timestamp so entries survive a process
    restart. Expired rows are filtered on read and reclaimed by purge_expired().
    """

    def __init__(self, db: Database, clock: Callable[[], float] = time.time) -> None:
        self._db = db
        self._clock = clock
        self._lock = asyncio.Lock()

    def _deadline(self, ttl_seconds: float | None) -> float | None:
        return None if ttl_seconds is None else self._clock() + ttl_seconds

    async def get(self, key: str) -> str | None:
        async with self._lock:
            row = self._db.connection.execute(
                "SELECT value FROM kv_entries WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)",
                (key, self._clock()),
            ).fetchone()
        return row[0] if row is not None else None

    async def set(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        async with self._lock:
            self._db.connection.execute(
                "INSERT INTO kv_entries (key, value, expires_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, expires_at = excluded.expires_at",
                (key, value, self._deadline(ttl_seconds)),
            )
            self._db.connection.commit()

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._db.connection.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            self._db.connection.commit()

    async def expire(self, key: str, ttl_seconds: float) -> bool:
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE kv_entries SET expires_at = ? WHERE key = ? AND (expires_at IS NULL OR expires_at > ?)",
                (self._deadline(ttl_seconds), key, self._clock()),
            )
            self._db.connection.commit()
        return cursor.rowcount > 0

    async def purge_expired(self) -> int:
        """Delete expired rows. Returns the number of rows removed."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "DELETE FROM kv_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (self._clock(),),
            )
            self._db.connection.commit()
        removed = cursor.rowcount
        if removed:
            logger.info("purged expired entries", count=removed)
        return removed
