"""In-process key-value store for single-node deployments and tests."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.dal.kv_store import KeyValueStore

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class _Entry:
    value: str
    expires_at: float | None  # clock() timestamp, None if the key never expires


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed KeyValueStore.

    Expired entries are dropped lazily on access. The clock is injectable so
    tests can advance time without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock

    def _live_entry(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    def _deadline(self, ttl_seconds: float | None) -> float | None:
        return None if ttl_seconds is None else self._clock() + ttl_seconds

    async def get(self, key: str) -> str | None:
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    async def set(self, key: str, value: str, ttl_seconds: float | None = None) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._deadline(ttl_seconds))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def expire(self, key: str, ttl_seconds: float) -> bool:
        entry = self._live_entry(key)
        if entry is None:
            return False
        entry.expires_at = self._deadline(ttl_seconds)
        return True

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for e in self._entries.values() if e.expires_at is None or e.expires_at > now)
