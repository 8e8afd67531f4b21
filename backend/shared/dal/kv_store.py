"""Abstract interface for expiring key-value persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract string key-value store with per-key expiry.

    A ttl_seconds of None stores the value without expiry. Reading an
    expired key behaves exactly like reading a key that was never written.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None: ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: float | None = None) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def expire(self, key: str, ttl_seconds: float) -> bool:
        """Reset the expiry of an existing key. Returns False if the key is absent."""
        ...
