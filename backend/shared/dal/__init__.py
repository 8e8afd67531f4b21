"""Data access layer: store interfaces and the in-process implementation."""

from shared.dal.kv_store import KeyValueStore
from shared.dal.memory_kv_store import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
]
