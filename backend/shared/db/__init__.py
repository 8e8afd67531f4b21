"""SQLite database layer: connection management and store implementations."""

from shared.db.connection import Database
from shared.db.kv_store import SqliteKeyValueStore

__all__ = [
    "Database",
    "SqliteKeyValueStore",
]
