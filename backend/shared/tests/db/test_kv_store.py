"""Tests for SqliteKeyValueStore."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.db import Database, SqliteKeyValueStore

if TYPE_CHECKING:
    from pathlib import Path


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db(tmp_path: Path):
    database = Database(tmp_path / "kv.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def kv(db: Database, clock: FakeClock) -> SqliteKeyValueStore:
    return SqliteKeyValueStore(db, clock=clock)


class TestSqliteKeyValueStore:
    async def test_set_and_get(self, kv: SqliteKeyValueStore) -> None:
        await kv.set("room:1", "{}")
        assert await kv.get("room:1") == "{}"

    async def test_missing_key(self, kv: SqliteKeyValueStore) -> None:
        assert await kv.get("nope") is None

    async def test_overwrite(self, kv: SqliteKeyValueStore) -> None:
        await kv.set("k", "a", ttl_seconds=10)
        await kv.set("k", "b")
        assert await kv.get("k") == "b"

    async def test_delete(self, kv: SqliteKeyValueStore) -> None:
        await kv.set("k", "v")
        await kv.delete("k")
        await kv.delete("k")
        assert await kv.get("k") is None

    async def test_ttl_expiry(self, kv: SqliteKeyValueStore, clock: FakeClock) -> None:
        await kv.set("k", "v", ttl_seconds=60)
        clock.now += 59
        assert await kv.get("k") == "v"
        clock.now += 1
        assert await kv.get("k") is None

    async def test_expire_extends_live_key(self, kv: SqliteKeyValueStore, clock: FakeClock) -> None:
        await kv.set("k", "v", ttl_seconds=60)
        clock.now += 50
        assert await kv.expire("k", 60)
        clock.now += 50
        assert await kv.get("k") == "v"

    async def test_expire_ignores_missing_and_expired_keys(self, kv: SqliteKeyValueStore, clock: FakeClock) -> None:
        assert not await kv.expire("missing", 60)
        await kv.set("k", "v", ttl_seconds=1)
        clock.now += 2
        assert not await kv.expire("k", 60)
        assert await kv.get("k") is None

    async def test_purge_expired(self, kv: SqliteKeyValueStore, clock: FakeClock) -> None:
        await kv.set("old", "v", ttl_seconds=1)
        await kv.set("forever", "v")
        clock.now += 5

        assert await kv.purge_expired() == 1
        assert await kv.purge_expired() == 0
        assert await kv.get("forever") == "v"

    async def test_survives_reopen(self, tmp_path: Path, clock: FakeClock) -> None:
        path = tmp_path / "persist.db"
        first = Database(path)
        first.connect()
        await SqliteKeyValueStore(first, clock=clock).set("user:room:alice", "room-1", ttl_seconds=3600)
        first.close()

        second = Database(path)
        second.connect()
        assert await SqliteKeyValueStore(second, clock=clock).get("user:room:alice") == "room-1"
        second.close()
