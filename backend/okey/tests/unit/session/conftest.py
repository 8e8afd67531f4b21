import random

import pytest

from okey.session.manager import SessionManager
from okey.session.room_store import RoomStore
from okey.tests.unit.session.helpers import TEST_SETTINGS
from shared.dal import InMemoryKeyValueStore


@pytest.fixture
def settings():
    return TEST_SETTINGS


@pytest.fixture
def store(settings):
    return RoomStore(InMemoryKeyValueStore(), settings)


@pytest.fixture
async def manager(store, settings):
    manager = SessionManager(store, settings=settings, rng=random.Random(4))
    yield manager
    manager.shutdown()
