"""Shared fixtures for duel tests."""

import pytest

from duel.logic.clock import TurnClock
from duel.session.manager import RoomManager
from duel.tests.helpers.builders import FakeClock
from shared.storage import InMemoryKeyValueStore


@pytest.fixture
def clock() -> TurnClock:
    return TurnClock()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def manager(store: InMemoryKeyValueStore, fake_clock: FakeClock) -> RoomManager:
    ids = iter(f"ROOM{i}" for i in range(1, 100))
    return RoomManager(store, clock=fake_clock, room_id_factory=lambda: next(ids))
