"""Shared fixtures for duel HTTP tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from duel.server.app import create_app
from duel.server.settings import DuelServerSettings
from duel.session.manager import RoomManager
from duel.tests.helpers.auth import TEST_TOKEN_SECRET
from duel.tests.helpers.builders import FakeClock
from shared.storage import InMemoryKeyValueStore


@pytest.fixture
def client(fake_clock: FakeClock) -> TestClient:
    ids = iter(f"ROOM{i}" for i in range(1, 100))
    manager = RoomManager(InMemoryKeyValueStore(), clock=fake_clock, room_id_factory=lambda: next(ids))
    settings = DuelServerSettings(token_secret=TEST_TOKEN_SECRET, cors_origins=["http://localhost:3000"])
    return TestClient(create_app(settings=settings, room_manager=manager))
