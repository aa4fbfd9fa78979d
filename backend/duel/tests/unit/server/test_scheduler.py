import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from duel.logic.types import CleanupResult
from duel.server.scheduler import CleanupScheduler


def _manager() -> MagicMock:
    manager = MagicMock()
    manager.cleanup_rooms = AsyncMock(return_value=CleanupResult(cleaned_count=0))
    return manager


class TestCleanupScheduler:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError, match="interval must be positive"):
            CleanupScheduler(_manager(), 0)

    async def test_runs_sweeps_until_stopped(self):
        manager = _manager()
        scheduler = CleanupScheduler(manager, 0.01)
        scheduler.start()
        assert scheduler.running
        await asyncio.sleep(0.05)
        await scheduler.stop()
        assert not scheduler.running
        assert manager.cleanup_rooms.await_count >= 2

    async def test_failed_sweep_does_not_stop_loop(self):
        manager = _manager()
        manager.cleanup_rooms.side_effect = [RuntimeError("store down"), CleanupResult(cleaned_count=1)]
        scheduler = CleanupScheduler(manager, 0.01)
        scheduler.start()
        await asyncio.sleep(0.035)
        await scheduler.stop()
        assert manager.cleanup_rooms.await_count >= 2

    async def test_start_is_idempotent(self):
        scheduler = CleanupScheduler(_manager(), 10)
        scheduler.start()
        task = scheduler._task
        scheduler.start()
        assert scheduler._task is task
        await scheduler.stop()

    async def test_stop_without_start(self):
        await CleanupScheduler(_manager(), 10).stop()
