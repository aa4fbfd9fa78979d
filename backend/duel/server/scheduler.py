"""Periodic in-process caller for the room cleanup sweep."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from duel.session.manager import RoomManager

logger = structlog.get_logger()


class CleanupScheduler:
    """Run RoomManager.cleanup_rooms every ``interval`` seconds in a background task."""

    def __init__(self, manager: RoomManager, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._manager = manager
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("room cleanup scheduled", interval_seconds=self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                result = await self._manager.cleanup_rooms()
            except Exception:
                logger.exception("room cleanup failed")
            else:
                logger.debug("room cleanup pass", cleaned_count=result.cleaned_count)
