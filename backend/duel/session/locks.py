"""Per-key asyncio locks serializing read-modify-write cycles against the store."""

import asyncio
import contextlib
from collections.abc import AsyncIterator


class KeyedLocks:
    """Hand out one asyncio.Lock per store key while anyone holds or awaits it.

    Callers acquire keys through ``hold`` so the acquisition order is always
    sorted, which rules out lock-order deadlocks between concurrent requests.
    A key's lock is dropped once its last holder or waiter leaves, so the
    table only grows with keys in active use.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, key: str) -> asyncio.Lock:
        self._users[key] = self._users.get(key, 0) + 1
        return self._locks.setdefault(key, asyncio.Lock())

    def _checkin(self, key: str) -> None:
        self._users[key] -= 1
        if not self._users[key]:
            del self._users[key]
            del self._locks[key]

    @contextlib.asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        ordered = sorted(set(keys))
        locks = [self._checkout(key) for key in ordered]
        try:
            async with contextlib.AsyncExitStack() as stack:
                for lock in locks:
                    await stack.enter_async_context(lock)
                yield
        finally:
            for key in ordered:
                self._checkin(key)

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
