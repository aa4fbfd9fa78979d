import asyncio

from duel.session.locks import KeyedLocks


class TestKeyedLocks:
    async def test_hold_acquires_every_key(self):
        locks = KeyedLocks()
        async with locks.hold("user:b", "user:a", "user:b"):
            assert locks.locked("user:a")
            assert locks.locked("user:b")
            assert len(locks) == 2
        assert not locks.locked("user:a")
        assert not locks.locked("user:b")

    async def test_released_keys_are_forgotten(self):
        locks = KeyedLocks()
        async with locks.hold("room:A"):
            pass
        async with locks.hold("user:a", "history:a"):
            pass
        assert len(locks) == 0

    async def test_same_key_serializes_holders(self):
        locks = KeyedLocks()
        inside = 0
        peak = 0

        async def worker() -> None:
            nonlocal inside, peak
            async with locks.hold("room:A"):
                inside += 1
                peak = max(peak, inside)
                await asyncio.sleep(0)
                inside -= 1

        await asyncio.gather(*(worker() for _ in range(5)))
        assert peak == 1
        assert len(locks) == 0

    async def test_lock_kept_while_waiter_queued(self):
        locks = KeyedLocks()
        entered = asyncio.Event()

        async def waiter() -> None:
            async with locks.hold("room:A"):
                entered.set()

        async with locks.hold("room:A"):
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0)
            assert not entered.is_set()
        await task
        assert entered.is_set()
        assert len(locks) == 0

    async def test_cancelled_waiter_releases_its_claim(self):
        locks = KeyedLocks()

        async def waiter() -> None:
            async with locks.hold("room:A"):
                pass

        async with locks.hold("room:A"):
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0)
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        assert len(locks) == 0

    async def test_opposite_orders_do_not_deadlock(self):
        locks = KeyedLocks()
        order: list[str] = []

        async def worker(name: str, *keys: str) -> None:
            async with locks.hold(*keys):
                order.append(name)
                await asyncio.sleep(0)

        await asyncio.wait_for(
            asyncio.gather(worker("first", "k1", "k2"), worker("second", "k2", "k1")),
            timeout=1,
        )
        assert sorted(order) == ["first", "second"]
