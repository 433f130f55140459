# tests/test_view_cache.py

import asyncio

import pytest

from tasklist.core.cache import AccountViewCache


class CountingBuilder:
    """
    build_fn double: counts calls and can be held open until released,
    which lets tests line up concurrent misses deterministically.
    """

    def __init__(self, value="view", hold: bool = False) -> None:
        self.value = value
        self.calls = 0
        self.release = asyncio.Event()
        if not hold:
            self.release.set()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()
        return f"{self.value}-{self.calls}"


async def test_second_read_is_served_from_cache() -> None:
    cache = AccountViewCache(max_entries=4)
    build = CountingBuilder()

    first = await cache.get_or_build("alice", build)
    second = await cache.get_or_build("alice", build)

    assert first == second == "view-1"
    assert build.calls == 1


async def test_invalidate_forces_rebuild() -> None:
    cache = AccountViewCache(max_entries=4)
    build = CountingBuilder()

    await cache.get_or_build("alice", build)
    cache.invalidate("alice")
    value = await cache.get_or_build("alice", build)

    assert build.calls == 2
    assert value == "view-2"


async def test_invalidate_missing_key_is_noop() -> None:
    cache = AccountViewCache(max_entries=4)

    cache.invalidate("nobody")

    assert len(cache) == 0


async def test_entries_are_isolated_per_account() -> None:
    cache = AccountViewCache(max_entries=4)

    alice = await cache.get_or_build("alice", CountingBuilder("alice"))
    bob = await cache.get_or_build("bob", CountingBuilder("bob"))
    cache.invalidate("bob")

    assert alice == "alice-1"
    assert bob == "bob-1"
    assert "alice" in cache
    assert "bob" not in cache


async def test_concurrent_misses_share_one_build() -> None:
    cache = AccountViewCache(max_entries=4)
    build = CountingBuilder(hold=True)

    readers = [asyncio.create_task(cache.get_or_build("alice", build)) for _ in range(5)]
    await asyncio.sleep(0)
    build.release.set()
    results = await asyncio.gather(*readers)

    assert build.calls == 1
    assert results == ["view-1"] * 5


async def test_build_invalidated_in_flight_is_not_stored() -> None:
    cache = AccountViewCache(max_entries=4)
    stale = CountingBuilder("stale", hold=True)

    reader = asyncio.create_task(cache.get_or_build("alice", stale))
    await asyncio.sleep(0)
    cache.invalidate("alice")
    stale.release.set()

    assert await reader == "stale-1"
    assert "alice" not in cache

    fresh = CountingBuilder("fresh")
    assert await cache.get_or_build("alice", fresh) == "fresh-1"
    assert fresh.calls == 1


async def test_failed_build_is_not_cached_and_reaches_all_waiters() -> None:
    cache = AccountViewCache(max_entries=4)
    gate = asyncio.Event()

    async def failing_build():
        await gate.wait()
        raise RuntimeError("storage down")

    readers = [asyncio.create_task(cache.get_or_build("alice", failing_build)) for _ in range(3)]
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(*readers, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) for r in results)
    assert "alice" not in cache

    build = CountingBuilder()
    assert await cache.get_or_build("alice", build) == "view-1"


async def test_least_recently_used_entry_is_evicted() -> None:
    cache = AccountViewCache(max_entries=2)

    await cache.get_or_build("a", CountingBuilder("a"))
    await cache.get_or_build("b", CountingBuilder("b"))
    await cache.get_or_build("a", CountingBuilder("unused"))
    await cache.get_or_build("c", CountingBuilder("c"))

    assert len(cache) == 2
    assert "a" in cache
    assert "c" in cache
    assert "b" not in cache


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        AccountViewCache(max_entries=0)


async def test_cancelled_reader_does_not_fail_other_waiters() -> None:
    cache = AccountViewCache(max_entries=4)
    build = CountingBuilder(hold=True)

    first = asyncio.create_task(cache.get_or_build("alice", build))
    await asyncio.sleep(0)
    second = asyncio.create_task(cache.get_or_build("alice", build))
    await asyncio.sleep(0)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first

    build.release.set()

    assert await second == "view-1"
    assert build.calls == 1
    assert "alice" in cache
