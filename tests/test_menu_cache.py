# tests/test_menu_cache.py
from __future__ import annotations

import asyncio
import gc

import pytest

from core.errors import FetchError, ParseError
from core.menu_cache import MenuCache
from core.models.meal import MealRecord

TTL = 3600.0


def _meals(tag: str) -> list[MealRecord]:
    return [MealRecord(location="Hauptmensa", name=f"Eintopf {tag}")]


class FakeLoader:
    """Counts calls; returns queued results (lists or exceptions) in order."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self) -> list[MealRecord]:
        self.calls += 1
        await asyncio.sleep(0)
        res = self.results.pop(0)
        if isinstance(res, Exception):
            raise res
        return res


# ── hit / miss ──────────────────────────────────────────────────────
def test_second_call_within_ttl_is_a_hit():
    first = _meals("a")
    loader = FakeLoader(first)
    cache = MenuCache(loader, ttl=TTL)

    async def run():
        one = await cache.get_or_refresh(now=0.0)
        two = await cache.get_or_refresh(now=TTL - 1)
        return one, two

    one, two = asyncio.run(run())
    assert one is first and two is first
    assert loader.calls == 1
    assert cache.fetched_at == 0.0


def test_expiry_triggers_exactly_one_fetch():
    loader = FakeLoader(_meals("a"), _meals("b"))
    cache = MenuCache(loader, ttl=TTL)

    async def run():
        await cache.get_or_refresh(now=0.0)
        fresh = await cache.get_or_refresh(now=TTL)
        again = await cache.get_or_refresh(now=TTL + 10)
        return fresh, again

    fresh, again = asyncio.run(run())
    assert fresh[0].name == "Eintopf b"
    assert again is fresh
    assert loader.calls == 2
    assert cache.fetched_at == TTL


def test_empty_collection_is_not_served_from_cache():
    loader = FakeLoader([], _meals("b"))
    cache = MenuCache(loader, ttl=TTL)

    async def run():
        await cache.get_or_refresh(now=0.0)
        return await cache.get_or_refresh(now=1.0)

    assert asyncio.run(run())[0].name == "Eintopf b"
    assert loader.calls == 2


def test_default_clock_is_used():
    ticks = iter([100.0, 150.0])
    loader = FakeLoader(_meals("a"))
    cache = MenuCache(loader, ttl=TTL, clock=lambda: next(ticks))

    async def run():
        await cache.get_or_refresh()
        await cache.get_or_refresh()

    asyncio.run(run())
    assert loader.calls == 1
    assert cache.fetched_at == 100.0


# ── failures ────────────────────────────────────────────────────────
def test_cold_failure_propagates_and_leaves_cache_empty():
    cache = MenuCache(FakeLoader(FetchError("boom")), ttl=TTL)

    with pytest.raises(FetchError, match="boom"):
        asyncio.run(cache.get_or_refresh(now=0.0))
    assert cache.meals == []
    assert cache.fetched_at is None


@pytest.mark.parametrize("error", [FetchError("down"), ParseError("garbage")])
def test_failed_refresh_keeps_previous_slot(error):
    good = _meals("a")
    loader = FakeLoader(good, error, _meals("c"))
    cache = MenuCache(loader, ttl=TTL)

    async def run():
        await cache.get_or_refresh(now=0.0)
        with pytest.raises(type(error)):
            await cache.get_or_refresh(now=TTL + 1)
        assert cache.meals is good
        assert cache.fetched_at == 0.0
        # next miss tries again
        return await cache.get_or_refresh(now=TTL + 2)

    assert asyncio.run(run())[0].name == "Eintopf c"
    assert loader.calls == 3


# ── single-flight ───────────────────────────────────────────────────
def test_concurrent_misses_share_one_fetch():
    async def run():
        gate = asyncio.Event()
        loader = FakeLoader(_meals("shared"))

        async def slow_loader():
            await gate.wait()
            return await loader()

        cache = MenuCache(slow_loader, ttl=TTL)
        waiters = [asyncio.ensure_future(cache.get_or_refresh(now=0.0)) for _ in range(5)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*waiters)
        return loader.calls, results

    calls, results = asyncio.run(run())
    assert calls == 1
    assert all(r is results[0] for r in results)


def test_concurrent_misses_share_one_failure():
    async def run():
        gate = asyncio.Event()
        loader = FakeLoader(FetchError("down"))

        async def slow_loader():
            await gate.wait()
            return await loader()

        cache = MenuCache(slow_loader, ttl=TTL)
        waiters = [asyncio.ensure_future(cache.get_or_refresh(now=0.0)) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*waiters, return_exceptions=True)
        return loader.calls, results

    calls, results = asyncio.run(run())
    assert calls == 1
    assert all(isinstance(r, FetchError) for r in results)


def test_failure_after_all_waiters_cancelled_is_not_reported_unhandled():
    async def run():
        reported = []
        asyncio.get_running_loop().set_exception_handler(lambda loop, ctx: reported.append(ctx))

        gate = asyncio.Event()
        loader = FakeLoader(FetchError("down"))

        async def slow_loader():
            await gate.wait()
            return await loader()

        cache = MenuCache(slow_loader, ttl=TTL)
        waiter = asyncio.ensure_future(cache.get_or_refresh(now=0.0))
        await asyncio.sleep(0)
        waiter.cancel()
        gate.set()
        for _ in range(10):
            await asyncio.sleep(0)
        del waiter
        gc.collect()
        await asyncio.sleep(0)
        return loader.calls, reported, cache.meals

    calls, reported, meals = asyncio.run(run())
    assert calls == 1
    assert reported == []
    assert meals == []
