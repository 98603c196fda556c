"""
core/menu_cache.py
────────────────────────────────────────────────────────────────────────
One-slot, time-boxed cache in front of the menu loader.

* fresh (non-empty and younger than ``ttl``) → served without I/O
* otherwise → one refresh via ``loader``; success replaces the slot,
  failure leaves it untouched and re-raises
* single-flight: while a refresh is running every other caller that
  misses awaits *that* refresh and gets its result or its exception;
  the first miss after it settles starts a new one

All state lives on the event loop that serves requests, and only the
refresh task writes the slot.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List

from core.models.meal import MealRecord

_LOG = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0

Loader = Callable[[], Awaitable[List[MealRecord]]]


class MenuCache:
    def __init__(
        self,
        loader: Loader,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._meals: List[MealRecord] = []
        self._fetched_at: float | None = None
        self._inflight: asyncio.Future[List[MealRecord]] | None = None

    # -------------------------------- introspection -----------------
    @property
    def meals(self) -> List[MealRecord]:
        return self._meals

    @property
    def fetched_at(self) -> float | None:
        return self._fetched_at

    def is_fresh(self, now: float) -> bool:
        return (
            bool(self._meals)
            and self._fetched_at is not None
            and now - self._fetched_at < self._ttl
        )

    # -------------------------------- public entrypoint -------------
    async def get_or_refresh(self, now: float | None = None) -> List[MealRecord]:
        now = self._clock() if now is None else now
        if self.is_fresh(now):
            _LOG.debug("menu cache hit (age %.0fs)", now - self._fetched_at)
            return self._meals

        if self._inflight is None:
            _LOG.info("menu cache miss – refreshing")
            self._inflight = asyncio.ensure_future(self._refresh(now))
            self._inflight.add_done_callback(_consume_outcome)
        else:
            _LOG.debug("menu cache miss – joining in-flight refresh")

        # a cancelled request must not cancel the refresh other callers share
        return await asyncio.shield(self._inflight)

    async def _refresh(self, now: float) -> List[MealRecord]:
        try:
            meals = await self._loader()
        except Exception:
            _LOG.warning("menu refresh failed – keeping %d cached meals", len(self._meals))
            raise
        else:
            self._meals = meals
            self._fetched_at = now
            return meals
        finally:
            self._inflight = None


def _consume_outcome(task: asyncio.Future) -> None:
    # marks the error as retrieved even when every waiter was cancelled
    if not task.cancelled():
        task.exception()
