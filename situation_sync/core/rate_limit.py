"""Minimum-spacing rate limiter for upstreams that throttle bursts."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """Guarantees at least ``min_interval`` seconds between successive acquisitions.

    Acquisitions are serialized, so several fetchers sharing one limiter still hit
    the upstream one call at a time. ``clock`` and ``sleep`` are injectable so the
    spacing can be checked without waiting on the wall clock.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            if self._last is not None:
                wait = self._last + self.min_interval - self._clock()
                if wait > 0:
                    await self._sleep(wait)
            self._last = self._clock()

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None
