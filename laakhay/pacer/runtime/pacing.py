"""Dispatch pacing strategies.

Architecture:
    The queue worker calls ``await pacer.acquire()`` before every dispatch.
    A pacer only decides *when* the next request may go out; it never drops
    or reorders requests.

Strategies:
    - FixedIntervalPacer: consecutive dispatches at least ``interval`` apart.
      Enforces "N requests per window" with ``interval = window / N`` and
      never bursts.
    - SlidingWindowPacer: at most ``limit`` dispatches inside any rolling
      ``window``; allows bursts up to ``limit``.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

from ..core.config import QueueConfig


class Pacer(Protocol):
    """Protocol for dispatch pacing strategies."""

    async def acquire(self) -> None:
        """Suspend until the next dispatch is allowed, then record it."""
        ...


class FixedIntervalPacer:
    """Keep at least ``interval`` seconds between consecutive dispatches."""

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 0:
            raise ValueError("interval cannot be negative")
        self.interval = interval
        self._clock = clock
        self._last_dispatch: float | None = None

    @property
    def last_dispatch(self) -> float | None:
        return self._last_dispatch

    def delay(self) -> float:
        """Seconds to wait before the next dispatch is allowed."""
        if self._last_dispatch is None:
            return 0.0
        return max(0.0, self._last_dispatch + self.interval - self._clock())

    async def acquire(self) -> None:
        delay = self.delay()
        if delay > 0:
            await asyncio.sleep(delay)
        self._last_dispatch = self._clock()


class SlidingWindowPacer:
    """Allow at most ``limit`` dispatches within any rolling ``window`` seconds."""

    def __init__(
        self,
        limit: int,
        window: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window <= 0:
            raise ValueError("window must be positive")
        self.limit = limit
        self.window = window
        self._clock = clock
        self._dispatches: deque[float] = deque()

    def _evict(self, now: float) -> None:
        while self._dispatches and now - self._dispatches[0] >= self.window:
            self._dispatches.popleft()

    def delay(self) -> float:
        now = self._clock()
        self._evict(now)
        if len(self._dispatches) < self.limit:
            return 0.0
        return max(0.0, self._dispatches[0] + self.window - now)

    async def acquire(self) -> None:
        delay = self.delay()
        while delay > 0:
            await asyncio.sleep(delay)
            delay = self.delay()
        self._dispatches.append(self._clock())


def pacer_for(config: QueueConfig) -> Pacer:
    """Default pacer for a queue configuration."""
    return FixedIntervalPacer(config.interval)
