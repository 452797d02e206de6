"""Clock/timer capability injected into every time-dependent store.

Stores never call :func:`asyncio.sleep` or :func:`datetime.now` directly.
They receive a :class:`Clock`, so tests can substitute
:class:`VirtualClock` and drive timers, debounce windows and retry delays
deterministically.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Structural clock interface used by the stores."""

    def now(self) -> datetime: ...

    async def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Wall-clock time and real event-loop timers."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


class VirtualClock:
    """Deterministic clock whose time only moves on :meth:`advance`.

    Sleepers are parked on futures ordered by deadline.  ``advance()``
    wakes them one at a time in deadline order (FIFO for equal deadlines)
    and lets the event loop settle after each wake-up, so work scheduled
    by a woken task (a fetch, a follow-up sleep) runs before the next
    sleeper is released.

    Usage::

        clock = VirtualClock()
        store = DashboardPoller(fetcher, clock=clock)
        store.start()
        await clock.advance(5.0)
    """

    #: Event-loop iterations granted to ready tasks after each wake-up.
    SETTLE_ROUNDS: int = 25

    def __init__(self, start: datetime | None = None) -> None:
        self._start = start if start is not None else datetime(2026, 1, 1, tzinfo=UTC)
        self._elapsed = 0.0
        self._sleepers: list[tuple[float, int, asyncio.Future[None]]] = []
        self._seq = itertools.count()

    @property
    def elapsed(self) -> float:
        """Virtual seconds since construction."""
        return self._elapsed

    @property
    def pending_sleepers(self) -> int:
        return sum(1 for _, _, fut in self._sleepers if not fut.done())

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    async def sleep(self, seconds: float) -> None:
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        heapq.heappush(self._sleepers, (self._elapsed + seconds, next(self._seq), future))
        # A cancelled sleeper stays in the heap; advance() skips done futures.
        await future

    async def settle(self, rounds: int | None = None) -> None:
        """Let ready tasks run without moving time."""
        for _ in range(self.SETTLE_ROUNDS if rounds is None else rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        """Move time forward by *seconds*, waking every sleeper that is due."""
        if seconds < 0:
            raise ValueError(f"cannot move time backwards ({seconds})")
        target = self._elapsed + seconds
        await self.settle()
        while self._sleepers and self._sleepers[0][0] <= target:
            deadline, _, future = heapq.heappop(self._sleepers)
            if future.done():
                continue
            self._elapsed = max(self._elapsed, deadline)
            future.set_result(None)
            await self.settle()
        self._elapsed = target
        await self.settle()
