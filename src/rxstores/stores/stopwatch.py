"""Stopwatch store counting whole seconds on the injected clock."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rxstores._constants import format_mm_ss
from rxstores.clock import Clock, SystemClock
from rxstores.models.timer import StopwatchState
from rxstores.reactive.observable import Derived, Observable, State
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class Stopwatch(StoreBase):
    """Start / pause / reset stopwatch.

    Starting emits the first tick immediately, then one tick per second.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        super().__init__("Stopwatch")
        self._clock: Clock = clock or SystemClock()
        self._state: State[StopwatchState] = State(StopwatchState(), name="stopwatch.state")
        self._ticker: asyncio.Task[None] | None = None

        self.elapsed: Derived[int] = self._state.map(lambda s: s.elapsed_seconds, name="stopwatch.elapsed")
        self.is_running: Derived[bool] = self._state.map(lambda s: s.is_running, name="stopwatch.is_running")
        self.formatted: Derived[str] = self.elapsed.map(format_mm_ss, name="stopwatch.formatted")

    @property
    def state(self) -> Observable[StopwatchState]:
        return self._state

    @property
    def snapshot(self) -> StopwatchState:
        return self._state.value

    def start(self) -> None:
        self._require_active()
        if self._ticker is not None:
            return
        self._state.set(self._state.value.model_copy(update={"is_running": True}))
        self._ticker = asyncio.create_task(self._run(), name="stopwatch.ticker")
        _logger.debug("Stopwatch started at %ds", self._state.value.elapsed_seconds)

    def pause(self) -> None:
        self._require_active()
        if self._ticker is None:
            return
        self._stop_ticker()
        self._state.set(self._state.value.model_copy(update={"is_running": False}))
        _logger.debug("Stopwatch paused at %ds", self._state.value.elapsed_seconds)

    def reset(self) -> None:
        self._require_active()
        self._stop_ticker()
        if self._state.value != StopwatchState():
            self._state.set(StopwatchState())

    async def _run(self) -> None:
        while True:
            state = self._state.value
            self._state.set(state.model_copy(update={"elapsed_seconds": state.elapsed_seconds + 1}))
            await self._clock.sleep(TICK_SECONDS)

    def _stop_ticker(self) -> None:
        ticker = self._ticker
        self._ticker = None
        if ticker is not None and not ticker.done():
            ticker.cancel()

    def _owned_tasks(self) -> list[asyncio.Task[Any] | None]:
        return [self._ticker]

    def _on_dispose(self) -> None:
        self._stop_ticker()
        for view in (self.formatted, self.elapsed, self.is_running):
            view.complete()
        self._state.complete()
