"""Polling dashboard store.

Tick results flow through one shared, replaying feed:

- the timer fires immediately and then every ``poll_interval`` seconds;
- a tick while paused re-emits the last stats without fetching;
- a tick while running switches to a new fetch, abandoning an older one;
- each fetch is retried with a fixed delay before the error is reported.

The store attaches itself to the feed on :meth:`DashboardPoller.start`;
other consumers may :meth:`~DashboardPoller.observe` the same feed and
share its in-flight request and cached last result.  A manual
:meth:`~DashboardPoller.refresh` runs outside the feed on its own switch and
updates the snapshot through the same path as ticks.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from rxstores._api.users import StatsMapper, SyntheticStatsMapper, fetch_dashboard_stats
from rxstores._constants import POLL_FAILED_MESSAGE, REFRESH_FAILED_MESSAGE
from rxstores._transport import Fetcher
from rxstores.clock import Clock, SystemClock
from rxstores.config import StoresConfig
from rxstores.models.dashboard import DashboardState, DashboardStats, PollResult
from rxstores.reactive.observable import Derived, Observable, State, Subscription
from rxstores.reactive.retry import retry_async
from rxstores.reactive.scheduling import ReplaceInFlight, SharedReplay
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)


class DashboardPoller(StoreBase):
    """Periodically refreshed dashboard statistics.

    Parameters
    ----------
    fetcher : Fetcher
        Collaborator returning the user collection.
    config : StoresConfig, optional
        Poll interval, retry policy and endpoint.
    clock : Clock, optional
        Time source for ticks, retry delays and ``last_refresh``.
    stats_mapper : StatsMapper, optional
        Maps fetched records to :class:`DashboardStats`.  Defaults to
        :class:`SyntheticStatsMapper`.

    Usage::

        async with DashboardPoller(fetcher) as poller:
            poller.stats.subscribe(render)
            poller.start()
            ...
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        config: StoresConfig | None = None,
        clock: Clock | None = None,
        stats_mapper: StatsMapper | None = None,
    ) -> None:
        super().__init__("DashboardPoller")
        self._fetcher = fetcher
        self._config = config or StoresConfig()
        self._clock: Clock = clock or SystemClock()
        self._mapper: StatsMapper = stats_mapper or SyntheticStatsMapper()

        self._state: State[DashboardState] = State(DashboardState(), name="dashboard.state")
        self._in_flight = 0
        self._emit_tick: Callable[[PollResult], None] | None = None
        self._attachment: Subscription | None = None

        self._tick_switch: ReplaceInFlight[PollResult] = ReplaceInFlight(
            self._run_fetch, self._deliver_tick, name="dashboard.tick"
        )
        self._manual_switch: ReplaceInFlight[PollResult] = ReplaceInFlight(
            self._run_fetch, self._apply_result, name="dashboard.refresh"
        )
        self._feed: SharedReplay[PollResult] = SharedReplay(self._poll, name="dashboard.feed")

        self.stats: Derived[DashboardStats | None] = self._state.map(lambda s: s.stats, name="dashboard.stats")
        self.is_loading: Derived[bool] = self._state.map(lambda s: s.is_loading, name="dashboard.is_loading")
        self.is_paused: Derived[bool] = self._state.map(lambda s: s.is_paused, name="dashboard.is_paused")
        self.error: Derived[str | None] = self._state.map(lambda s: s.error, name="dashboard.error")
        self.last_refresh: Derived[datetime | None] = self._state.map(
            lambda s: s.last_refresh, name="dashboard.last_refresh"
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> Observable[DashboardState]:
        return self._state

    @property
    def snapshot(self) -> DashboardState:
        return self._state.value

    @property
    def running(self) -> bool:
        """Whether the store itself is attached to the poll feed."""
        return self._attachment is not None

    @property
    def feed_refcount(self) -> int:
        return self._feed.refcount

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Attach the store to the poll feed; the first tick fires at once."""
        self._require_active()
        if self._attachment is not None:
            return
        self._attachment = self._feed.subscribe(self._apply_result)
        _logger.debug("Dashboard polling started (interval=%.1fs)", self._config.poll_interval)

    def stop(self) -> None:
        """Detach the store from the poll feed."""
        self._require_active()
        attachment = self._attachment
        self._attachment = None
        if attachment is not None:
            attachment.unsubscribe()
            _logger.debug("Dashboard polling stopped")

    def observe(self, observer: Callable[[PollResult], None]) -> Subscription:
        """Share the poll feed; the observer immediately gets the cached result."""
        self._require_active()
        return self._feed.subscribe(observer)

    def pause(self) -> None:
        self._require_active()
        if self._state.value.is_paused:
            return
        self._set(self._state.value.model_copy(update={"is_paused": True}))

    def resume(self) -> None:
        self._require_active()
        if not self._state.value.is_paused:
            return
        self._set(self._state.value.model_copy(update={"is_paused": False}))

    def toggle_pause(self) -> None:
        if self._state.value.is_paused:
            self.resume()
        else:
            self.pause()

    def refresh(self) -> None:
        """Fetch now, abandoning an earlier manual refresh still in flight."""
        self._require_active()
        self._manual_switch.trigger(REFRESH_FAILED_MESSAGE)

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------

    async def _poll(self, emit: Callable[[PollResult], None]) -> None:
        self._emit_tick = emit
        try:
            while True:
                self._tick(emit)
                await self._clock.sleep(self._config.poll_interval)
        finally:
            if self._emit_tick is emit:
                self._emit_tick = None
                self._tick_switch.cancel()

    def _tick(self, emit: Callable[[PollResult], None]) -> None:
        state = self._state.value
        if not state.is_paused:
            self._tick_switch.trigger(POLL_FAILED_MESSAGE)
            return
        self._tick_switch.cancel()
        if state.stats is None:
            _logger.debug("Paused tick skipped: no stats yet")
            return
        emit(PollResult(stats=state.stats, completed_at=self._clock.now(), replayed=True))

    def _deliver_tick(self, result: PollResult) -> None:
        emit = self._emit_tick
        if emit is not None:
            emit(result)
        if self._attachment is None:
            self._sync_loading()

    async def _run_fetch(self, fallback: str) -> PollResult:
        self._in_flight += 1
        self._sync_loading()
        try:
            stats = await retry_async(
                self._fetch_once,
                retries=self._config.poll_retries,
                delay=self._config.poll_retry_delay,
                sleep=self._clock.sleep,
                description="dashboard fetch",
            )
        except asyncio.CancelledError:
            self._in_flight -= 1
            self._sync_loading()
            raise
        except Exception as exc:
            self._in_flight -= 1
            _logger.debug("Dashboard fetch failed: %s", exc)
            return PollResult(error=str(exc) or fallback, completed_at=self._clock.now())
        self._in_flight -= 1
        return PollResult(stats=stats, completed_at=self._clock.now())

    async def _fetch_once(self) -> DashboardStats:
        return await fetch_dashboard_stats(
            self._fetcher,
            self._config.users_url,
            mapper=self._mapper,
            now=self._clock.now,
        )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _apply_result(self, result: PollResult) -> None:
        if result.replayed:
            return
        update: dict[str, Any] = {"is_loading": self._in_flight > 0}
        if result.ok:
            update.update(stats=result.stats, error=None, last_refresh=result.completed_at)
        else:
            update["error"] = result.error
        self._set(self._state.value.model_copy(update=update))

    def _sync_loading(self) -> None:
        loading = self._in_flight > 0
        if self._state.value.is_loading != loading:
            self._set(self._state.value.model_copy(update={"is_loading": loading}))

    def _set(self, state: DashboardState) -> None:
        if state == self._state.value:
            return
        self._state.set(state)
        _logger.debug(
            "Dashboard state: loading=%s paused=%s error=%r users=%s",
            state.is_loading,
            state.is_paused,
            state.error,
            state.stats.total_users if state.stats else None,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _owned_tasks(self) -> list[asyncio.Task[Any] | None]:
        return [self._feed.task, self._tick_switch.task, self._manual_switch.task]

    def _on_dispose(self) -> None:
        self._attachment = None
        self._feed.close()
        self._tick_switch.cancel()
        self._manual_switch.cancel()
        for view in (self.stats, self.is_loading, self.is_paused, self.error, self.last_refresh):
            view.complete()
        self._state.complete()
