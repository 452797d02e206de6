"""Debounced product search store.

Terms are debounced, de-duplicated against the last searched term and
switched to the latest catalog query, so a slow response for an old term
can never overwrite the results of a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rxstores._api.products import search_products
from rxstores._constants import SEARCH_FAILED_MESSAGE
from rxstores._transport import Fetcher
from rxstores.clock import Clock, SystemClock
from rxstores.config import StoresConfig
from rxstores.models.catalog import CatalogProduct, SearchState
from rxstores.reactive.observable import Derived, Observable, State
from rxstores.reactive.scheduling import DelayCoalesce, ReplaceInFlight
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)


class ProductSearch(StoreBase):
    """Search-as-you-type over the product catalog."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        config: StoresConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__("ProductSearch")
        self._fetcher = fetcher
        self._config = config or StoresConfig()
        self._clock: Clock = clock or SystemClock()
        self._state: State[SearchState] = State(SearchState(), name="search.state")
        self._last_term: str | None = None

        self._debounce: DelayCoalesce[str] = DelayCoalesce(
            self._config.search_debounce_window,
            self._on_term,
            clock=self._clock,
            name="search.debounce",
        )
        self._query: ReplaceInFlight[tuple[CatalogProduct, ...]] = ReplaceInFlight(
            self._run_query,
            self._on_results,
            on_error=self._on_error,
            name="search.query",
        )

        self.results: Derived[tuple[CatalogProduct, ...]] = self._state.map(lambda s: s.results, name="search.results")
        self.is_loading: Derived[bool] = self._state.map(lambda s: s.is_loading, name="search.is_loading")
        self.error: Derived[str | None] = self._state.map(lambda s: s.error, name="search.error")

    @property
    def state(self) -> Observable[SearchState]:
        return self._state

    @property
    def snapshot(self) -> SearchState:
        return self._state.value

    def search(self, term: str) -> None:
        self._require_active()
        self._debounce.push(term)

    def _on_term(self, term: str) -> None:
        if term == self._last_term:
            _logger.debug("Search term %r unchanged; skipped", term)
            return
        self._last_term = term
        if not term.strip():
            self._query.cancel()
            self._set(SearchState(term=term))
            return
        self._set(self._state.value.model_copy(update={"term": term, "is_loading": True, "error": None}))
        self._query.trigger(term)

    async def _run_query(self, term: str) -> tuple[CatalogProduct, ...]:
        return await search_products(self._fetcher, self._config.products_url, term)

    def _on_results(self, results: tuple[CatalogProduct, ...]) -> None:
        self._set(self._state.value.model_copy(update={"results": results, "is_loading": False, "error": None}))

    def _on_error(self, exc: Exception) -> None:
        _logger.debug("Search for %r failed: %s", self._state.value.term, exc)
        self._set(
            self._state.value.model_copy(update={"results": (), "is_loading": False, "error": SEARCH_FAILED_MESSAGE})
        )

    def _set(self, state: SearchState) -> None:
        if state == self._state.value:
            return
        self._state.set(state)
        _logger.debug(
            "Search state: term=%r results=%d loading=%s error=%r",
            state.term,
            len(state.results),
            state.is_loading,
            state.error,
        )

    def _owned_tasks(self) -> list[asyncio.Task[Any] | None]:
        return [self._debounce.task, self._query.task]

    def _on_dispose(self) -> None:
        self._debounce.cancel()
        self._query.cancel()
        for view in (self.results, self.is_loading, self.error):
            view.complete()
        self._state.complete()
