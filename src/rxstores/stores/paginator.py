"""Infinite-scroll paginator store.

``load_more()`` requests go through an exhaust gate: while a page fetch is
outstanding, further requests are dropped rather than queued.  Completed
pages are folded into the append-only post list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rxstores._api.posts import fetch_posts_page
from rxstores._constants import PAGE_FAILED_MESSAGE
from rxstores._transport import Fetcher
from rxstores.config import StoresConfig
from rxstores.models.feed import PaginationState, Post
from rxstores.reactive.observable import Derived, Observable, State
from rxstores.reactive.scheduling import DropWhileBusy
from rxstores.stores._base import StoreBase

_logger = logging.getLogger(__name__)


class Paginator(StoreBase):
    """Page-by-page loader of the posts feed.

    The first page is not requested on construction; call
    :meth:`load_more` (or :meth:`reset`) once the consumer is ready.
    """

    def __init__(self, fetcher: Fetcher, *, config: StoresConfig | None = None) -> None:
        super().__init__("Paginator")
        self._fetcher = fetcher
        self._config = config or StoresConfig()
        self._state: State[PaginationState] = State(PaginationState(), name="paginator.state")
        self._gate: DropWhileBusy[list[Post]] = DropWhileBusy(
            self._fetch_page,
            self._on_page,
            on_error=self._on_page_error,
            name="paginator.load",
        )

        self.posts: Derived[tuple[Post, ...]] = self._state.map(lambda s: s.posts, name="paginator.posts")
        self.is_loading: Derived[bool] = self._state.map(lambda s: s.is_loading, name="paginator.is_loading")
        self.has_more: Derived[bool] = self._state.map(lambda s: s.has_more, name="paginator.has_more")
        self.error: Derived[str | None] = self._state.map(lambda s: s.error, name="paginator.error")
        self.current_page: Derived[int] = self._state.map(lambda s: s.current_page, name="paginator.current_page")

    @property
    def state(self) -> Observable[PaginationState]:
        return self._state

    @property
    def snapshot(self) -> PaginationState:
        return self._state.value

    @property
    def dropped_requests(self) -> int:
        """Requests dropped because a page fetch was already outstanding."""
        return self._gate.dropped

    def load_more(self) -> bool:
        """Request the next page.

        Returns
        -------
        bool
            ``True`` if a fetch was started; ``False`` if the request was a
            no-op because a page is loading or the feed is exhausted.
        """
        self._require_active()
        state = self._state.value
        if state.is_loading or not state.has_more:
            _logger.debug("load_more skipped: loading=%s has_more=%s", state.is_loading, state.has_more)
            return False
        if not self._gate.trigger(state.current_page + 1):
            return False
        self._set(state.model_copy(update={"is_loading": True, "error": None}))
        return True

    def reset(self) -> None:
        """Abandon any outstanding fetch, start over and load the first page."""
        self._require_active()
        self._gate.cancel()
        self._set(PaginationState())
        self.load_more()

    async def _fetch_page(self, page: int) -> list[Post]:
        return await fetch_posts_page(self._fetcher, self._config.posts_url, page, self._config.page_size)

    def _on_page(self, page_posts: list[Post]) -> None:
        state = self._state.value
        self._set(
            state.model_copy(
                update={
                    "posts": (*state.posts, *page_posts),
                    "current_page": state.current_page + 1,
                    "has_more": len(page_posts) == self._config.page_size,
                    "is_loading": False,
                    "error": None,
                }
            )
        )

    def _on_page_error(self, exc: Exception) -> None:
        _logger.debug("Page %d failed: %s", self._state.value.current_page + 1, exc)
        self._set(self._state.value.model_copy(update={"error": str(exc) or PAGE_FAILED_MESSAGE, "is_loading": False}))

    def _set(self, state: PaginationState) -> None:
        if state == self._state.value:
            return
        self._state.set(state)
        _logger.debug(
            "Pagination state: page=%d posts=%d loading=%s has_more=%s error=%r",
            state.current_page,
            len(state.posts),
            state.is_loading,
            state.has_more,
            state.error,
        )

    def _owned_tasks(self) -> list[asyncio.Task[Any] | None]:
        return [self._gate.task]

    def _on_dispose(self) -> None:
        self._gate.cancel()
        for view in (self.posts, self.is_loading, self.has_more, self.error, self.current_page):
            view.complete()
        self._state.complete()
