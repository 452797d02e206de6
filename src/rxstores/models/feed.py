"""Feed models for the infinite-scroll paginator."""

from __future__ import annotations

from pydantic import Field

from rxstores.models._base import StoreModel


class Post(StoreModel):
    """A feed post; identity is ``id``.  Accepts ``userId`` from JSON records."""

    id: int
    title: str = ""
    body: str = ""
    user_id: int | None = None


class PaginationState(StoreModel):
    """Snapshot published by :class:`rxstores.stores.paginator.Paginator`.

    ``posts`` is append-only.  ``has_more`` turns false exactly when the
    most recently fetched page held fewer posts than the page size.
    """

    posts: tuple[Post, ...] = ()
    current_page: int = Field(default=0, ge=0)
    is_loading: bool = False
    has_more: bool = True
    error: str | None = None
