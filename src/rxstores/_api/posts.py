"""Paginated posts endpoint.

Endpoint:
  - GET /posts?_start={offset}&_limit={page_size}
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from rxstores._transport import Fetcher
from rxstores.exceptions import FetchError
from rxstores.models.feed import Post

_logger = logging.getLogger(__name__)

_POSTS_ADAPTER = TypeAdapter(list[Post])


def build_page_url(posts_url: str, page: int, page_size: int) -> str:
    """URL of the 1-based *page* of *page_size* posts."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start = (page - 1) * page_size
    return f"{posts_url}?_start={start}&_limit={page_size}"


async def fetch_posts_page(
    fetcher: Fetcher,
    posts_url: str,
    page: int,
    page_size: int,
) -> list[Post]:
    """Fetch one page of posts.

    Raises
    ------
    FetchError
        If the request fails or a record is not a valid post.
    """
    url = build_page_url(posts_url, page, page_size)
    _logger.debug("Fetching page %d from %s", page, url)
    records = await fetcher.fetch(url)
    try:
        posts = _POSTS_ADAPTER.validate_python(records)
    except ValidationError as exc:
        raise FetchError(f"Malformed post record from {url}: {exc.error_count()} error(s)", url=url) from exc
    _logger.debug("Page %d loaded with %d post(s)", page, len(posts))
    return posts
