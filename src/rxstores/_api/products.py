"""Product catalog search.

The catalog endpoint has no server-side filtering, so the whole collection
is fetched and filtered client-side.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import TypeAdapter, ValidationError

from rxstores._transport import Fetcher
from rxstores.exceptions import FetchError
from rxstores.models.catalog import CatalogProduct

_logger = logging.getLogger(__name__)

_PRODUCTS_ADAPTER = TypeAdapter(list[CatalogProduct])


def filter_products(products: Iterable[CatalogProduct], term: str) -> tuple[CatalogProduct, ...]:
    """Products whose name or category contains *term*, ignoring case."""
    needle = term.strip().lower()
    if not needle:
        return ()
    return tuple(p for p in products if needle in p.name.lower() or needle in p.category.lower())


async def search_products(fetcher: Fetcher, products_url: str, term: str) -> tuple[CatalogProduct, ...]:
    """Fetch the catalog and return the products matching *term*."""
    records = await fetcher.fetch(products_url)
    try:
        products = _PRODUCTS_ADAPTER.validate_python(records)
    except ValidationError as exc:
        raise FetchError(
            f"Malformed product record from {products_url}: {exc.error_count()} error(s)",
            url=products_url,
        ) from exc
    matches = filter_products(products, term)
    _logger.debug("Catalog search term=%r matched %d of %d", term, len(matches), len(products))
    return matches
