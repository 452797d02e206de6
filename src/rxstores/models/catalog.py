"""Product catalog models used by product search."""

from __future__ import annotations

from pydantic import ConfigDict

from rxstores.models._base import StoreModel


class CatalogProduct(StoreModel):
    """A product as listed by the catalog collection (string ids)."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    price: float = 0.0
    category: str = ""


class SearchState(StoreModel):
    """Snapshot published by :class:`rxstores.stores.search.ProductSearch`."""

    term: str = ""
    results: tuple[CatalogProduct, ...] = ()
    is_loading: bool = False
    error: str | None = None
