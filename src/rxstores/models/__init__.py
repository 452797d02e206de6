"""Pydantic models for store snapshots, actions and fetched records."""

from rxstores.models._base import StoreModel
from rxstores.models.cart import (
    AddItem,
    AdjustQuantity,
    CartAction,
    CartItem,
    ClearCart,
    Product,
    RemoveItem,
    SetQuantity,
)
from rxstores.models.catalog import CatalogProduct, SearchState
from rxstores.models.dashboard import DashboardState, DashboardStats, PollResult
from rxstores.models.feed import PaginationState, Post
from rxstores.models.form import FieldError, FieldName, FormFieldState, FormSubmission
from rxstores.models.timer import StopwatchState

__all__ = [
    "AddItem",
    "AdjustQuantity",
    "CartAction",
    "CartItem",
    "CatalogProduct",
    "ClearCart",
    "DashboardState",
    "DashboardStats",
    "FieldError",
    "FieldName",
    "FormFieldState",
    "FormSubmission",
    "PaginationState",
    "PollResult",
    "Post",
    "Product",
    "RemoveItem",
    "SearchState",
    "SetQuantity",
    "StopwatchState",
    "StoreModel",
]
