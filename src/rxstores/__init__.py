"""rxstores - Reactive asyncio state stores for UI widgets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rxstores")
except PackageNotFoundError:
    __version__ = "0+local"
from rxstores._transport import Fetcher, HttpFetcher
from rxstores.clock import Clock, SystemClock, VirtualClock
from rxstores.config import StoresConfig
from rxstores.exceptions import (
    FetchError,
    StoreDisposedError,
    StoresConfigError,
    StoresError,
)
from rxstores.models import (
    CartItem,
    CatalogProduct,
    DashboardState,
    DashboardStats,
    FieldError,
    FieldName,
    FormFieldState,
    FormSubmission,
    PaginationState,
    PollResult,
    Post,
    Product,
    SearchState,
    StopwatchState,
)
from rxstores.stores import (
    CartStore,
    DashboardPoller,
    FormValidator,
    Paginator,
    ProductSearch,
    Stopwatch,
)

__all__ = [
    "__version__",
    "CartItem",
    "CartStore",
    "CatalogProduct",
    "Clock",
    "DashboardPoller",
    "DashboardState",
    "DashboardStats",
    "FetchError",
    "Fetcher",
    "FieldError",
    "FieldName",
    "FormFieldState",
    "FormSubmission",
    "FormValidator",
    "HttpFetcher",
    "PaginationState",
    "Paginator",
    "PollResult",
    "Post",
    "Product",
    "ProductSearch",
    "SearchState",
    "StoreDisposedError",
    "Stopwatch",
    "StopwatchState",
    "StoresConfig",
    "StoresConfigError",
    "StoresError",
    "SystemClock",
    "VirtualClock",
]
