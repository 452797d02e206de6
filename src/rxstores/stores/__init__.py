"""Reactive state stores.

Every store owns one immutable snapshot, exposes derived read-only views
and accepts synchronous commands.  Stores are constructed and disposed by
their owner; none of them is a global singleton.
"""

from rxstores.stores.cart import CartStore, reduce_cart
from rxstores.stores.dashboard import DashboardPoller
from rxstores.stores.paginator import Paginator
from rxstores.stores.search import ProductSearch
from rxstores.stores.stopwatch import Stopwatch
from rxstores.stores.validator import FormValidator

__all__ = [
    "CartStore",
    "DashboardPoller",
    "FormValidator",
    "Paginator",
    "ProductSearch",
    "Stopwatch",
    "reduce_cart",
]
