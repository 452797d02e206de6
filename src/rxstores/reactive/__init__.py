"""Reactive primitives.

This package is the only place that knows how asynchronous events are
scheduled.  Stores compose these primitives; they never create ad-hoc tasks
or subscriber lists of their own.
"""

from rxstores.reactive.observable import Derived, Observable, State, Subscription, join_latest
from rxstores.reactive.retry import retry_async
from rxstores.reactive.scheduling import (
    ActionQueue,
    DelayCoalesce,
    DropWhileBusy,
    ReplaceInFlight,
    SharedReplay,
)

__all__ = [
    "ActionQueue",
    "DelayCoalesce",
    "Derived",
    "DropWhileBusy",
    "Observable",
    "ReplaceInFlight",
    "SharedReplay",
    "State",
    "Subscription",
    "join_latest",
    "retry_async",
]
