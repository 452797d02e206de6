"""Current-value observables and derived projections.

These replace an Rx library for the stores' read side:

* :class:`State` is a current-value subject owned by a store.  Only the
  owning store calls :meth:`State.set`; consumers receive it typed as
  :class:`Observable` and can only read and subscribe.
* :class:`Derived` joins the latest values of one or more observables and
  republishes a projection whenever it changes.

Everything is synchronous: ``set()`` returns after every observer ran.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Sequence
from typing import Any, Generic, Protocol, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
T_co = TypeVar("T_co", covariant=True)

Observer = Callable[[T], None]


class Subscription:
    """Handle returned by ``subscribe``; releases the observer once."""

    def __init__(self, teardown: Callable[[], None] | None = None) -> None:
        self._teardown = teardown

    @property
    def closed(self) -> bool:
        return self._teardown is None

    def unsubscribe(self) -> None:
        teardown = self._teardown
        self._teardown = None
        if teardown is not None:
            teardown()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.unsubscribe()


class Observable(Protocol[T_co]):
    """Read-only view over a value that changes over time."""

    @property
    def value(self) -> T_co: ...

    def subscribe(self, observer: Callable[[T_co], None], *, emit_current: bool = True) -> Subscription: ...


class _Publisher(Generic[T]):
    """Observer bookkeeping shared by :class:`State` and :class:`Derived`."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._observers: dict[int, Observer[T]] = {}
        self._keys = itertools.count()
        self._completed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    @property
    def value(self) -> T:
        raise NotImplementedError

    def subscribe(self, observer: Observer[T], *, emit_current: bool = True) -> Subscription:
        """Register *observer*; by default it immediately receives the current value."""
        if self._completed:
            return Subscription()
        key = next(self._keys)
        self._observers[key] = observer
        if emit_current:
            self._call(observer, self.value)
        return Subscription(lambda: self._observers.pop(key, None))

    def map(self, project: Callable[[T], U], *, name: str | None = None) -> Derived[U]:
        return Derived([self], project, name=name or f"{self._name}.map")

    def _publish(self, value: T) -> None:
        for key, observer in list(self._observers.items()):
            if key in self._observers:
                self._call(observer, value)

    def _call(self, observer: Observer[T], value: T) -> None:
        try:
            observer(value)
        except Exception:
            _logger.exception("Observer %r of %s raised", observer, self._name)

    def complete(self) -> None:
        self._completed = True
        self._observers.clear()


class State(_Publisher[T]):
    """Mutable current-value subject.

    Every :meth:`set` publishes, even when the new value equals the old
    one; stores only call it on real transitions.
    """

    def __init__(self, initial: T, *, name: str = "state") -> None:
        super().__init__(name)
        self._value = initial

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if self._completed:
            _logger.debug("Ignoring set() on completed %s", self._name)
            return
        self._value = value
        self._publish(value)


class Derived(_Publisher[T]):
    """Projection of the latest values of *sources* (join-latest-values).

    The projection is recomputed whenever any source publishes and is
    republished only when it differs from the previous projection.
    """

    def __init__(
        self,
        sources: Sequence[Observable[Any]],
        project: Callable[..., T],
        *,
        name: str = "derived",
    ) -> None:
        super().__init__(name)
        if not sources:
            raise ValueError("Derived needs at least one source")
        self._sources = tuple(sources)
        self._project = project
        self._value = self._compute()
        self._upstream = [source.subscribe(self._on_source, emit_current=False) for source in self._sources]

    @property
    def value(self) -> T:
        return self._value

    def _compute(self) -> T:
        return self._project(*(source.value for source in self._sources))

    def _on_source(self, _value: Any) -> None:
        if self._completed:
            return
        updated = self._compute()
        if updated == self._value:
            return
        self._value = updated
        self._publish(updated)

    def complete(self) -> None:
        for subscription in self._upstream:
            subscription.unsubscribe()
        self._upstream.clear()
        super().complete()


def join_latest(
    *sources: Observable[Any],
    project: Callable[..., T] | None = None,
    name: str = "join_latest",
) -> Derived[Any]:
    """Combine the latest values of *sources*.

    Without *project* the derived value is the tuple of source values.
    """
    if project is None:
        return Derived(sources, lambda *values: tuple(values), name=name)
    return Derived(sources, project, name=name)
