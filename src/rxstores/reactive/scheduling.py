"""Named composition primitives for the stores' write side.

Each primitive captures one scheduling discipline:

``ActionQueue``      merge-queues: many command lanes, one FIFO reducer.
``DropWhileBusy``    exhaust: new triggers are dropped while work is running.
``ReplaceInFlight``  switch-to-latest: a new trigger abandons the running work.
``DelayCoalesce``    debounce: deliver the latest value after a quiet window.
``SharedReplay``     ref-counted share of one producer with replay of the
                     last value.

All of them run on the current asyncio event loop and never use threads.
``ActionQueue`` is fully synchronous; the other primitives create tasks and
therefore need a running loop when triggered.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from rxstores.clock import Clock
from rxstores.reactive.observable import Subscription

_logger = logging.getLogger(__name__)

A = TypeVar("A")
R = TypeVar("R")
T = TypeVar("T")


async def _cancel_and_wait(task: asyncio.Task[Any] | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


class ActionQueue(Generic[A]):
    """Single ordered action stream feeding one handler.

    Actions are handled strictly one at a time in the order they were
    pushed.  A push issued while an action is being handled (for example by
    an observer reacting to the new snapshot) is queued behind it instead of
    being handled re-entrantly.
    """

    def __init__(self, handler: Callable[[A], None], *, name: str = "actions") -> None:
        self._handler = handler
        self._name = name
        self._pending: deque[A] = deque()
        self._draining = False
        self._closed = False
        self._handled = 0

    @property
    def handled(self) -> int:
        """Number of actions handled so far."""
        return self._handled

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, action: A) -> None:
        if self._closed:
            _logger.debug("%s closed; dropping %r", self._name, action)
            return
        self._pending.append(action)
        if self._draining:
            return
        self._draining = True
        try:
            while self._pending:
                current = self._pending.popleft()
                try:
                    self._handler(current)
                except Exception:
                    _logger.exception("%s handler failed for %r", self._name, current)
                self._handled += 1
        finally:
            self._draining = False

    def lane(self, mapper: Callable[..., A | None]) -> Callable[..., None]:
        """Return a command emitter that maps its arguments to an action and pushes it.

        A mapper returning ``None`` drops the command.
        """

        def emit(*args: Any, **kwargs: Any) -> None:
            action = mapper(*args, **kwargs)
            if action is None:
                _logger.debug("%s: command %r mapped to no action", self._name, args)
                return
            self.push(action)

        return emit

    def close(self) -> None:
        self._closed = True
        self._pending.clear()


class _TaskOwner:
    """Owns at most one running task."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            _logger.debug("%s: cancelling in-flight task", self._name)
            task.cancel()

    async def aclose(self) -> None:
        task = self._task
        self.cancel()
        await _cancel_and_wait(task)


class DropWhileBusy(_TaskOwner, Generic[R]):
    """Exhaust gating.

    ``trigger()`` starts *work* unless an earlier run is still outstanding,
    in which case the trigger is dropped (not queued, not merged).
    """

    def __init__(
        self,
        work: Callable[..., Awaitable[R]],
        on_result: Callable[[R], None],
        *,
        on_error: Callable[[Exception], None] | None = None,
        name: str = "exhaust",
    ) -> None:
        super().__init__(name)
        self._work = work
        self._on_result = on_result
        self._on_error = on_error
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of triggers dropped because work was outstanding."""
        return self._dropped

    def trigger(self, *args: Any) -> bool:
        if self.busy:
            self._dropped += 1
            _logger.debug("%s busy; trigger dropped (dropped=%d)", self._name, self._dropped)
            return False
        self._task = asyncio.create_task(self._run(*args), name=self._name)
        return True

    async def _run(self, *args: Any) -> None:
        try:
            result = await self._work(*args)
        except Exception as exc:
            self._task = None
            if self._on_error is None:
                _logger.exception("%s work failed", self._name)
                return
            self._on_error(exc)
            return
        self._task = None
        self._on_result(result)


class ReplaceInFlight(_TaskOwner, Generic[R]):
    """Switch-to-latest.

    ``trigger()`` cancels the outstanding run (if any) and starts a new one.
    Only the newest run may deliver its result or error.
    """

    def __init__(
        self,
        work: Callable[..., Awaitable[R]],
        on_result: Callable[[R], None],
        *,
        on_error: Callable[[Exception], None] | None = None,
        name: str = "switch",
    ) -> None:
        super().__init__(name)
        self._work = work
        self._on_result = on_result
        self._on_error = on_error
        self._generation = 0

    @property
    def generation(self) -> int:
        """Token of the run currently allowed to deliver."""
        return self._generation

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._generation += 1
        self._task = asyncio.create_task(self._run(self._generation, *args), name=self._name)

    def cancel(self) -> None:
        super().cancel()
        # A run that already finished but whose callback is pending must not deliver.
        self._generation += 1

    async def _run(self, generation: int, *args: Any) -> None:
        try:
            result = await self._work(*args)
        except Exception as exc:
            if generation != self._generation:
                return
            self._task = None
            if self._on_error is None:
                _logger.exception("%s work failed", self._name)
                return
            self._on_error(exc)
            return
        if generation != self._generation:
            _logger.debug("%s: discarding superseded result", self._name)
            return
        self._task = None
        self._on_result(result)


class DelayCoalesce(_TaskOwner, Generic[T]):
    """Debounce on an injected clock.

    Each ``push()`` restarts the window; when it elapses without another
    push, the latest value is delivered.
    """

    def __init__(
        self,
        window: float,
        deliver: Callable[[T], None],
        *,
        clock: Clock,
        name: str = "debounce",
    ) -> None:
        super().__init__(name)
        self._window = window
        self._deliver = deliver
        self._clock = clock
        self._latest: T | None = None

    @property
    def window(self) -> float:
        return self._window

    @property
    def pending(self) -> bool:
        return self.busy

    def push(self, value: T) -> None:
        self._latest = value
        super().cancel()
        self._task = asyncio.create_task(self._wait(), name=self._name)

    async def _wait(self) -> None:
        await self._clock.sleep(self._window)
        self._task = None
        value = self._latest
        self._latest = None
        self._deliver(value)  # type: ignore[arg-type]


class SharedReplay(Generic[T]):
    """Reference-counted share of one producer with replay of the last value.

    The producer is a coroutine function receiving an ``emit`` callback.
    It is started when the first observer subscribes; late subscribers get
    the cached last value immediately.  When the last observer unsubscribes
    the producer task is cancelled and the cache is reset, so the next
    subscriber starts a fresh cycle.
    """

    def __init__(
        self,
        producer: Callable[[Callable[[T], None]], Awaitable[None]],
        *,
        name: str = "share",
    ) -> None:
        self._producer = producer
        self._name = name
        self._observers: dict[int, Callable[[T], None]] = {}
        self._keys = itertools.count()
        self._task: asyncio.Task[None] | None = None
        self._last: T | None = None
        self._has_value = False
        self._connections = 0

    @property
    def refcount(self) -> int:
        return len(self._observers)

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def connected(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def connections(self) -> int:
        """How many times the producer has been started."""
        return self._connections

    @property
    def value(self) -> T | None:
        """Cached last value of the current cycle, if any."""
        return self._last

    def subscribe(self, observer: Callable[[T], None]) -> Subscription:
        key = next(self._keys)
        self._observers[key] = observer
        if self._has_value:
            self._call(observer, self._last)  # type: ignore[arg-type]
        if self._task is None:
            self._connect()
        return Subscription(lambda: self._release(key))

    def _connect(self) -> None:
        self._connections += 1
        _logger.debug("%s: connecting producer (connection=%d)", self._name, self._connections)
        self._task = asyncio.create_task(self._run(), name=self._name)

    async def _run(self) -> None:
        try:
            await self._producer(self._emit)
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.exception("%s producer failed", self._name)

    def _emit(self, value: T) -> None:
        self._last = value
        self._has_value = True
        for key, observer in list(self._observers.items()):
            if key in self._observers:
                self._call(observer, value)

    def _call(self, observer: Callable[[T], None], value: T) -> None:
        try:
            observer(value)
        except Exception:
            _logger.exception("Observer %r of %s raised", observer, self._name)

    def _release(self, key: int) -> None:
        self._observers.pop(key, None)
        if not self._observers:
            self._disconnect()

    def _disconnect(self) -> None:
        task = self._task
        self._task = None
        self._last = None
        self._has_value = False
        if task is not None and not task.done():
            _logger.debug("%s: last observer left; releasing producer", self._name)
            task.cancel()

    def close(self) -> None:
        self._observers.clear()
        self._disconnect()
