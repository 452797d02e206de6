"""Lifecycle shared by every store.

A store is an explicitly owned component: the caller constructs it, hands
it to consumers by reference, and disposes it.  ``dispose()`` is
synchronous and idempotent; it cancels owned tasks and completes owned
observables.  ``aclose()`` (and ``async with``) additionally waits for the
cancelled tasks to finish unwinding.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, Self

from rxstores.exceptions import StoreDisposedError

_logger = logging.getLogger(__name__)


class StoreBase:
    """Construct / dispose lifecycle with async context-manager support."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _require_active(self) -> None:
        if self._disposed:
            raise StoreDisposedError(f"{self._name} has been disposed")

    def _owned_tasks(self) -> Iterable[asyncio.Task[Any] | None]:
        """Tasks that ``aclose()`` must wait for; overridden by async stores."""
        return ()

    def _on_dispose(self) -> None:
        """Release timers, queues and observables; overridden by every store."""

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._on_dispose()
        _logger.debug("%s disposed", self._name)

    async def aclose(self) -> None:
        tasks = [task for task in self._owned_tasks() if task is not None and not task.done()]
        self.dispose()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> Self:
        self._require_active()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
