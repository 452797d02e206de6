"""Bounded retry with a fixed delay."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int,
    delay: float,
    sleep: Callable[[float], Awaitable[None]],
    description: str = "operation",
) -> T:
    """Run *operation*, retrying failures up to *retries* more times.

    Parameters
    ----------
    operation : callable
        Zero-argument coroutine function performing one attempt.
    retries : int
        Additional attempts after the first failure.  ``retries=3`` means
        at most four attempts.
    delay : float
        Seconds to wait between attempts.
    sleep : callable
        Sleep implementation, normally ``clock.sleep``.
    description : str
        Label used in debug logs.

    Returns
    -------
    T
        The result of the first successful attempt.

    Raises
    ------
    Exception
        The error of the last attempt once all retries are exhausted.
        Cancellation is never retried.
    """
    if retries < 0:
        raise ValueError(f"retries must be non-negative, got {retries}")
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception:
            if attempt > retries:
                _logger.debug("%s failed after %d attempt(s)", description, attempt)
                raise
            _logger.debug(
                "%s attempt=%d failed; retrying in %.2fs",
                description,
                attempt,
                delay,
                exc_info=True,
            )
        await sleep(delay)
