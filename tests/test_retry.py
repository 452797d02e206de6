from __future__ import annotations

import pytest

from rxstores.exceptions import FetchError
from rxstores.reactive import retry_async


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_retry_gives_up_after_retries_plus_one_attempts() -> None:
    sleeps = _Sleeps()
    attempts = 0

    async def always_fail() -> int:
        nonlocal attempts
        attempts += 1
        raise FetchError(f"attempt {attempts}")

    with pytest.raises(FetchError, match="attempt 4"):
        await retry_async(always_fail, retries=3, delay=1.0, sleep=sleeps)

    assert attempts == 4
    assert sleeps.calls == [1.0, 1.0, 1.0]


@pytest.mark.asyncio
async def test_retry_returns_first_success() -> None:
    sleeps = _Sleeps()
    outcomes: list[Exception | str] = [FetchError("one"), FetchError("two"), "ok"]

    async def flaky() -> str:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    result = await retry_async(flaky, retries=3, delay=0.5, sleep=sleeps)

    assert result == "ok"
    assert sleeps.calls == [0.5, 0.5]


@pytest.mark.asyncio
async def test_retry_with_zero_retries_does_not_sleep() -> None:
    sleeps = _Sleeps()

    async def fail() -> None:
        raise ValueError("nope")

    with pytest.raises(ValueError):
        await retry_async(fail, retries=0, delay=1.0, sleep=sleeps)

    assert sleeps.calls == []


@pytest.mark.asyncio
async def test_retry_rejects_negative_retries() -> None:
    async def noop() -> None:
        return None

    with pytest.raises(ValueError):
        await retry_async(noop, retries=-1, delay=1.0, sleep=_Sleeps())
