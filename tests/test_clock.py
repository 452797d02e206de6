from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from rxstores.clock import SystemClock, VirtualClock


@pytest.mark.asyncio
async def test_virtual_clock_wakes_sleepers_in_deadline_order() -> None:
    clock = VirtualClock()
    woken: list[tuple[str, float]] = []

    async def sleeper(name: str, seconds: float) -> None:
        await clock.sleep(seconds)
        woken.append((name, clock.elapsed))

    tasks = [
        asyncio.create_task(sleeper("b", 2.0)),
        asyncio.create_task(sleeper("a", 1.0)),
        asyncio.create_task(sleeper("c", 3.0)),
    ]

    await clock.advance(2.5)
    assert woken == [("a", 1.0), ("b", 2.0)]
    assert clock.pending_sleepers == 1

    await clock.advance(0.5)
    assert woken[-1] == ("c", 3.0)
    await asyncio.gather(*tasks)


@pytest.mark.asyncio
async def test_virtual_clock_runs_follow_up_sleeps_within_one_advance() -> None:
    clock = VirtualClock()
    ticks: list[float] = []

    async def ticker() -> None:
        while True:
            ticks.append(clock.elapsed)
            await clock.sleep(1.0)

    task = asyncio.create_task(ticker())
    await clock.advance(3.0)
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)

    assert ticks == [0.0, 1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_virtual_clock_now_follows_elapsed_time() -> None:
    start = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    clock = VirtualClock(start)

    await clock.advance(90.0)

    assert clock.now() == start + timedelta(seconds=90)


@pytest.mark.asyncio
async def test_virtual_clock_skips_cancelled_sleepers() -> None:
    clock = VirtualClock()
    task = asyncio.create_task(clock.sleep(1.0))
    await clock.settle()

    task.cancel()
    await clock.advance(2.0)

    assert task.cancelled()
    assert clock.pending_sleepers == 0


@pytest.mark.asyncio
async def test_virtual_clock_rejects_negative_advance() -> None:
    with pytest.raises(ValueError):
        await VirtualClock().advance(-1.0)


def test_system_clock_is_timezone_aware() -> None:
    assert SystemClock().now().tzinfo is not None
