"""Dashboard stats endpoint.

Endpoint:
  - GET /users (collection; only its size carries information)

The dashboard figures other than the user count have no source in the
collection.  They are produced by a pluggable :data:`StatsMapper`; the
default :class:`SyntheticStatsMapper` fills them with placeholder values.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from rxstores._transport import Fetcher
from rxstores.models.dashboard import DashboardStats

_logger = logging.getLogger(__name__)

StatsMapper = Callable[[Sequence[Mapping[str, Any]], datetime], DashboardStats]
"""Turns the fetched user records and the fetch time into dashboard stats."""


class SyntheticStatsMapper:
    """Placeholder stats derived from the user count.

    ``active_users`` is a fixed share of the users; sales and revenue are
    drawn uniformly from the configured ranges using *rng*, so tests can pass
    a seeded :class:`random.Random` for reproducible figures.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        active_ratio: float = 0.7,
        sales_range: tuple[int, int] = (5000, 14999),
        revenue_range: tuple[int, int] = (1000, 5999),
    ) -> None:
        if not 0.0 <= active_ratio <= 1.0:
            raise ValueError(f"active_ratio must be within [0, 1], got {active_ratio}")
        self._rng = rng or random.Random()
        self._active_ratio = active_ratio
        self._sales_range = sales_range
        self._revenue_range = revenue_range

    def __call__(self, records: Sequence[Mapping[str, Any]], now: datetime) -> DashboardStats:
        total = len(records)
        return DashboardStats(
            total_users=total,
            active_users=math.floor(total * self._active_ratio),
            total_sales=self._rng.randint(*self._sales_range),
            today_revenue=self._rng.randint(*self._revenue_range),
            last_updated=now,
        )


async def fetch_dashboard_stats(
    fetcher: Fetcher,
    url: str,
    *,
    mapper: StatsMapper,
    now: Callable[[], datetime],
) -> DashboardStats:
    """Fetch the user collection at *url* and map it to :class:`DashboardStats`."""
    records = await fetcher.fetch(url)
    stats = mapper(records, now())
    _logger.debug("Dashboard stats fetched: users=%d", stats.total_users)
    return stats
