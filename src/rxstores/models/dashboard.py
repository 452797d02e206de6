"""Dashboard models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from rxstores.models._base import StoreModel


class DashboardStats(StoreModel):
    """Fetched dashboard figures, replaced wholesale on every successful poll."""

    total_users: int = Field(ge=0)
    active_users: int = Field(ge=0)
    total_sales: int = Field(ge=0)
    today_revenue: int = Field(ge=0)
    last_updated: datetime


class DashboardState(StoreModel):
    """Snapshot published by :class:`rxstores.stores.dashboard.DashboardPoller`.

    ``is_loading`` is true only while a fetch is outstanding.  ``stats``
    and ``error`` may coexist: a failed poll keeps the stale stats.
    """

    stats: DashboardStats | None = None
    is_loading: bool = False
    is_paused: bool = False
    error: str | None = None
    last_refresh: datetime | None = None


class PollResult(StoreModel):
    """One emission of the shared dashboard feed."""

    stats: DashboardStats | None = None
    error: str | None = None
    completed_at: datetime
    replayed: bool = False
    """``True`` when a paused tick re-emitted the last stats without fetching."""

    @property
    def ok(self) -> bool:
        return self.error is None
