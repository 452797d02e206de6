"""Stopwatch model."""

from __future__ import annotations

from pydantic import Field

from rxstores.models._base import StoreModel


class StopwatchState(StoreModel):
    elapsed_seconds: int = Field(default=0, ge=0)
    is_running: bool = False
