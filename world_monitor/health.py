"""Answers the on-demand health query."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Callable

from .models import HealthReport, Mode, MonitorStateStore


class HealthReporter:
    """Read-only view over the monitor state plus process uptime."""

    def __init__(
        self,
        store: MonitorStateStore,
        *,
        world_name: str,
        interval_minutes: float,
        mode: Mode,
        started_at: float | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.world_name = world_name
        self.interval_minutes = interval_minutes
        self.mode = mode
        self.monotonic = monotonic
        self.started_at = monotonic() if started_at is None else started_at

    def report(self) -> HealthReport:
        state = self.store.snapshot()
        return HealthReport(
            world_name=self.world_name,
            tier=state.tier,
            is_available=state.tier.is_available,
            last_checked_at=state.last_checked_at,
            uptime=timedelta(seconds=max(0.0, self.monotonic() - self.started_at)),
            interval_minutes=self.interval_minutes,
            mode=self.mode,
        )
