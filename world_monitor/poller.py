"""Periodic status polling."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Protocol

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .errors import FetchError
from .extraction import StatusExtractor
from .models import Mode, MonitorStateStore, NotificationKind, Tier
from .policy import decide, is_available, should_mention

logger = structlog.get_logger(__name__)

POLL_JOB_ID = "world_status_poll"


class PageFetcher(Protocol):
    async def fetch(self) -> str: ...


class StatusNotifier(Protocol):
    async def send_status_update(
        self,
        tier: Tier,
        available: bool,
        kind: NotificationKind,
        *,
        mention: bool = False,
        mode: Mode = Mode.STANDARD,
    ) -> bool: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PollLoop:
    """Runs tick() once at start and then every interval until stopped.

    Each tick fetches the status page, extracts the world's tier, asks the
    notification policy whether to send a message and records the result in
    the shared state store.
    """

    def __init__(
        self,
        *,
        store: MonitorStateStore,
        fetcher: PageFetcher,
        extractor: StatusExtractor,
        notifier: StatusNotifier,
        world_name: str,
        mode: Mode = Mode.STANDARD,
        interval_minutes: float = 5,
        clock: Callable[[], datetime] = _utcnow,
        scheduler: AsyncIOScheduler | None = None,
    ):
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor
        self.notifier = notifier
        self.world_name = world_name
        self.mode = mode
        self.interval_minutes = interval_minutes
        self.clock = clock
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)
        self.running = False

    def start(self) -> None:
        """Schedule the first tick now and the rest every interval."""
        if self.running:
            logger.warning("Poll loop already running")
            return

        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval_minutes * 60, timezone=timezone.utc),
            id=POLL_JOB_ID,
            name=f"Poll {self.world_name} status",
            next_run_time=self.clock(),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.start()
        self.running = True
        logger.info(
            "Poll loop started",
            world=self.world_name,
            interval_minutes=self.interval_minutes,
            mode=self.mode.value,
        )

    def stop(self) -> None:
        """Stop scheduling further ticks."""
        if not self.running:
            return

        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("Poll loop stopped")

    def next_run_time(self) -> datetime | None:
        job = self.scheduler.get_job(POLL_JOB_ID)
        return job.next_run_time if job else None

    async def tick(self) -> Tier | None:
        """Run one fetch/extract/decide/notify/update cycle.

        Returns the extracted tier, or None when the fetch failed.
        """
        logger.info("Checking world status", world=self.world_name)
        try:
            html = await self.fetcher.fetch()
        except FetchError as e:
            logger.warning("Status page fetch failed, will retry next tick", error=str(e))
            return None

        checked_at = self.clock()
        tier = self.extractor.extract(html, self.world_name)

        if tier == Tier.UNKNOWN:
            self.store.touch(checked_at)
            logger.info("World tier unknown, keeping last known tier", last_tier=self.store.snapshot().tier.value)
            return tier

        prev = self.store.snapshot().tier
        decision = decide(prev, tier, self.mode)
        if decision.should_notify:
            await self._notify(tier, decision.kind)
        else:
            logger.info("No notification needed", previous=prev.value, tier=tier.value)

        self.store.record_check(tier, checked_at)
        return tier

    async def _notify(self, tier: Tier, kind: NotificationKind) -> None:
        try:
            sent = await self.notifier.send_status_update(
                tier,
                is_available(tier),
                kind,
                mention=should_mention(self.mode, tier),
                mode=self.mode,
            )
        except Exception as e:
            logger.error("Notification failed", tier=tier.value, error=str(e))
            return
        if not sent:
            logger.warning("Notification not delivered", tier=tier.value, kind=kind.value)

