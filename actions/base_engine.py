"""
Base Engine
Recurring background job lifecycle shared by the reminder engines
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger


logger = logging.getLogger(__name__)


class PeriodicEngine(ABC):
    """
    Runs ``run()`` on a fixed interval on the asyncio event loop.

    Engines share an ``AsyncIOScheduler`` when one is injected; otherwise
    each engine owns one and shuts it down on ``stop()``. ``start()`` also
    fires one run immediately. A run that raises is logged and the job stays
    scheduled.
    """

    job_id: str = "periodic-engine"

    def __init__(
        self,
        interval: timedelta,
        scheduler: Optional[AsyncIOScheduler] = None,
        clock: Optional[Callable[[], datetime]] = None,
        align_to_minute: bool = False,
        max_instances: int = 1
    ):
        self.interval = interval
        self.clock = clock or datetime.now
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._align_to_minute = align_to_minute
        self._max_instances = max_instances
        self._job = None
        self._startup_job = None

    @property
    def running(self) -> bool:
        return self._job is not None

    @abstractmethod
    async def run(self) -> Any:
        """One pass of the engine's work"""

    def _first_fire_time(self, now: datetime) -> datetime:
        if not self._align_to_minute:
            return now + self.interval
        # Fire on whole minutes so a late run never slides past a minute boundary
        return now.replace(second=0, microsecond=0) + timedelta(minutes=1)

    def start(self, run_immediately: bool = True):
        if self._job is not None:
            logger.warning(f"{self.job_id} already running")
            return

        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()

        now = datetime.now()
        self._job = self._scheduler.add_job(
            self._run_job,
            trigger=IntervalTrigger(
                seconds=self.interval.total_seconds(),
                start_date=self._first_fire_time(now)
            ),
            id=self.job_id,
            replace_existing=True,
            max_instances=self._max_instances,
            coalesce=True,
            misfire_grace_time=int(self.interval.total_seconds())
        )

        if run_immediately:
            # One-shot job; the interval job keeps its own start date
            self._startup_job = self._scheduler.add_job(
                self._run_job,
                id=f"{self.job_id}-startup",
                replace_existing=True,
                misfire_grace_time=None
            )

        if not self._scheduler.running:
            self._scheduler.start()

        logger.info(f"Started {self.job_id} (every {self.interval})")

    def stop(self):
        if self._startup_job is not None:
            try:
                self._startup_job.remove()
            except JobLookupError:
                # Already ran
                pass
            self._startup_job = None

        if self._job is not None:
            try:
                self._job.remove()
            except JobLookupError:
                pass
            self._job = None
            logger.info(f"Stopped {self.job_id}")

        if self._owns_scheduler and self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

    async def _run_job(self):
        try:
            await self.run()
        except Exception as e:
            logger.error(f"{self.job_id} run failed: {e}", exc_info=True)
