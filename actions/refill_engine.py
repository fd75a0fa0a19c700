"""
Refill Engine
Periodic low-supply alerts for subscribed users
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import settings
from actions.base_engine import PeriodicEngine
from actions.state import MedicationRecord, ReminderStore
from actions.subscription_registry import SubscriptionRegistry


logger = logging.getLogger(__name__)


def needs_refill(medication: MedicationRecord) -> bool:
    """True when ``0 < pills_remaining <= refill_threshold``"""
    remaining = medication.pills_remaining
    threshold = medication.refill_threshold
    if remaining is None or threshold is None:
        return False
    # An empty supply gets no refill reminder
    return 0 < remaining <= threshold


@dataclass
class RefillAlert:
    user_id: int
    medication_id: int
    medication_name: str
    pills_remaining: int
    delivered: Optional[bool] = None


class RefillReminderScheduler(PeriodicEngine):
    """
    Checks supply levels every ``interval`` (24h by default).

    Only users with a live subscription are checked. There is no dedup: a
    medication that stays low is re-announced every run, the interval being
    the repeat cadence.
    """

    job_id = "refill-reminders"

    def __init__(
        self,
        store: ReminderStore,
        registry: SubscriptionRegistry,
        dispatcher,
        interval: Optional[timedelta] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
        clock=None
    ):
        super().__init__(
            interval=interval or timedelta(hours=settings.REFILL_CHECK_INTERVAL_HOURS),
            scheduler=scheduler,
            clock=clock
        )
        self.store = store
        self.registry = registry
        self.dispatcher = dispatcher

    async def run(self) -> List[RefillAlert]:
        return await self.run_once()

    async def run_once(self) -> List[RefillAlert]:
        alerts: List[RefillAlert] = []

        for user_id in self.registry.user_ids():
            try:
                medications = await asyncio.to_thread(self.store.list_medications, user_id)
            except Exception as e:
                logger.error(f"Refill check: failed to load medications for user {user_id}: {e}")
                continue

            for medication in medications:
                if needs_refill(medication):
                    alerts.append(RefillAlert(
                        user_id=user_id,
                        medication_id=medication.id,
                        medication_name=medication.name,
                        pills_remaining=medication.pills_remaining
                    ))

        if alerts:
            results = await asyncio.gather(
                *(self._dispatch(alert) for alert in alerts),
                return_exceptions=True
            )
            for alert, result in zip(alerts, results):
                if isinstance(result, Exception):
                    logger.error(f"Refill reminder for user {alert.user_id} raised: {result}")
                    alert.delivered = False

        logger.info(
            f"Refill check: {len(alerts)} low-supply medications, "
            f"{sum(1 for a in alerts if a.delivered)} reminders delivered"
        )
        return alerts

    async def _dispatch(self, alert: RefillAlert):
        alert.delivered = await self.dispatcher.send_refill_due(
            alert.user_id,
            alert.medication_name,
            alert.pills_remaining
        )
