"""
Reminder Service
Wires the push registry, dispatcher and reminder engines into one lifecycle
"""

import asyncio
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from actions.reminder_dedup import ReminderDedupTracker
from actions.reminder_engine import MedicationReminderScheduler
from actions.refill_engine import RefillReminderScheduler
from actions.state import PushSubscriptionInfo
from actions.subscription_registry import SubscriptionRegistry
from services.storage_service import StorageService, storage_service
from tools.notification_service import NotificationDispatcher


logger = logging.getLogger(__name__)


class ReminderService:
    """
    Owns the background reminder machinery for the application.

    Subscribe/unsubscribe calls write through to persistence and then to the
    in-memory registry the engines read. When the push service reports a
    subscription gone, the dispatcher drops it from the registry and this
    service deletes the stored row.
    """

    def __init__(
        self,
        storage: Optional[StorageService] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        registry: Optional[SubscriptionRegistry] = None,
        tracker: Optional[ReminderDedupTracker] = None,
        scheduler: Optional[AsyncIOScheduler] = None
    ):
        self.storage = storage or storage_service
        # An empty registry is falsy, so test for None explicitly
        self.registry = registry if registry is not None else SubscriptionRegistry(self.storage)
        self.dispatcher = dispatcher or NotificationDispatcher.from_settings(
            self.registry,
            on_subscription_expired=self._forget_subscription
        )
        self.tracker = tracker or ReminderDedupTracker()
        self._scheduler = scheduler

        self.medication_reminders: Optional[MedicationReminderScheduler] = None
        self.refill_reminders: Optional[RefillReminderScheduler] = None

    @property
    def running(self) -> bool:
        return self.medication_reminders is not None and self.medication_reminders.running

    def _build_engines(self):
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()

        self.medication_reminders = MedicationReminderScheduler(
            store=self.storage,
            registry=self.registry,
            dispatcher=self.dispatcher,
            tracker=self.tracker,
            scheduler=self._scheduler
        )
        self.refill_reminders = RefillReminderScheduler(
            store=self.storage,
            registry=self.registry,
            dispatcher=self.dispatcher,
            scheduler=self._scheduler
        )

    async def start(self):
        """Hydrate subscriptions off the loop, then start both engines"""
        if self.running:
            return

        await asyncio.to_thread(self.registry.load)
        self._build_engines()
        self.medication_reminders.start()
        self.refill_reminders.start()
        logger.info(
            f"Reminder service started with {len(self.registry)} subscriptions "
            f"(push {'enabled' if self.dispatcher.enabled else 'disabled'})"
        )

    def stop(self):
        for engine in (self.medication_reminders, self.refill_reminders):
            if engine is not None:
                engine.stop()

        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Reminder service stopped")

    # ==================== ROUTE-LAYER PASS-THROUGHS ====================

    def add_subscription(self, user_id: int, subscription: PushSubscriptionInfo, db=None):
        self.storage.upsert_subscription(user_id, subscription, db=db)
        self.registry.add(user_id, subscription)

    def remove_subscription(self, user_id: int, db=None):
        self.storage.delete_subscription(user_id, db=db)
        self.registry.remove(user_id)

    def get_public_key(self) -> str:
        return self.dispatcher.public_key

    def subscription_count(self) -> int:
        return len(self.registry)

    async def send_test_refill_reminder(self, user_id: int) -> bool:
        """Send a refill reminder for the user's first medication"""
        medications = await asyncio.to_thread(self.storage.list_medications, user_id)
        if not medications:
            logger.warning(f"No medications for user {user_id}, cannot send test refill reminder")
            return False

        medication = medications[0]
        return await self.dispatcher.send_refill_due(
            user_id,
            medication.name,
            medication.pills_remaining or 0
        )

    async def send_test_notification(self, user_id: int) -> bool:
        return await self.dispatcher.send_test(user_id)

    def _forget_subscription(self, user_id: int):
        self.storage.delete_subscription(user_id)


# Singleton instance
reminder_service = ReminderService()


def get_reminder_service() -> ReminderService:
    """FastAPI dependency; override in tests"""
    return reminder_service
