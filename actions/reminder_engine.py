"""
Reminder Engine
Minute-by-minute medication reminders, sent ahead of each scheduled dose
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import settings, reminder_config
from actions.base_engine import PeriodicEngine
from actions.reminder_dedup import ReminderDedupTracker
from actions.state import MedicationRecord, ReminderStore
from actions.subscription_registry import SubscriptionRegistry


logger = logging.getLogger(__name__)


MINUTES_PER_DAY = 24 * 60


def parse_schedule_time(value: Any) -> Tuple[int, int]:
    """Parse an ``HH:MM`` dose time into ``(hour, minute)``; raises ValueError"""
    if not isinstance(value, str):
        raise ValueError(f"schedule time must be a string, got {type(value).__name__}")
    parsed = datetime.strptime(value.strip(), reminder_config.TIME_FORMAT)
    return parsed.hour, parsed.minute


def reminder_instant(scheduled_time: str, lead_minutes: int = 15) -> Tuple[int, int]:
    """
    Wall-clock ``(hour, minute)`` at which a dose's reminder is due.

    Wraps across midnight: "00:10" with a 15 minute lead gives (23, 55).
    """
    hour, minute = parse_schedule_time(scheduled_time)
    total = (hour * 60 + minute - lead_minutes) % MINUTES_PER_DAY
    return divmod(total, 60)


@dataclass
class DueReminder:
    """A dose whose reminder fires on the current tick"""
    date: str
    user_id: int
    medication_id: int
    medication_name: str
    scheduled_time: str
    delivered: Optional[bool] = None


class MedicationReminderScheduler(PeriodicEngine):
    """
    Sends "time for your medication" pushes ``lead_minutes`` before each dose.

    Every tick walks all users and their medications, because a user who
    subscribes later in the day must still get the remaining doses. A dose
    is attempted at most once per calendar day; the day is the date of the
    tick that fires, so a 00:10 dose is reminded at 23:55 of the day before.
    """

    job_id = "medication-reminders"

    def __init__(
        self,
        store: ReminderStore,
        registry: SubscriptionRegistry,
        dispatcher,
        tracker: Optional[ReminderDedupTracker] = None,
        lead_minutes: Optional[int] = None,
        interval: Optional[timedelta] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
        clock=None
    ):
        super().__init__(
            interval=interval or timedelta(seconds=settings.MEDICATION_REMINDER_INTERVAL_SECONDS),
            scheduler=scheduler,
            clock=clock,
            align_to_minute=True,
            # Slow push services must not hold back the next minute
            max_instances=3
        )
        self.store = store
        self.registry = registry
        self.dispatcher = dispatcher
        self.tracker = tracker or ReminderDedupTracker()
        self.lead_minutes = lead_minutes if lead_minutes is not None else settings.REMINDER_LEAD_MINUTES

    async def run(self) -> List[DueReminder]:
        return await self.tick()

    async def tick(self, now: Optional[datetime] = None) -> List[DueReminder]:
        """Evaluate every dose against ``now`` and send the reminders due"""
        now = now or self.clock()
        today = now.date().isoformat()
        current = (now.hour, now.minute)

        try:
            users = await asyncio.to_thread(self.store.list_all_users)
        except Exception as e:
            logger.error(f"Reminder tick {now:%H:%M}: failed to list users: {e}")
            return []

        due: List[DueReminder] = []
        for user in users:
            try:
                medications = await asyncio.to_thread(self.store.list_medications, user.id)
            except Exception as e:
                logger.error(f"Failed to load medications for user {user.id}: {e}")
                continue

            for medication in medications:
                due.extend(self._collect_due(today, current, user.id, medication))

        if not due:
            return due

        results = await asyncio.gather(
            *(self._dispatch(reminder) for reminder in due),
            return_exceptions=True
        )
        for reminder, result in zip(due, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Reminder for {reminder.medication_name} ({reminder.scheduled_time}) "
                    f"to user {reminder.user_id} raised: {result}"
                )
                reminder.delivered = False

        sent = sum(1 for r in due if r.delivered)
        logger.info(f"Reminder tick {now:%H:%M}: {len(due)} due, {sent} delivered")
        return due

    def _collect_due(
        self,
        today: str,
        current: Tuple[int, int],
        user_id: int,
        medication: MedicationRecord
    ) -> Iterable[DueReminder]:
        for scheduled_time in self._distinct_times(medication):
            if reminder_instant(scheduled_time, self.lead_minutes) != current:
                continue

            if not self.tracker.should_send(today, user_id, medication.id, scheduled_time):
                continue

            if not self.registry.has(user_id):
                # Not marked: the slot stays open, though this minute will not recur today
                logger.info(
                    f"User {user_id} has no push subscription, skipping "
                    f"{medication.name} at {scheduled_time}"
                )
                continue

            # Marked before the send is awaited so overlapping ticks and
            # repeated times cannot fire the same dose twice
            self.tracker.mark_sent(today, user_id, medication.id, scheduled_time)
            yield DueReminder(
                date=today,
                user_id=user_id,
                medication_id=medication.id,
                medication_name=medication.name,
                scheduled_time=scheduled_time
            )

    @staticmethod
    def _distinct_times(medication: MedicationRecord) -> List[str]:
        """Valid dose times as canonical ``HH:MM``, duplicates dropped"""
        times = medication.times
        if not isinstance(times, (list, tuple)) or not times:
            logger.warning(f"Medication {medication.id} has no usable schedule times: {times!r}")
            return []

        distinct: List[str] = []
        for value in times:
            try:
                hour, minute = parse_schedule_time(value)
            except ValueError as e:
                logger.warning(
                    f"Skipping bad schedule time {value!r} on medication {medication.id}: {e}"
                )
                continue
            canonical = f"{hour:02d}:{minute:02d}"
            if canonical not in distinct:
                distinct.append(canonical)
        return distinct

    async def _dispatch(self, reminder: DueReminder):
        reminder.delivered = await self.dispatcher.send_medication_due(
            reminder.user_id,
            reminder.medication_name,
            reminder.scheduled_time
        )
