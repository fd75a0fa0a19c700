"""
Actions Module
Background engines for medication and refill reminders
"""

from .state import (
    PushSubscriptionInfo,
    StoredSubscription,
    UserRecord,
    MedicationRecord,
    ReminderStore
)

from .subscription_registry import SubscriptionRegistry

from .reminder_dedup import ReminderDedupTracker

from .base_engine import PeriodicEngine

from .reminder_engine import (
    DueReminder,
    MedicationReminderScheduler,
    parse_schedule_time,
    reminder_instant
)

from .refill_engine import (
    RefillAlert,
    RefillReminderScheduler,
    needs_refill
)


__all__ = [
    # Records
    "PushSubscriptionInfo",
    "StoredSubscription",
    "UserRecord",
    "MedicationRecord",
    "ReminderStore",

    # Registry and dedup
    "SubscriptionRegistry",
    "ReminderDedupTracker",

    # Engines
    "PeriodicEngine",
    "DueReminder",
    "MedicationReminderScheduler",
    "parse_schedule_time",
    "reminder_instant",
    "RefillAlert",
    "RefillReminderScheduler",
    "needs_refill"
]
