"""
Reminder Dedup Tracker
Remembers which medication reminders went out today
"""

import logging
import threading
from typing import Optional, Set, Tuple


logger = logging.getLogger(__name__)


ReminderKey = Tuple[str, int, int, str]


class ReminderDedupTracker:
    """
    Per-calendar-day set of sent reminder keys.

    A key is ``(date, user_id, medication_id, scheduled_time)``. The set is
    cleared lazily: the first lookup carrying a new date wipes the previous
    day's keys. Checking and marking are separate steps so a reminder that
    was skipped (user unreachable) does not use up the day's slot.
    """

    def __init__(self):
        self._sent: Set[ReminderKey] = set()
        self._last_reset_date: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def last_reset_date(self) -> Optional[str]:
        return self._last_reset_date

    def _roll_over(self, date: str):
        # Caller holds the lock
        if date != self._last_reset_date:
            if self._sent:
                logger.info(
                    f"Day rollover to {date}: clearing {len(self._sent)} sent reminder keys"
                )
            self._sent.clear()
            self._last_reset_date = date

    def should_send(
        self,
        date: str,
        user_id: int,
        medication_id: int,
        scheduled_time: str
    ) -> bool:
        """True when no reminder for this dose has been marked sent today"""
        with self._lock:
            self._roll_over(date)
            return (date, user_id, medication_id, scheduled_time) not in self._sent

    def mark_sent(
        self,
        date: str,
        user_id: int,
        medication_id: int,
        scheduled_time: str
    ) -> bool:
        """Record the dose as sent; returns False if it was already marked"""
        key = (date, user_id, medication_id, scheduled_time)
        with self._lock:
            self._roll_over(date)
            if key in self._sent:
                return False
            self._sent.add(key)
            return True

    def sent_count(self) -> int:
        with self._lock:
            return len(self._sent)
