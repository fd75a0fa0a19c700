"""
Subscription Registry
In-process view of which users can currently receive a push notification
"""

import logging
import threading
from typing import Dict, List, Optional

from actions.state import PushSubscriptionInfo, ReminderStore


logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """
    Map of user id -> active push subscription.

    One subscription per user: a second ``add`` overwrites the first.
    Hydrated from persistence by ``load()``; afterwards mutated by the
    subscribe/unsubscribe routes and by the dispatcher when a push
    service reports the endpoint gone.
    """

    def __init__(self, store: Optional[ReminderStore] = None):
        self._store = store
        self._subscriptions: Dict[int, PushSubscriptionInfo] = {}
        self._lock = threading.Lock()

    def load(self) -> int:
        """Replace the in-memory map with persisted subscriptions"""
        if self._store is None:
            logger.warning("No subscription store configured, registry starts empty")
            return 0

        try:
            stored = self._store.list_all_subscriptions()
        except Exception as e:
            logger.error(f"Failed to load push subscriptions: {e}")
            stored = []

        with self._lock:
            self._subscriptions = {s.user_id: s.subscription for s in stored}
            count = len(self._subscriptions)

        logger.info(f"Loaded {count} push subscriptions")
        return count

    def add(self, user_id: int, subscription: PushSubscriptionInfo):
        with self._lock:
            self._subscriptions[user_id] = subscription
        logger.info(f"Subscription added for user {user_id}")

    def remove(self, user_id: int) -> bool:
        """Drop a user's subscription; returns whether one was present"""
        with self._lock:
            removed = self._subscriptions.pop(user_id, None) is not None
        if removed:
            logger.info(f"Subscription removed for user {user_id}")
        return removed

    def has(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._subscriptions

    def get(self, user_id: int) -> Optional[PushSubscriptionInfo]:
        with self._lock:
            return self._subscriptions.get(user_id)

    def user_ids(self) -> List[int]:
        """Snapshot of currently reachable users"""
        with self._lock:
            return list(self._subscriptions.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)
