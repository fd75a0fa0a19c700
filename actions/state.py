"""
Reminder State
Plain records exchanged between persistence and the reminder engines
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class PushSubscriptionInfo:
    """Browser push subscription as the push service sees it"""
    endpoint: str
    p256dh: str
    auth: str
    expiration_time: Optional[int] = None

    def to_webpush(self) -> Dict[str, Any]:
        """Shape expected by pywebpush's ``subscription_info``"""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PushSubscriptionInfo":
        """Build from the JSON a browser's PushSubscription serializes to"""
        keys = data.get("keys") or {}
        return cls(
            endpoint=data["endpoint"],
            p256dh=keys["p256dh"],
            auth=keys["auth"],
            expiration_time=data.get("expirationTime"),
        )


@dataclass
class StoredSubscription:
    """Persisted subscription row paired with its owner"""
    user_id: int
    subscription: PushSubscriptionInfo


@dataclass
class UserRecord:
    id: int
    email: str
    role: str = "patient"


@dataclass
class MedicationRecord:
    """What the reminder engines need to know about a medication"""
    id: int
    user_id: int
    name: str
    dosage: str = ""
    times: List[str] = field(default_factory=list)
    pills_remaining: Optional[int] = None
    refill_threshold: Optional[int] = None


class ReminderStore(Protocol):
    """Read side of persistence consumed by the reminder engines"""

    def list_all_users(self) -> List[UserRecord]:
        ...

    def list_medications(self, user_id: int) -> List[MedicationRecord]:
        ...

    def list_all_subscriptions(self) -> List[StoredSubscription]:
        ...
