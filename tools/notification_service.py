"""
Notification Service Tool
Builds reminder payloads and delivers them as Web Push messages
"""

import asyncio
import json
import logging
from typing import Dict, Optional, Any, Callable
from dataclasses import dataclass, field
from enum import Enum

from pywebpush import webpush, WebPushException

from config import settings, reminder_config
from actions.subscription_registry import SubscriptionRegistry


logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    """Kinds of push notification the reminder engines emit"""
    MEDICATION_REMINDER = "medication-reminder"
    REFILL_REMINDER = "refill-reminder"
    TEST = "test"


class DeliveryOutcome(str, Enum):
    """How a single delivery attempt ended"""
    SENT = "sent"
    NO_SUBSCRIPTION = "no_subscription"
    NOT_CONFIGURED = "not_configured"
    EXPIRED = "expired"
    FAILED = "failed"


@dataclass
class NotificationPayload:
    """JSON body handed to the browser's service worker"""
    title: str
    body: str
    tag: Optional[str] = None
    icon: str = reminder_config.ICON_PATH
    badge: str = reminder_config.BADGE_PATH
    url: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "title": self.title,
            "body": self.body,
            "icon": self.icon,
            "badge": self.badge,
            "data": self.data,
        }
        if self.tag:
            payload["tag"] = self.tag
        if self.url:
            payload["url"] = self.url
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


# Notification templates
NOTIFICATION_TEMPLATES: Dict[NotificationType, Dict[str, str]] = {
    NotificationType.MEDICATION_REMINDER: {
        "title": "Time for Your Medication",
        "body": "Don't forget to take {medication_name} at {scheduled_time}",
    },
    NotificationType.REFILL_REMINDER: {
        "title": "Medication Refill Reminder",
        "body": "{medication_name} is running low ({pills_remaining} pills remaining). Time to refill!",
    },
    NotificationType.TEST: {
        "title": "SmartAid Notifications Enabled",
        "body": "You will be reminded {lead_minutes} minutes before each dose.",
    },
}


Transport = Callable[..., Any]


class NotificationDispatcher:
    """
    Turns reminder events into Web Push deliveries.

    Without VAPID credentials the dispatcher is inert: every delivery fails
    fast without touching the network, and the engines keep running.
    A push service answering 404/410 means the subscription is dead; it is
    dropped from the registry and ``on_subscription_expired`` is told.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        vapid_public_key: Optional[str] = None,
        vapid_private_key: Optional[str] = None,
        vapid_claims_sub: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        send_timeout: Optional[float] = None,
        lead_minutes: Optional[int] = None,
        transport: Optional[Transport] = None,
        on_subscription_expired: Optional[Callable[[int], None]] = None
    ):
        self.registry = registry
        self.templates = NOTIFICATION_TEMPLATES
        self._public_key = (vapid_public_key or "").strip()
        self._private_key = (vapid_private_key or "").strip()
        self._claims_sub = vapid_claims_sub or settings.VAPID_CLAIMS_SUB
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.PUSH_TTL_SECONDS
        self._timeout = send_timeout if send_timeout is not None else settings.PUSH_SEND_TIMEOUT_SECONDS
        self._lead_minutes = lead_minutes if lead_minutes is not None else settings.REMINDER_LEAD_MINUTES
        self._transport = transport or webpush
        self._on_subscription_expired = on_subscription_expired

        if not self.enabled:
            logger.error("VAPID keys not configured. Push notifications will not work.")

    @classmethod
    def from_settings(
        cls,
        registry: SubscriptionRegistry,
        **kwargs
    ) -> "NotificationDispatcher":
        return cls(
            registry,
            vapid_public_key=settings.VAPID_PUBLIC_KEY,
            vapid_private_key=settings.VAPID_PRIVATE_KEY,
            vapid_claims_sub=settings.VAPID_CLAIMS_SUB,
            **kwargs
        )

    @property
    def enabled(self) -> bool:
        return bool(self._public_key and self._private_key)

    @property
    def public_key(self) -> str:
        return self._public_key

    def _format(self, notification_type: NotificationType, **kwargs) -> tuple:
        template = self.templates[notification_type]
        return template["title"].format(**kwargs), template["body"].format(**kwargs)

    async def send_medication_due(
        self,
        user_id: int,
        medication_name: str,
        scheduled_time: str
    ) -> bool:
        """Remind a user to take a dose scheduled at ``scheduled_time``"""
        title, body = self._format(
            NotificationType.MEDICATION_REMINDER,
            medication_name=medication_name,
            scheduled_time=scheduled_time
        )
        payload = NotificationPayload(
            title=title,
            body=body,
            tag=f"{reminder_config.MEDICATION_TAG_PREFIX}{medication_name}",
            url=reminder_config.MEDICATION_URL,
            data={
                "type": NotificationType.MEDICATION_REMINDER.value,
                "medicationName": medication_name,
                "scheduledTime": scheduled_time,
            }
        )
        return await self.deliver(user_id, payload)

    async def send_refill_due(
        self,
        user_id: int,
        medication_name: str,
        pills_remaining: int
    ) -> bool:
        """Tell a user a medication is running low"""
        title, body = self._format(
            NotificationType.REFILL_REMINDER,
            medication_name=medication_name,
            pills_remaining=pills_remaining
        )
        payload = NotificationPayload(
            title=title,
            body=body,
            tag=f"{reminder_config.REFILL_TAG_PREFIX}{medication_name}",
            url=reminder_config.REFILL_URL,
            data={
                "type": NotificationType.REFILL_REMINDER.value,
                "medicationName": medication_name,
                "pillsRemaining": pills_remaining,
            }
        )
        return await self.deliver(user_id, payload)

    async def send_test(self, user_id: int) -> bool:
        title, body = self._format(NotificationType.TEST, lead_minutes=self._lead_minutes)
        payload = NotificationPayload(
            title=title,
            body=body,
            tag="test",
            data={"type": NotificationType.TEST.value}
        )
        return await self.deliver(user_id, payload)

    async def deliver(self, user_id: int, payload: NotificationPayload) -> bool:
        """Push ``payload`` to the user's subscription; True on success"""
        outcome = await self.deliver_with_outcome(user_id, payload)
        return outcome == DeliveryOutcome.SENT

    async def deliver_with_outcome(
        self,
        user_id: int,
        payload: NotificationPayload
    ) -> DeliveryOutcome:
        subscription = self.registry.get(user_id)
        if subscription is None:
            logger.warning(f"No subscription found for user {user_id}")
            return DeliveryOutcome.NO_SUBSCRIPTION

        if not self.enabled:
            logger.debug(f"Push disabled, dropping notification for user {user_id}")
            return DeliveryOutcome.NOT_CONFIGURED

        try:
            await asyncio.wait_for(
                asyncio.to_thread(
                    self._transport,
                    subscription_info=subscription.to_webpush(),
                    data=payload.to_json(),
                    vapid_private_key=self._private_key,
                    # pywebpush fills in aud/exp, so hand it a fresh dict
                    vapid_claims={"sub": self._claims_sub},
                    ttl=self._ttl,
                    timeout=self._timeout
                ),
                timeout=self._timeout
            )
        except WebPushException as e:
            status_code = getattr(getattr(e, "response", None), "status_code", None)
            if status_code in reminder_config.PERMANENT_FAILURE_STATUS_CODES:
                logger.warning(
                    f"Push endpoint gone for user {user_id} (HTTP {status_code}), unsubscribing"
                )
                await self._expire(user_id)
                return DeliveryOutcome.EXPIRED
            logger.error(f"Failed to send notification to user {user_id}: {e}")
            return DeliveryOutcome.FAILED
        except asyncio.TimeoutError:
            logger.error(f"Push delivery to user {user_id} timed out after {self._timeout}s")
            return DeliveryOutcome.FAILED
        except Exception as e:
            logger.error(f"Unexpected push error for user {user_id}: {e}")
            return DeliveryOutcome.FAILED

        logger.info(f"Notification sent successfully to user {user_id}: {payload.title}")
        return DeliveryOutcome.SENT

    async def _expire(self, user_id: int):
        self.registry.remove(user_id)
        if self._on_subscription_expired is not None:
            try:
                # Persists the unsubscribe, so keep it off the event loop
                await asyncio.to_thread(self._on_subscription_expired, user_id)
            except Exception as e:
                logger.error(f"Failed to persist unsubscribe for user {user_id}: {e}")
