"""
Tools Package
Delivery tools for the SmartAid reminder system
"""

from .notification_service import (
    NotificationDispatcher,
    NotificationPayload,
    NotificationType,
    DeliveryOutcome,
    NOTIFICATION_TEMPLATES
)

__all__ = [
    "NotificationDispatcher",
    "NotificationPayload",
    "NotificationType",
    "DeliveryOutcome",
    "NOTIFICATION_TEMPLATES"
]
