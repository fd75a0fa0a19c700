"""
Notifications API Router
Push subscription management and test notifications
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id
from api.schemas.notification import (
    SubscribeRequest,
    UnsubscribeRequest,
    PublicKeyResponse,
    NotificationResult,
    NotificationStatus,
)
from services.reminder_service import ReminderService, get_reminder_service


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/vapid-public-key", response_model=PublicKeyResponse)
def get_vapid_public_key(
    reminders: ReminderService = Depends(get_reminder_service)
):
    """
    VAPID public key the browser needs to create a push subscription
    """
    public_key = reminders.get_public_key()
    if not public_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="VAPID public key not configured"
        )
    return PublicKeyResponse(public_key=public_key)


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
def subscribe(
    request: SubscribeRequest,
    db: Session = Depends(get_db),
    reminders: ReminderService = Depends(get_reminder_service)
):
    """
    Store a user's push subscription, replacing any previous one
    """
    get_current_user_id(request.user_id, db)
    reminders.add_subscription(request.user_id, request.to_subscription(), db=db)
    return {"success": True}


@router.post("/unsubscribe")
def unsubscribe(
    request: UnsubscribeRequest,
    db: Session = Depends(get_db),
    reminders: ReminderService = Depends(get_reminder_service)
):
    reminders.remove_subscription(request.user_id, db=db)
    return {"success": True}


@router.post("/test/{user_id}", response_model=NotificationResult)
async def send_test_notification(
    user_id: int = Depends(get_current_user_id),
    reminders: ReminderService = Depends(get_reminder_service)
):
    if not await reminders.send_test_notification(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to send notification. Make sure notifications are enabled."
        )
    return NotificationResult(success=True, message="Test notification sent successfully!")


@router.post("/test-refill/{user_id}", response_model=NotificationResult)
async def send_test_refill_reminder(
    user_id: int = Depends(get_current_user_id),
    reminders: ReminderService = Depends(get_reminder_service)
):
    if not await reminders.send_test_refill_reminder(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to send refill reminder. Make sure notifications are enabled."
        )
    return NotificationResult(success=True, message="Refill reminder sent successfully!")


@router.get("/status", response_model=NotificationStatus)
def get_status(
    reminders: ReminderService = Depends(get_reminder_service)
):
    return NotificationStatus(
        subscriptions=reminders.subscription_count(),
        vapid_configured=reminders.dispatcher.enabled,
        scheduler_running=reminders.running
    )
