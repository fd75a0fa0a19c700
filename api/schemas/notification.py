"""
Notification Schemas
Pydantic models for push subscription endpoints
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from actions.state import PushSubscriptionInfo


class SubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class SubscribeRequest(BaseModel):
    """A browser PushSubscription plus the user it belongs to"""
    user_id: int
    endpoint: str = Field(..., min_length=1)
    expiration_time: Optional[int] = Field(None, alias="expirationTime")
    keys: SubscriptionKeys

    model_config = ConfigDict(populate_by_name=True)

    def to_subscription(self) -> PushSubscriptionInfo:
        return PushSubscriptionInfo(
            endpoint=self.endpoint,
            p256dh=self.keys.p256dh,
            auth=self.keys.auth,
            expiration_time=self.expiration_time
        )


class UnsubscribeRequest(BaseModel):
    user_id: int


class PublicKeyResponse(BaseModel):
    public_key: str = Field(..., alias="publicKey")

    model_config = ConfigDict(populate_by_name=True)


class NotificationResult(BaseModel):
    success: bool
    message: Optional[str] = None


class NotificationStatus(BaseModel):
    subscriptions: int
    vapid_configured: bool
    scheduler_running: bool
