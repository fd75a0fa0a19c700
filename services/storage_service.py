"""
Storage Service
Users and push subscriptions, plus the read model used by the reminder engines
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, List, Optional

from sqlalchemy.orm import Session

from database import get_db_context
import models
from actions.state import (
    MedicationRecord,
    PushSubscriptionInfo,
    StoredSubscription,
    UserRecord,
)


logger = logging.getLogger(__name__)


def to_medication_record(medication: models.Medication) -> MedicationRecord:
    return MedicationRecord(
        id=medication.id,
        user_id=medication.user_id,
        name=medication.name,
        dosage=medication.dosage or "",
        times=list(medication.times or []),
        pills_remaining=medication.pills_remaining,
        refill_threshold=medication.refill_threshold
    )


def to_subscription_info(row: models.NotificationSubscription) -> PushSubscriptionInfo:
    return PushSubscriptionInfo(
        endpoint=row.endpoint,
        p256dh=row.p256dh,
        auth=row.auth,
        expiration_time=row.expiration_time
    )


class StorageService:
    """
    Service for user and subscription persistence.

    Implements the reminder engines' store contract (``list_all_users``,
    ``list_medications``, ``list_all_subscriptions``) over SQLAlchemy and
    hands back plain records, never ORM rows.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, db: Optional[Session] = None) -> Generator[Session, None, None]:
        if db is not None:
            yield db
            return

        if self._session_factory is None:
            with get_db_context() as session:
                yield session
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ==================== USERS ====================

    def create_user(
        self,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        role: models.UserRole = models.UserRole.PATIENT,
        db: Optional[Session] = None
    ) -> models.User:
        with self._session(db) as session:
            existing = session.query(models.User).filter(models.User.email == email).first()
            if existing:
                raise ValueError(f"User with email {email} already exists")

            user = models.User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role
            )
            session.add(user)
            session.commit()
            session.refresh(user)

            logger.info(f"Created {user.role.value} user {user.id}")
            return user

    def get_user(self, user_id: int, db: Optional[Session] = None) -> Optional[models.User]:
        with self._session(db) as session:
            return session.query(models.User).filter(models.User.id == user_id).first()

    def list_all_users(self) -> List[UserRecord]:
        with self._session() as session:
            return [
                UserRecord(id=u.id, email=u.email, role=u.role.value if u.role else "patient")
                for u in session.query(models.User).order_by(models.User.id).all()
            ]

    # ==================== MEDICATIONS (read model) ====================

    def list_medications(self, user_id: int) -> List[MedicationRecord]:
        with self._session() as session:
            rows = session.query(models.Medication).filter(
                models.Medication.user_id == user_id
            ).order_by(models.Medication.id).all()
            return [to_medication_record(m) for m in rows]

    # ==================== SUBSCRIPTIONS ====================

    def list_all_subscriptions(self) -> List[StoredSubscription]:
        with self._session() as session:
            return [
                StoredSubscription(user_id=row.user_id, subscription=to_subscription_info(row))
                for row in session.query(models.NotificationSubscription).all()
            ]

    def get_subscription(
        self,
        user_id: int,
        db: Optional[Session] = None
    ) -> Optional[PushSubscriptionInfo]:
        with self._session(db) as session:
            row = session.query(models.NotificationSubscription).filter(
                models.NotificationSubscription.user_id == user_id
            ).first()
            return to_subscription_info(row) if row else None

    def upsert_subscription(
        self,
        user_id: int,
        subscription: PushSubscriptionInfo,
        db: Optional[Session] = None
    ) -> PushSubscriptionInfo:
        """Store the user's subscription, replacing any previous one"""
        with self._session(db) as session:
            row = session.query(models.NotificationSubscription).filter(
                models.NotificationSubscription.user_id == user_id
            ).first()

            if row is None:
                row = models.NotificationSubscription(user_id=user_id)
                session.add(row)

            row.endpoint = subscription.endpoint
            row.p256dh = subscription.p256dh
            row.auth = subscription.auth
            row.expiration_time = subscription.expiration_time

            session.commit()
            return subscription

    def delete_subscription(self, user_id: int, db: Optional[Session] = None) -> bool:
        with self._session(db) as session:
            deleted = session.query(models.NotificationSubscription).filter(
                models.NotificationSubscription.user_id == user_id
            ).delete()
            session.commit()
            return deleted > 0


# Singleton instance
storage_service = StorageService()
