"""
Caregiver Service
Business logic for a patient's caregiver contacts
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

import models


logger = logging.getLogger(__name__)


# API field name -> model attribute
_FIELD_MAP = {"relationship": "relationship_type"}


class CaregiverService:
    """
    Service for caregiver contacts

    A patient may mark one caregiver as primary; marking another one
    primary demotes the previous one.
    """

    def add_caregiver(
        self,
        db: Session,
        user_id: int,
        name: str,
        relationship: str,
        phone: str,
        email: Optional[str] = None,
        is_primary: bool = False
    ) -> models.Caregiver:
        """
        Add a caregiver contact for a user

        Args:
            db: Database session
            user_id: Patient the caregiver helps
            name: Caregiver's name
            relationship: How they relate to the patient (e.g., "spouse")
            phone: Contact phone number
            email: Optional contact email
            is_primary: Whether this is the patient's main contact

        Returns:
            Created Caregiver object
        """
        user = db.query(models.User).filter(models.User.id == user_id).first()
        if not user:
            raise ValueError(f"User {user_id} not found")

        if is_primary:
            self._clear_primary(db, user_id)

        caregiver = models.Caregiver(
            user_id=user_id,
            name=name,
            relationship_type=relationship,
            phone=phone,
            email=email or None,
            is_primary=is_primary
        )
        db.add(caregiver)
        db.commit()
        db.refresh(caregiver)

        logger.info(f"Added caregiver {caregiver.id} for user {user_id}")
        return caregiver

    def get_caregiver(self, db: Session, caregiver_id: int) -> Optional[models.Caregiver]:
        return db.query(models.Caregiver).filter(
            models.Caregiver.id == caregiver_id
        ).first()

    def get_user_caregivers(self, db: Session, user_id: int) -> List[models.Caregiver]:
        """Primary caregiver first, then in the order they were added"""
        return db.query(models.Caregiver).filter(
            models.Caregiver.user_id == user_id
        ).order_by(models.Caregiver.is_primary.desc(), models.Caregiver.id).all()

    def update_caregiver(
        self,
        db: Session,
        caregiver_id: int,
        updates: Dict[str, Any]
    ) -> Optional[models.Caregiver]:
        caregiver = self.get_caregiver(db, caregiver_id)
        if not caregiver:
            return None

        updates = {k: v for k, v in updates.items() if k not in ("id", "user_id")}
        if updates.get("is_primary"):
            self._clear_primary(db, caregiver.user_id, keep_id=caregiver.id)

        for field, value in updates.items():
            setattr(caregiver, _FIELD_MAP.get(field, field), value)

        db.commit()
        db.refresh(caregiver)

        logger.info(f"Updated caregiver {caregiver_id}: {', '.join(updates.keys())}")
        return caregiver

    def delete_caregiver(self, db: Session, caregiver_id: int) -> bool:
        caregiver = self.get_caregiver(db, caregiver_id)
        if not caregiver:
            return False

        db.delete(caregiver)
        db.commit()
        logger.info(f"Deleted caregiver {caregiver_id}")
        return True

    def _clear_primary(self, db: Session, user_id: int, keep_id: Optional[int] = None):
        query = db.query(models.Caregiver).filter(
            models.Caregiver.user_id == user_id,
            models.Caregiver.is_primary.is_(True)
        )
        if keep_id is not None:
            query = query.filter(models.Caregiver.id != keep_id)
        for caregiver in query.all():
            caregiver.is_primary = False


# Singleton instance
caregiver_service = CaregiverService()
