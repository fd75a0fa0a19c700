"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
import models


def get_current_user_id(
    user_id: int,
    db: Session = Depends(get_db)
) -> int:
    """
    Validate user exists and return user ID
    """
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found"
        )

    return user_id


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_storage_service():
        from services.storage_service import storage_service
        return storage_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_caregiver_service():
        from services.caregiver_service import caregiver_service
        return caregiver_service

    @staticmethod
    def get_survey_service():
        from services.survey_service import survey_service
        return survey_service


# Service dependency instances
services = ServiceDependency()
