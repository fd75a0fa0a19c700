"""
Dose Logs API Router
Endpoints for recording doses and reading today's progress
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.medication import DoseLogCreate, DoseLogResponse, DailyStats


router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("/", response_model=DoseLogResponse, status_code=status.HTTP_201_CREATED)
def create_log(
    log_data: DoseLogCreate,
    db: Session = Depends(get_db)
):
    """
    Record a dose as taken, missed or skipped

    A taken dose consumes one pill from the medication's supply.
    """
    medication_service = services.get_medication_service()

    try:
        return medication_service.log_dose(
            db,
            user_id=log_data.user_id,
            medication_id=log_data.medication_id,
            scheduled_time=log_data.scheduled_time,
            status=log_data.status,
            taken_time=log_data.taken_time,
            confidence=log_data.confidence,
            scanned_pill_type=log_data.scanned_pill_type
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/user/{user_id}", response_model=List[DoseLogResponse])
def get_logs(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    medication_service = services.get_medication_service()
    return medication_service.get_logs(db, user_id)


@router.get("/user/{user_id}/today", response_model=List[DoseLogResponse])
def get_today_logs(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    medication_service = services.get_medication_service()
    return medication_service.get_today_logs(db, user_id)


@router.get("/user/{user_id}/stats", response_model=DailyStats)
def get_stats(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Today's scheduled/taken/missed/pending counts and 7-day adherence
    """
    medication_service = services.get_medication_service()
    return medication_service.get_daily_stats(db, user_id)
