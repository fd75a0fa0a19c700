"""
Medications API Router
Endpoints for medication schedules
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
def create_medication(
    medication_data: MedicationCreate,
    db: Session = Depends(get_db)
):
    """
    Add a medication to a user's schedule

    - **user_id**: Owner
    - **times**: Dose times as `HH:MM`, server local time
    - **pills_remaining** / **refill_threshold**: Supply tracking for refill reminders
    """
    medication_service = services.get_medication_service()

    try:
        return medication_service.add_medication(
            db,
            user_id=medication_data.user_id,
            name=medication_data.name,
            dosage=medication_data.dosage,
            times=medication_data.times,
            pill_type=medication_data.pill_type,
            image_url=medication_data.image_url,
            pills_remaining=medication_data.pills_remaining,
            refill_threshold=medication_data.refill_threshold
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/user/{user_id}", response_model=List[MedicationResponse])
def get_user_medications(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get all medications for a user
    """
    medication_service = services.get_medication_service()
    return medication_service.get_user_medications(db, user_id)


@router.get("/{medication_id}", response_model=MedicationResponse)
def get_medication(
    medication_id: int,
    db: Session = Depends(get_db)
):
    medication_service = services.get_medication_service()

    medication = medication_service.get_medication(db, medication_id)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )
    return medication


@router.patch("/{medication_id}", response_model=MedicationResponse)
def update_medication(
    medication_id: int,
    update_data: MedicationUpdate,
    db: Session = Depends(get_db)
):
    """
    Partially update a medication; raising `pills_remaining` records a refill
    """
    medication_service = services.get_medication_service()

    medication = medication_service.update_medication(
        db,
        medication_id,
        update_data.model_dump(exclude_unset=True)
    )
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )
    return medication


@router.delete("/{medication_id}")
def delete_medication(
    medication_id: int,
    db: Session = Depends(get_db)
):
    medication_service = services.get_medication_service()

    if not medication_service.delete_medication(db, medication_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medication {medication_id} not found"
        )
    return {"success": True}
