"""
Caregivers API Router
Endpoints for a patient's caregiver contacts
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.caregiver import CaregiverCreate, CaregiverUpdate, CaregiverResponse


router = APIRouter(prefix="/caregivers", tags=["caregivers"])


@router.post("/", response_model=CaregiverResponse, status_code=status.HTTP_201_CREATED)
def create_caregiver(
    caregiver_data: CaregiverCreate,
    db: Session = Depends(get_db)
):
    """
    Add a caregiver contact

    - **relationship**: e.g. `spouse`, `daughter`, `friend`
    - **is_primary**: the main contact; replaces any previous primary caregiver
    """
    caregiver_service = services.get_caregiver_service()

    try:
        return caregiver_service.add_caregiver(
            db,
            user_id=caregiver_data.user_id,
            name=caregiver_data.name,
            relationship=caregiver_data.relationship,
            phone=caregiver_data.phone,
            email=caregiver_data.email,
            is_primary=caregiver_data.is_primary
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/user/{user_id}", response_model=List[CaregiverResponse])
def get_user_caregivers(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    caregiver_service = services.get_caregiver_service()
    return caregiver_service.get_user_caregivers(db, user_id)


@router.patch("/{caregiver_id}", response_model=CaregiverResponse)
def update_caregiver(
    caregiver_id: int,
    update_data: CaregiverUpdate,
    db: Session = Depends(get_db)
):
    caregiver_service = services.get_caregiver_service()

    caregiver = caregiver_service.update_caregiver(
        db,
        caregiver_id,
        update_data.model_dump(exclude_unset=True)
    )
    if not caregiver:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Caregiver {caregiver_id} not found"
        )
    return caregiver


@router.delete("/{caregiver_id}")
def delete_caregiver(
    caregiver_id: int,
    db: Session = Depends(get_db)
):
    caregiver_service = services.get_caregiver_service()

    if not caregiver_service.delete_caregiver(db, caregiver_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Caregiver {caregiver_id} not found"
        )
    return {"success": True}
