"""
Surveys API Router
Post-dose check-ins
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.survey import SurveyCreate, SurveyResponse


router = APIRouter(prefix="/surveys", tags=["surveys"])


@router.post("/", response_model=SurveyResponse, status_code=status.HTTP_201_CREATED)
def create_survey(
    survey_data: SurveyCreate,
    db: Session = Depends(get_db)
):
    """
    Answer the check-in for a logged dose

    - **feeling_rating**: 1 (bad) to 5 (great)
    - **side_effects**: free-text symptoms, e.g. `["nausea"]`
    """
    survey_service = services.get_survey_service()

    try:
        return survey_service.create_survey(
            db,
            user_id=survey_data.user_id,
            medication_log_id=survey_data.medication_log_id,
            feeling_rating=survey_data.feeling_rating,
            side_effects=survey_data.side_effects,
            notes=survey_data.notes
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/user/{user_id}", response_model=List[SurveyResponse])
def get_user_surveys(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    survey_service = services.get_survey_service()
    return survey_service.get_user_surveys(db, user_id)


@router.get("/user/{user_id}/log/{medication_log_id}", response_model=SurveyResponse)
def get_survey_for_log(
    medication_log_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    survey_service = services.get_survey_service()

    survey = survey_service.get_survey_by_log(db, user_id, medication_log_id)
    if not survey:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No survey for dose log {medication_log_id}"
        )
    return survey
