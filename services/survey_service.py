"""
Survey Service
Post-dose check-ins: how the patient felt and any side effects
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

import models


logger = logging.getLogger(__name__)


class SurveyService:
    """
    Service for medication surveys

    Each survey answers one dose log of the same user, and a log can be
    answered only once.
    """

    def create_survey(
        self,
        db: Session,
        user_id: int,
        medication_log_id: int,
        feeling_rating: int,
        side_effects: Optional[List[str]] = None,
        notes: Optional[str] = None
    ) -> models.MedicationSurvey:
        log = db.query(models.MedicationLog).filter(
            models.MedicationLog.id == medication_log_id
        ).first()
        if not log or log.user_id != user_id:
            raise ValueError(f"Dose log {medication_log_id} not found for user {user_id}")

        if self.get_survey_by_log(db, user_id, medication_log_id):
            raise ValueError(f"Dose log {medication_log_id} already has a survey")

        survey = models.MedicationSurvey(
            user_id=user_id,
            medication_log_id=medication_log_id,
            feeling_rating=feeling_rating,
            side_effects=list(side_effects or []),
            notes=notes
        )
        db.add(survey)
        db.commit()
        db.refresh(survey)

        if survey.side_effects:
            logger.info(
                f"User {user_id} reported side effects after {log.medication_name}: "
                f"{', '.join(survey.side_effects)}"
            )
        return survey

    def get_user_surveys(self, db: Session, user_id: int) -> List[models.MedicationSurvey]:
        """Newest first"""
        return db.query(models.MedicationSurvey).filter(
            models.MedicationSurvey.user_id == user_id
        ).order_by(models.MedicationSurvey.created_at.desc(), models.MedicationSurvey.id.desc()).all()

    def get_survey_by_log(
        self,
        db: Session,
        user_id: int,
        medication_log_id: int
    ) -> Optional[models.MedicationSurvey]:
        return db.query(models.MedicationSurvey).filter(
            models.MedicationSurvey.medication_log_id == medication_log_id,
            models.MedicationSurvey.user_id == user_id
        ).first()


# Singleton instance
survey_service = SurveyService()
