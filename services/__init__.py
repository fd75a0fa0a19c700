"""
Services Module
Business logic layer for the SmartAid application
"""

from services.storage_service import StorageService, storage_service
from services.medication_service import MedicationService, medication_service
from services.caregiver_service import CaregiverService, caregiver_service
from services.survey_service import SurveyService, survey_service
from services.reminder_service import ReminderService, reminder_service, get_reminder_service


__all__ = [
    # Service classes
    "StorageService",
    "MedicationService",
    "CaregiverService",
    "SurveyService",
    "ReminderService",
    # Singleton instances
    "storage_service",
    "medication_service",
    "caregiver_service",
    "survey_service",
    "reminder_service",
    "get_reminder_service",
]
