"""
Medication Service
Business logic for medication schedules, dose logs and daily stats
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

import models


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related operations
    """

    def add_medication(
        self,
        db: Session,
        user_id: int,
        name: str,
        dosage: str,
        times: List[str],
        pill_type: Optional[str] = None,
        image_url: Optional[str] = None,
        pills_remaining: int = 30,
        refill_threshold: int = 7
    ) -> models.Medication:
        """
        Add a medication to a user's schedule

        Args:
            db: Database session
            user_id: Owner of the medication
            name: Medication name
            dosage: Dosage text (e.g., "10mg")
            times: Distinct "HH:MM" dose times
            pill_type: Pill appearance used by the scanner
            image_url: Reference image of the pill
            pills_remaining: Current supply
            refill_threshold: Supply level that triggers refill reminders

        Returns:
            Created Medication object
        """
        user = db.query(models.User).filter(models.User.id == user_id).first()
        if not user:
            raise ValueError(f"User {user_id} not found")

        medication = models.Medication(
            user_id=user_id,
            name=name,
            dosage=dosage,
            times=list(times),
            pill_type=pill_type,
            image_url=image_url,
            pills_remaining=pills_remaining,
            refill_threshold=refill_threshold
        )

        db.add(medication)
        db.commit()
        db.refresh(medication)

        logger.info(f"Added medication {name} for user {user_id} at {', '.join(times)}")
        return medication

    def get_medication(self, db: Session, medication_id: int) -> Optional[models.Medication]:
        """Get medication by ID"""
        return db.query(models.Medication).filter(
            models.Medication.id == medication_id
        ).first()

    def get_user_medications(self, db: Session, user_id: int) -> List[models.Medication]:
        """Get all medications for a user"""
        return db.query(models.Medication).filter(
            models.Medication.user_id == user_id
        ).order_by(models.Medication.id).all()

    def update_medication(
        self,
        db: Session,
        medication_id: int,
        updates: Dict[str, Any]
    ) -> Optional[models.Medication]:
        """Apply a partial update; ownership cannot be changed"""
        medication = self.get_medication(db, medication_id)
        if not medication:
            return None

        updates = {k: v for k, v in updates.items() if k not in ("id", "user_id")}

        # A refill is recorded whenever the supply goes up
        new_supply = updates.get("pills_remaining")
        if new_supply is not None and new_supply > (medication.pills_remaining or 0):
            medication.last_refill_date = datetime.utcnow()

        for field, value in updates.items():
            setattr(medication, field, value)

        db.commit()
        db.refresh(medication)

        logger.info(f"Updated medication {medication_id}: {', '.join(updates.keys())}")
        return medication

    def delete_medication(self, db: Session, medication_id: int) -> bool:
        medication = self.get_medication(db, medication_id)
        if not medication:
            return False

        db.delete(medication)
        db.commit()
        logger.info(f"Deleted medication {medication_id}")
        return True

    # ==================== DOSE LOGS ====================

    def log_dose(
        self,
        db: Session,
        user_id: int,
        medication_id: int,
        scheduled_time: str,
        status: models.DoseStatus,
        taken_time: Optional[datetime] = None,
        confidence: Optional[int] = None,
        scanned_pill_type: Optional[str] = None
    ) -> models.MedicationLog:
        """Record a dose outcome and consume a pill when it was taken"""
        medication = self.get_medication(db, medication_id)
        if not medication or medication.user_id != user_id:
            raise ValueError(f"Medication {medication_id} not found for user {user_id}")

        log = models.MedicationLog(
            user_id=user_id,
            medication_id=medication_id,
            medication_name=medication.name,
            scheduled_time=scheduled_time,
            status=status,
            taken_time=taken_time or (datetime.utcnow() if status == models.DoseStatus.TAKEN else None),
            confidence=confidence,
            scanned_pill_type=scanned_pill_type
        )
        db.add(log)

        if status == models.DoseStatus.TAKEN and (medication.pills_remaining or 0) > 0:
            medication.pills_remaining -= 1

        db.commit()
        db.refresh(log)
        return log

    def get_logs(self, db: Session, user_id: int) -> List[models.MedicationLog]:
        return db.query(models.MedicationLog).filter(
            models.MedicationLog.user_id == user_id
        ).order_by(models.MedicationLog.created_at.desc()).all()

    def get_today_logs(
        self,
        db: Session,
        user_id: int,
        now: Optional[datetime] = None
    ) -> List[models.MedicationLog]:
        start_of_day = (now or datetime.utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
        return db.query(models.MedicationLog).filter(
            models.MedicationLog.user_id == user_id,
            models.MedicationLog.created_at >= start_of_day
        ).order_by(models.MedicationLog.created_at.desc()).all()

    # ==================== STATS ====================

    def get_daily_stats(
        self,
        db: Session,
        user_id: int,
        now: Optional[datetime] = None
    ) -> Dict[str, int]:
        """
        Today's dose counts and the 7-day adherence rate

        Doses are counted once per (medication, time) pair; pending doses
        are those already due but neither taken nor missed.
        """
        now = now or datetime.utcnow()
        current_minutes = now.hour * 60 + now.minute

        scheduled_today = set()
        due_so_far = set()
        for medication in self.get_user_medications(db, user_id):
            for dose_time in medication.times or []:
                key = (medication.id, dose_time)
                scheduled_today.add(key)
                try:
                    hour, minute = (int(part) for part in dose_time.split(":"))
                except (AttributeError, ValueError):
                    continue
                if hour * 60 + minute <= current_minutes:
                    due_so_far.add(key)

        today_logs = self.get_today_logs(db, user_id, now=now)
        taken = sum(1 for log in today_logs if log.status == models.DoseStatus.TAKEN)
        missed = sum(1 for log in today_logs if log.status == models.DoseStatus.MISSED)

        week_ago = now - timedelta(days=7)
        recent = db.query(models.MedicationLog).filter(
            models.MedicationLog.user_id == user_id,
            models.MedicationLog.created_at >= week_ago
        ).all()
        recent_taken = sum(1 for log in recent if log.status == models.DoseStatus.TAKEN)
        adherence_rate = round(recent_taken / len(recent) * 100) if recent else 100

        return {
            "total_scheduled_today": len(scheduled_today),
            "taken_count": taken,
            "missed_count": missed,
            "pending_count": max(0, len(due_so_far) - taken - missed),
            "adherence_rate": adherence_rate,
        }


# Singleton instance
medication_service = MedicationService()
