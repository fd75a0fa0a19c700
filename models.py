"""
Database Models
SQLAlchemy ORM models for SmartAid
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Enum, Index, BigInteger, JSON, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from database import Base
from config import TableNames


# ==================== ENUMS ====================

class UserRole(str, PyEnum):
    """Household role of a user"""
    PATIENT = "patient"
    CAREGIVER = "caregiver"


class DoseStatus(str, PyEnum):
    """Outcome recorded for a scheduled dose"""
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


# ==================== MODELS ====================

class User(Base):
    """Household member who owns medications and a push subscription"""
    __tablename__ = TableNames.USERS

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(Enum(UserRole), default=UserRole.PATIENT, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="user", cascade="all, delete-orphan")
    medication_logs = relationship("MedicationLog", back_populates="user", cascade="all, delete-orphan")
    caregivers = relationship("Caregiver", back_populates="user", cascade="all, delete-orphan")
    surveys = relationship("MedicationSurvey", back_populates="user", cascade="all, delete-orphan")
    subscription = relationship(
        "NotificationSubscription",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Medication(Base):
    """Medication on a user's daily schedule"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)  # e.g., "10mg"
    pill_type = Column(String(100))  # e.g., "white-round"
    image_url = Column(Text)

    # Wall-clock dose times in server local time, e.g. ["08:00", "20:00"]
    times = Column(JSON, default=list, nullable=False)

    # Supply tracking
    pills_remaining = Column(Integer, default=30)
    refill_threshold = Column(Integer, default=7)
    last_refill_date = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="medications")
    logs = relationship("MedicationLog", back_populates="medication")

    __table_args__ = (
        Index("ix_medications_user", "user_id"),
    )

    @property
    def needs_refill(self) -> bool:
        if self.pills_remaining is None or self.refill_threshold is None:
            return False
        return 0 < self.pills_remaining <= self.refill_threshold


class MedicationLog(Base):
    """Record of a dose being taken, missed or skipped"""
    __tablename__ = TableNames.MEDICATION_LOGS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    medication_id = Column(Integer, ForeignKey("medications.id", ondelete="SET NULL"))

    medication_name = Column(String(255), nullable=False)
    scheduled_time = Column(String(5), nullable=False)  # "HH:MM"
    taken_time = Column(DateTime)
    status = Column(Enum(DoseStatus), nullable=False)

    # Pill scan details
    confidence = Column(Integer)
    scanned_pill_type = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="medication_logs")
    medication = relationship("Medication", back_populates="logs")
    survey = relationship(
        "MedicationSurvey",
        back_populates="medication_log",
        uselist=False,
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_medication_logs_user_created", "user_id", "created_at"),
    )


class NotificationSubscription(Base):
    """Browser push subscription; at most one per user"""
    __tablename__ = TableNames.NOTIFICATION_SUBSCRIPTIONS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    endpoint = Column(Text, nullable=False)
    p256dh = Column(Text, nullable=False)
    auth = Column(Text, nullable=False)
    expiration_time = Column(BigInteger)  # epoch milliseconds, as sent by the browser

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="subscription")


class Caregiver(Base):
    """Contact who helps a patient with their medications"""
    __tablename__ = TableNames.CAREGIVERS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    name = Column(String(255), nullable=False)
    relationship_type = Column("relationship", String(100), nullable=False)  # e.g., "daughter"
    phone = Column(String(50), nullable=False)
    email = Column(String(255))
    is_primary = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="caregivers")

    __table_args__ = (
        Index("ix_caregivers_user", "user_id"),
    )


class MedicationSurvey(Base):
    """How a patient felt after a logged dose; at most one per log"""
    __tablename__ = TableNames.MEDICATION_SURVEYS

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    medication_log_id = Column(
        Integer,
        ForeignKey("medication_logs.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )

    feeling_rating = Column(Integer, nullable=False)  # 1 (bad) to 5 (great)
    side_effects = Column(JSON, default=list, nullable=False)  # e.g., ["nausea"]
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="surveys")
    medication_log = relationship("MedicationLog", back_populates="survey")
