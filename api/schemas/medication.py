"""
Medication Schemas
Pydantic models for medication and dose-log API requests and responses
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import DoseStatus


def _normalize_times(value: List[str]) -> List[str]:
    """Validate HH:MM dose times and drop duplicates, keeping order"""
    normalized: List[str] = []
    for raw in value:
        try:
            parsed = datetime.strptime(raw.strip(), "%H:%M")
        except ValueError:
            raise ValueError(f"Invalid time {raw!r}, expected HH:MM")
        canonical = parsed.strftime("%H:%M")
        if canonical not in normalized:
            normalized.append(canonical)
    if not normalized:
        raise ValueError("At least one schedule time is required")
    return normalized


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for adding a medication to a user's schedule"""
    user_id: int
    times: List[str] = Field(..., min_length=1)
    pill_type: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = None
    pills_remaining: int = Field(default=30, ge=0)
    refill_threshold: int = Field(default=7, ge=0)

    @field_validator("times")
    @classmethod
    def validate_times(cls, value: List[str]) -> List[str]:
        return _normalize_times(value)


class MedicationUpdate(BaseModel):
    """Schema for updating medication"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    times: Optional[List[str]] = None
    pill_type: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = None
    pills_remaining: Optional[int] = Field(None, ge=0)
    refill_threshold: Optional[int] = Field(None, ge=0)

    @field_validator("times")
    @classmethod
    def validate_times(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return _normalize_times(value)


class DoseLogCreate(BaseModel):
    """Schema for recording a dose outcome"""
    user_id: int
    medication_id: int
    scheduled_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    status: DoseStatus
    taken_time: Optional[datetime] = None
    confidence: Optional[int] = Field(None, ge=0, le=100)
    scanned_pill_type: Optional[str] = Field(None, max_length=100)


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: int
    user_id: int
    times: List[str]
    pill_type: Optional[str] = None
    image_url: Optional[str] = None
    pills_remaining: Optional[int] = None
    refill_threshold: Optional[int] = None
    last_refill_date: Optional[datetime] = None
    needs_refill: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DoseLogResponse(BaseModel):
    id: int
    user_id: int
    medication_id: Optional[int] = None
    medication_name: str
    scheduled_time: str
    taken_time: Optional[datetime] = None
    status: DoseStatus
    confidence: Optional[int] = None
    scanned_pill_type: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DailyStats(BaseModel):
    """Today's dose counts for a user"""
    total_scheduled_today: int
    taken_count: int
    missed_count: int
    pending_count: int
    adherence_rate: int
