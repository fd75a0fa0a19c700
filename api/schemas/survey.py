"""
Survey Schemas
Pydantic models for post-dose check-ins
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class SurveyCreate(BaseModel):
    """Schema for answering the check-in after a dose"""
    user_id: int
    medication_log_id: int
    feeling_rating: int = Field(..., ge=1, le=5)
    side_effects: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=2000)


class SurveyResponse(BaseModel):
    id: int
    user_id: int
    medication_log_id: int
    feeling_rating: int
    side_effects: List[str]
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
