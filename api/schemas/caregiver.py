"""
Caregiver Schemas
Pydantic models for caregiver contacts
"""

from typing import Optional
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, ConfigDict


# ==================== CAREGIVERS ====================

class CaregiverCreate(BaseModel):
    """Schema for adding a caregiver contact"""
    user_id: int
    name: str = Field(..., min_length=2, max_length=255)
    relationship: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=10, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    is_primary: bool = False


class CaregiverUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    relationship: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=10, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    is_primary: Optional[bool] = None


class CaregiverResponse(BaseModel):
    id: int
    user_id: int
    name: str
    # Stored as relationship_type on the model
    relationship: str = Field(validation_alias=AliasChoices("relationship", "relationship_type"))
    phone: str
    email: Optional[str] = None
    is_primary: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
