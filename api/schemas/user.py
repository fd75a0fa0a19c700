"""
User Schemas
Pydantic models for user-related API requests and responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from models import UserRole


class UserCreate(BaseModel):
    """Schema for creating a household member"""
    # Plain string so test and special-use domains are accepted
    email: str = Field(..., min_length=3, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.PATIENT


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
