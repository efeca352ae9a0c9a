"""User schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserResponse(BaseModel):
    """Public view of an account; secrets are never part of it."""

    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostedJobSummary(BaseModel):
    id: int
    title: str
    posting_date: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserResponse):
    jobs_posted: list[PostedJobSummary] = []


class UserUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
