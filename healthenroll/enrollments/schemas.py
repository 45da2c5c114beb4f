"""
Enrollment Schemas - Pydantic models for enrollment requests and responses.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..programs.schemas import ProgramSummary
from .models import EnrollmentStatus


class EnrollmentCreate(BaseModel):
    """Enroll a given user; used by doctors and admins."""
    user_id: str
    program_id: str
    notes: Optional[str] = None


class SelfEnrollmentRequest(BaseModel):
    notes: Optional[str] = None


class EnrollmentUpdate(BaseModel):
    """
    Enrollment update Schema - only the fields present in the body are written
    """
    status: Optional[EnrollmentStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    program_id: str
    status: EnrollmentStatus
    progress: int
    notes: Optional[str] = None
    is_completed: bool
    enrolled_at: datetime
    completed_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None
    program: Optional[ProgramSummary] = None
