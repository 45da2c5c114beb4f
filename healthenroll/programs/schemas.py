"""
Health Program Schemas - Pydantic models for program data validation and serialization.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import ProgramDifficulty


class ProgramCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Program name")
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=255)
    duration: Optional[str] = Field(None, max_length=50, description="e.g. '6 weeks'")
    difficulty: Optional[ProgramDifficulty] = None


class ProgramUpdate(BaseModel):
    """
    Program update Schema - only the fields present in the body are written
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=255)
    duration: Optional[str] = Field(None, max_length=50)
    difficulty: Optional[ProgramDifficulty] = None
    is_active: Optional[bool] = None


class ProgramResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    program_id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    duration: Optional[str] = None
    difficulty: Optional[ProgramDifficulty] = None
    is_active: bool
    created_at: datetime


class ProgramSummary(BaseModel):
    """Program fields embedded in enrollment listings."""
    model_config = ConfigDict(from_attributes=True)

    program_id: str
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    duration: Optional[str] = None
    difficulty: Optional[ProgramDifficulty] = None
