"""
Health Program Model - Catalog of programs clients can enroll in.
"""
import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base


class ProgramDifficulty(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


def generate_program_id() -> str:
    """Return a new opaque public program id."""
    return f"PROG-{uuid.uuid4().hex[:12].upper()}"


class HealthProgram(Base):
    """
    Health Program Model

    Fields:
    - id: Surrogate primary key
    - program_id: Opaque public identifier
    - name: Program name
    - description: Optional long description
    - image_url: Optional cover image
    - duration: Free-form duration label (e.g. "6 weeks")
    - difficulty: Beginner, Intermediate or Advanced
    - is_active: Whether new enrollments are accepted
    - created_at: When the program was created
    """
    __tablename__ = "health_programs"

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(String(50), unique=True, nullable=False, default=generate_program_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(255), nullable=True)
    duration = Column(String(50), nullable=True)
    difficulty = Column(Enum(ProgramDifficulty), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    enrollments = relationship("Enrollment", back_populates="program", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<HealthProgram(program_id='{self.program_id}', name='{self.name}', active={self.is_active})>"
