"""
Enrollment Model - Association between an account and a health program.

The (user_id, program_id) pair is the primary key, so the database itself
rejects a second enrollment of the same account in the same program.
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    INACTIVE = "inactive"


class Enrollment(Base):
    """
    Enrollment Model

    Fields:
    - user_id: Foreign key to User.user_id (part of the primary key)
    - program_id: Foreign key to HealthProgram.program_id (part of the primary key)
    - status: active, completed or inactive
    - progress: Completion percentage, 0-100
    - notes: Optional free text
    - enrolled_at / completed_at / last_accessed_at: lifecycle timestamps
    """
    __tablename__ = "enrollments"

    user_id = Column(
        String(50), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True, index=True
    )
    program_id = Column(
        String(50), ForeignKey("health_programs.program_id", ondelete="CASCADE"), primary_key=True
    )
    status = Column(Enum(EnrollmentStatus), default=EnrollmentStatus.ACTIVE, nullable=False)
    progress = Column(Integer, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    last_accessed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="enrollments")
    program = relationship("HealthProgram", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(user_id='{self.user_id}', program_id='{self.program_id}', status='{self.status}')>"

    @property
    def is_completed(self) -> bool:
        return self.status == EnrollmentStatus.COMPLETED

    def touch(self) -> None:
        """Record an access to the enrollment."""
        self.last_accessed_at = datetime.now(timezone.utc)

    def mark_completed(self) -> None:
        """Complete the enrollment: status, progress and timestamps."""
        now = datetime.now(timezone.utc)
        self.status = EnrollmentStatus.COMPLETED
        self.progress = 100
        self.completed_at = now
        self.last_accessed_at = now
