"""
Doctor Model - Stores doctor-specific information.

A doctor profile is created when a client account is promoted to the doctor role.
"""
from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base


class DoctorProfile(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - user_id: Foreign key to User.user_id
    - license_number: Unique medical license number
    - specialization: Doctor's medical specialization
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(50), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    license_number = Column(String(50), unique=True, nullable=True)
    specialization = Column(String(100), nullable=True)

    # Relationships
    user = relationship("User", back_populates="doctor_profile")

    def __repr__(self):
        """String representation of the DoctorProfile model"""
        return f"<DoctorProfile(id={self.id}, user_id='{self.user_id}', specialization='{self.specialization}')>"
