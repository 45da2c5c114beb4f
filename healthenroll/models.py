"""
Import every model so relationships resolve and ``Base.metadata`` knows all tables.
"""
from .auth.models import User, UserRole
from .clients.models import ClientProfile
from .database import Base
from .doctors.models import DoctorProfile
from .enrollments.models import Enrollment, EnrollmentStatus
from .programs.models import HealthProgram, ProgramDifficulty

__all__ = [
    "Base",
    "ClientProfile",
    "DoctorProfile",
    "Enrollment",
    "EnrollmentStatus",
    "HealthProgram",
    "ProgramDifficulty",
    "User",
    "UserRole",
]
