"""
User Model - Stores login-capable accounts and their credential lifecycle state.

Each account has exactly one role. Role-specific data lives in the client and
doctor profile tables, keyed by the account's public ``user_id``.
"""
import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the health program system.

    Roles:
    - CLIENT: Self-registered users who enroll in programs
    - DOCTOR: Clients promoted to practitioners; may manage programs
    - ADMIN: System administrators with full access
    """
    CLIENT = "client"
    DOCTOR = "doctor"
    ADMIN = "admin"


def generate_user_id() -> str:
    """Return a new opaque public account id."""
    return f"USER-{uuid.uuid4().hex[:12].upper()}"


class User(Base):
    """
    User Model - Stores all account information in the system

    Fields:
    - id: Surrogate primary key
    - user_id: Opaque public identifier used in URLs and tokens
    - email: Unique email address for login and communication
    - password_hash: bcrypt hash (never store raw passwords)
    - role: client, doctor or admin
    - image_url: Optional profile picture URL
    - is_active: False once an administrator deactivates the account
    - is_verified: Whether the email address has been verified
    - verification_token / verification_token_expires_at: set and cleared together
    - password_reset_token / password_reset_expires_at: set and cleared together
    - created_at: Timestamp when the account was created
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(50), unique=True, nullable=False, default=generate_user_id)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CLIENT, nullable=False, index=True)
    image_url = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String(255), nullable=True, index=True)
    verification_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    password_reset_token = Column(String(255), nullable=True, index=True)
    password_reset_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    client_profile = relationship(
        "ClientProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    doctor_profile = relationship(
        "DoctorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(user_id='{self.user_id}', email='{self.email}', role='{self.role}')>"

    @property
    def profile(self):
        """Role-specific profile: client profile for clients, doctor profile for doctors."""
        if self.role == UserRole.CLIENT:
            return self.client_profile
        if self.role == UserRole.DOCTOR:
            return self.doctor_profile
        return None

    def set_verification_token(self, token, expires_at) -> None:
        self.verification_token = token
        self.verification_token_expires_at = expires_at

    def clear_verification_token(self) -> None:
        self.set_verification_token(None, None)

    def set_password_reset_token(self, token, expires_at) -> None:
        self.password_reset_token = token
        self.password_reset_expires_at = expires_at

    def clear_password_reset_token(self) -> None:
        self.set_password_reset_token(None, None)
