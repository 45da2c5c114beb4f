"""
User Schemas - Pydantic models for account data validation and serialization.
"""
from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import UserRole


class RegisterRequest(BaseModel):
    """
    Registration Schema - Used for client self-registration

    Every new account starts with the client role; the personal fields are
    stored on its client profile.
    """
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1, max_length=10)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    image_url: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str
    user_id: str
    email: EmailStr
    email_sent: bool


class LoginRequest(BaseModel):
    """
    User Login Schema - Used for authentication

    Fields:
    - email: User's email address
    - password: User's plain text password
    """
    email: EmailStr
    password: str


class EmailRequest(BaseModel):
    """Body carrying only an email address (resend verification, password reset request)."""
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=1)


class UpgradeDoctorRequest(BaseModel):
    license_number: str = Field(..., min_length=1, max_length=50)
    specialization: str = Field(..., min_length=1, max_length=100)


class MessageResponse(BaseModel):
    message: str


class ClientProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    gender: str
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class DoctorProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    license_number: Optional[str] = None
    specialization: Optional[str] = None


class UserResponse(BaseModel):
    """
    User Response Schema - Account data enriched with its role profile

    ``profile`` holds the client profile for clients, the doctor profile for
    doctors and is null for administrators.
    """
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: EmailStr
    role: UserRole
    image_url: Optional[str] = None
    is_active: bool
    is_verified: bool
    created_at: datetime
    profile: Optional[Union[ClientProfileResponse, DoctorProfileResponse]] = Field(
        None, union_mode="left_to_right"
    )


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UpdateProfileRequest(BaseModel):
    """
    Profile update Schema - only the fields present in the body are written

    Account fields: email, image_url
    Client profile fields: first_name, last_name, gender, phone, address, date_of_birth
    Doctor profile fields: license_number, specialization
    """
    email: Optional[EmailStr] = None
    image_url: Optional[str] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    gender: Optional[str] = Field(None, min_length=1, max_length=10)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    license_number: Optional[str] = Field(None, min_length=1, max_length=50)
    specialization: Optional[str] = Field(None, max_length=100)


class UserStatusUpdate(BaseModel):
    is_active: bool
