"""
Authentication routes: registration, verification, login and password reset.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.email import Mailer, get_mailer
from ..database import get_db
from .dependencies import get_current_active_user
from .models import User
from .schemas import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UserResponse,
)
from .service import (
    login_user,
    register_user,
    request_password_reset,
    resend_verification,
    reset_password,
    verify_account,
)

# Create API router
router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED, summary="Client Self-Registration")
async def register_route(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Client self-registration endpoint.

    Creates a client account with its profile and emails a verification link
    valid for 12 hours. The account cannot log in until it is verified.
    """
    return await register_user(db, settings, mailer, data)


@router.post("/login", response_model=LoginResponse, summary="User Login")
async def login_route(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    User login endpoint.

    Returns a bearer token and the user enriched with its role profile.
    """
    return await login_user(db, settings, login_data.email, login_data.password)


@router.get("/verify-account", response_model=MessageResponse, summary="Verify Email Address")
async def verify_account_route(
    token: str = Query("", description="Token from the verification link"),
    db: Session = Depends(get_db),
):
    """
    Email verification endpoint used by the link in the verification email.
    """
    return await verify_account(db, token)


@router.post("/resend-verification", response_model=MessageResponse, summary="Resend Verification Email")
async def resend_verification_route(
    data: EmailRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Issue a new verification link for an unverified account.
    """
    return await resend_verification(db, settings, mailer, data.email)


@router.post("/request-password-reset", response_model=MessageResponse, summary="Request Password Reset")
async def request_password_reset_route(
    data: EmailRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Email a password reset link valid for one hour.
    """
    return await request_password_reset(db, settings, mailer, data.email)


@router.post("/reset-password", response_model=MessageResponse, summary="Reset Password with Token")
async def reset_password_route(
    data: ResetPasswordRequest,
    token: str = Query("", description="Token from the password reset link"),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Reset password endpoint. The token comes from the query string, the new
    password from the body.
    """
    return await reset_password(db, mailer, token, data.new_password)


@router.get("/me", response_model=UserResponse, summary="Get Current User Profile")
async def get_current_user_profile(current_user: User = Depends(get_current_active_user)):
    """
    Get the authenticated user's account and profile.
    """
    return current_user
