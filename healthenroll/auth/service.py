"""
Authentication service layer for the credential lifecycle.

Registration, email verification, login, password reset, password change and
promotion to the doctor role. Every failure is raised as a tagged
``AppException``; the HTTP status is chosen by the global exception handler.
"""
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..clients.models import ClientProfile
from ..config import Settings
from ..core.email import Mailer
from ..core.security import (
    create_access_token,
    generate_secure_token,
    get_token_expiry_time,
    hash_password,
    utcnow,
    verify_password,
)
from ..doctors.models import DoctorProfile
from ..exceptions import (
    ConflictException,
    NotFoundException,
    UnauthorizedException,
    UnexpectedException,
    ValidationException,
)
from .models import User, UserRole, generate_user_id
from .schemas import RegisterRequest, UserResponse

# Set up logging
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Compared against when the email is unknown, so both login failures cost one bcrypt check
DUMMY_PASSWORD_HASH = hash_password("not-a-real-account")


def get_user_by_email(db: Session, email: str) -> User:
    return db.query(User).filter(User.email == email).first()


def license_number_taken(db: Session, license_number: str) -> bool:
    return db.query(DoctorProfile).filter(DoctorProfile.license_number == license_number).first() is not None


def get_user(db: Session, user_id: str) -> User:
    """
    Get an account by its public id.

    Raises:
        NotFoundException: If no account has this id
    """
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundException("User not found")
    return user


async def register_user(
    db: Session,
    settings: Settings,
    mailer: Mailer,
    data: RegisterRequest,
) -> Dict[str, Any]:
    """
    Register a new client account.

    The account and its client profile are written in one transaction. The
    verification email is sent after the commit; if sending fails the account
    is kept and the caller is told to use resend verification.

    Args:
        db: Database session
        settings: Application settings (token lifetime)
        mailer: Mailer used for the verification email
        data: Registration payload

    Returns:
        Dict with registration message, new user id and whether the email went out

    Raises:
        ConflictException: If the email is already registered
    """
    logger.info(f"Registration attempt for email: {data.email}")

    if get_user_by_email(db, data.email):
        logger.warning(f"Registration failed: Email {data.email} already registered")
        raise ConflictException("User with this email already exists")

    verification_token = generate_secure_token()
    user = User(
        user_id=generate_user_id(),
        email=data.email,
        password_hash=hash_password(data.password),
        role=UserRole.CLIENT,
        image_url=data.image_url,
        is_active=True,
        is_verified=False,
    )
    user.set_verification_token(
        verification_token, get_token_expiry_time(settings.verification_token_expire_hours)
    )
    user.client_profile = ClientProfile(
        first_name=data.first_name,
        last_name=data.last_name,
        date_of_birth=data.date_of_birth,
        gender=data.gender,
        phone=data.phone,
        address=data.address,
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        db.rollback()
        logger.warning(f"Registration failed: Email {data.email} registered concurrently")
        raise ConflictException("User with this email already exists")
    db.refresh(user)
    logger.info(f"Client account created: {user.user_id}")

    email_sent = True
    try:
        await mailer.send_verification_email(
            user.email, verification_token, settings.verification_token_expire_hours
        )
    except Exception as e:
        email_sent = False
        logger.error(f"Failed to send verification email to {user.email}: {str(e)}")

    if email_sent:
        message = "User registered successfully. Please check your email for verification link."
    else:
        message = "User registered but the verification email could not be sent. Please use resend verification."

    return {
        "message": message,
        "user_id": user.user_id,
        "email": user.email,
        "email_sent": email_sent,
    }


async def verify_account(db: Session, token: str) -> Dict[str, Any]:
    """
    Verify an account with the token from the verification link.

    Only a matching token whose expiry is still in the future is accepted.
    The token is cleared on success, so it cannot be used twice.

    Raises:
        UnauthorizedException: If the token is unknown or expired
    """
    user = None
    if token:
        user = (
            db.query(User)
            .filter(
                User.verification_token == token,
                User.verification_token_expires_at > utcnow(),
            )
            .first()
        )
    if not user:
        logger.warning("Verification failed: invalid or expired token")
        raise UnauthorizedException("Invalid or expired verification token")

    if user.is_verified:
        logger.info(f"Account already verified: {user.email}")
        return {"message": "User is already verified"}

    user.is_verified = True
    user.clear_verification_token()
    db.commit()
    logger.info(f"Account verified: {user.email}")
    return {"message": "Account successfully verified!"}


async def resend_verification(
    db: Session,
    settings: Settings,
    mailer: Mailer,
    email: str,
) -> Dict[str, Any]:
    """
    Issue a fresh verification token and email it.

    Raises:
        NotFoundException: If no account uses this email
        ValidationException: If the account is already verified
        UnexpectedException: If the email cannot be sent
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.warning(f"Resend verification failed: Email {email} not found")
        raise NotFoundException("User not found")
    if user.is_verified:
        raise ValidationException("User is already verified")

    token = generate_secure_token()
    user.set_verification_token(token, get_token_expiry_time(settings.verification_token_expire_hours))
    db.commit()

    try:
        await mailer.send_verification_email(email, token, settings.verification_token_expire_hours)
    except Exception as e:
        logger.error(f"Failed to resend verification email to {email}: {str(e)}")
        raise UnexpectedException("Verification email could not be sent")

    logger.info(f"Verification email re-sent to {email}")
    return {"message": "Verification email sent"}


async def login_user(db: Session, settings: Settings, email: str, password: str) -> Dict[str, Any]:
    """
    Authenticate a user and generate an access token.

    Unknown email and wrong password give the same message. Account state
    (unverified, deactivated) is only reported once the password matched.

    Returns:
        Dict with access token and the profile-enriched user

    Raises:
        UnauthorizedException: If credentials are invalid or the account cannot log in
    """
    user = get_user_by_email(db, email)
    if not user:
        verify_password(password, DUMMY_PASSWORD_HASH)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise UnauthorizedException(INVALID_CREDENTIALS)

    if not user.is_verified:
        logger.warning(f"Login failed: Unverified account {email}")
        raise UnauthorizedException("Please verify your email before logging in")

    if not user.is_active:
        logger.warning(f"Login failed: Deactivated account {email}")
        raise UnauthorizedException("Account is deactivated")

    access_token = create_access_token(
        {"user_id": user.user_id, "email": user.email, "role": user.role.value},
        settings,
    )
    logger.info(f"Login successful: User {user.user_id} ({email})")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }


async def request_password_reset(
    db: Session,
    settings: Settings,
    mailer: Mailer,
    email: str,
) -> Dict[str, Any]:
    """
    Store a password reset token and email the reset link.

    Raises:
        NotFoundException: If no account uses this email
        UnexpectedException: If the email cannot be sent
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.warning(f"Password reset requested for unknown email {email}")
        raise NotFoundException("User not found")

    reset_token = generate_secure_token()
    expires_at = get_token_expiry_time(settings.password_reset_token_expire_hours)
    user.set_password_reset_token(reset_token, expires_at)
    db.commit()

    try:
        await mailer.send_password_reset_email(email, reset_token, expires_at)
    except Exception as e:
        logger.error(f"Failed to send password reset email to {email}: {str(e)}")
        raise UnexpectedException("Password reset email could not be sent")

    logger.info(f"Password reset link sent to {email}")
    return {"message": "Password reset link sent to your email"}


async def reset_password(
    db: Session,
    mailer: Mailer,
    token: str,
    new_password: str,
) -> Dict[str, Any]:
    """
    Set a new password using a reset token.

    The token must match and its stored expiry must be strictly in the future.

    Raises:
        UnauthorizedException: If the token is missing, unknown or expired
    """
    user = None
    if token:
        user = (
            db.query(User)
            .filter(
                User.password_reset_token == token,
                User.password_reset_expires_at > utcnow(),
            )
            .first()
        )
    if not user:
        logger.warning("Password reset failed: invalid or expired token")
        raise UnauthorizedException("Invalid or expired token")

    user.password_hash = hash_password(new_password)
    user.clear_password_reset_token()
    db.commit()
    logger.info(f"Password reset completed for {user.email}")

    try:
        await mailer.send_password_changed_notification(user.email)
    except Exception as e:
        logger.error(f"Failed to send password changed notification to {user.email}: {str(e)}")

    return {"message": "Password updated successfully"}


async def change_password(
    db: Session,
    user_id: str,
    current_password: str,
    new_password: str,
) -> Dict[str, Any]:
    """
    Change the password of an account that knows its current password.

    Raises:
        NotFoundException: If the account does not exist
        UnauthorizedException: If the current password is incorrect
    """
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        logger.warning(f"Password change failed: wrong current password for {user.user_id}")
        raise UnauthorizedException("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info(f"User {user.user_id} changed their password")
    return {"message": "Password changed successfully"}


async def upgrade_to_doctor(
    db: Session,
    user_id: str,
    license_number: str,
    specialization: str,
) -> Dict[str, Any]:
    """
    Promote a client account to the doctor role.

    The role change and the new doctor profile are committed together. The
    client profile is left in place.

    Raises:
        NotFoundException: If the account does not exist
        ValidationException: If the account is not a client
        ConflictException: If the license number is already registered
    """
    user = get_user(db, user_id)
    if user.role != UserRole.CLIENT:
        logger.warning(f"Upgrade rejected: {user.user_id} has role {user.role.value}")
        raise ValidationException("Only clients can be upgraded to doctors")

    if license_number_taken(db, license_number):
        raise ConflictException("License number already registered")

    user.role = UserRole.DOCTOR
    user.doctor_profile = DoctorProfile(license_number=license_number, specialization=specialization)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Upgrade of {user_id} failed on a duplicate doctor profile")
        raise ConflictException("License number already registered")

    logger.info(f"User {user_id} upgraded to doctor")
    return {"message": "User upgraded to doctor successfully"}


def bootstrap_admin_if_needed(db: Session, settings: Settings) -> bool:
    """
    Create the first admin account from the bootstrap settings.

    Nothing happens if an admin already exists, the bootstrap credentials are
    not configured, or the email is taken.

    Returns:
        bool: True if an admin was created
    """
    if db.query(User).filter(User.role == UserRole.ADMIN).first():
        logger.info("Admin account found. Bootstrap not needed.")
        return False

    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.warning(
            "No admin account exists. Set BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD to create one."
        )
        return False

    if get_user_by_email(db, settings.bootstrap_admin_email):
        logger.warning(f"Bootstrap failed: Email {settings.bootstrap_admin_email} already exists")
        return False

    admin = User(
        email=settings.bootstrap_admin_email,
        password_hash=hash_password(settings.bootstrap_admin_password),
        role=UserRole.ADMIN,
        is_active=True,
        is_verified=True,
    )
    db.add(admin)
    db.commit()
    logger.info(f"Bootstrap admin created: {admin.email}")
    return True
