"""
User Service - Profile reads and writes, search and account administration.
"""
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.models import User, UserRole
from ..auth.schemas import UpdateProfileRequest
from ..auth.service import get_user, get_user_by_email, license_number_taken
from ..exceptions import ConflictException, ValidationException

# Set up logging
logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = ("email", "image_url")
CLIENT_FIELDS = ("first_name", "last_name", "gender", "date_of_birth", "phone", "address")
REQUIRED_CLIENT_FIELDS = ("first_name", "last_name", "gender")
DOCTOR_FIELDS = ("license_number", "specialization")


def get_user_profile(db: Session, user_id: str) -> User:
    """
    Get an account together with its role profile.

    Raises:
        NotFoundException: If the account does not exist
    """
    return get_user(db, user_id)


def update_user_profile(db: Session, user_id: str, profile_data: UpdateProfileRequest) -> User:
    """
    Update account and role-profile fields.

    Only fields present in the request are written. Fields that belong to a
    different role than the account's are ignored. All checks run before any
    field is changed.

    Raises:
        NotFoundException: If the account does not exist
        ValidationException: If a required field is set to null
        ConflictException: If the new email or license number is already in use
    """
    user = get_user(db, user_id)
    update_data = profile_data.model_dump(exclude_unset=True)

    if "email" in update_data:
        new_email = update_data["email"]
        if new_email is None:
            raise ValidationException("Email cannot be empty")
        if new_email != user.email and get_user_by_email(db, new_email):
            raise ConflictException("Email already in use")

    profile, profile_fields = None, ()
    if user.role == UserRole.CLIENT and user.client_profile:
        profile, profile_fields = user.client_profile, CLIENT_FIELDS
        for field in REQUIRED_CLIENT_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValidationException(f"{field} cannot be empty")
    elif user.role == UserRole.DOCTOR and user.doctor_profile:
        profile, profile_fields = user.doctor_profile, DOCTOR_FIELDS
        new_license = update_data.get("license_number")
        if new_license and new_license != profile.license_number:
            if license_number_taken(db, new_license):
                raise ConflictException("License number already registered")

    for field in ACCOUNT_FIELDS:
        if field in update_data:
            setattr(user, field, update_data[field])
    for field in profile_fields:
        if field in update_data:
            setattr(profile, field, update_data[field])

    try:
        db.commit()
    except IntegrityError:
        # Another request took the email or license number after the checks above
        db.rollback()
        logger.warning(f"Profile update of {user_id} lost a race on a unique field")
        raise ConflictException("Email or license number already in use")
    db.refresh(user)
    logger.info(f"Profile updated for user {user_id}: {sorted(update_data)}")
    return user


def escape_like(value: str) -> str:
    """Make ``%`` and ``_`` match literally in a LIKE pattern escaped with a backslash."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_users(db: Session, query: str = "", role: Optional[UserRole] = None) -> List[User]:
    """
    Find accounts whose email or public id contains ``query`` (case-insensitive).

    Args:
        db: Database session
        query: Substring to look for; empty matches every account
        role: Optional role filter
    """
    users = db.query(User)
    if query:
        pattern = f"%{escape_like(query)}%"
        users = users.filter(
            or_(User.email.ilike(pattern, escape="\\"), User.user_id.ilike(pattern, escape="\\"))
        )
    if role:
        users = users.filter(User.role == role)
    return users.order_by(User.id).all()


def list_users(db: Session, limit: int = 10) -> List[User]:
    return db.query(User).order_by(User.id).limit(limit).all()


def set_user_active(db: Session, user_id: str, is_active: bool) -> User:
    """
    Activate or deactivate an account. Deactivated accounts cannot log in.

    Raises:
        NotFoundException: If the account does not exist
    """
    user = get_user(db, user_id)
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'}")
    return user


def delete_user(db: Session, user_id: str) -> None:
    """
    Delete an account. Its profiles and enrollments are removed with it.

    Raises:
        NotFoundException: If the account does not exist
    """
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted")
