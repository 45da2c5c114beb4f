"""
FastAPI dependencies for authentication and authorization.
"""
from typing import List

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.security import verify_token
from ..database import get_db
from ..exceptions import ForbiddenException, UnauthorizedException
from .models import User, UserRole

# OAuth2 scheme for JWT token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)


def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Get current authenticated user from JWT token with database verification.

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired, or
            the account no longer exists
    """
    if not token:
        raise UnauthorizedException("Not authenticated")

    payload = verify_token(token, settings)
    if not payload:
        raise UnauthorizedException("Invalid or expired token")

    user_id = payload.get("user_id")
    if not user_id:
        raise UnauthorizedException("Invalid token payload")

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise UnauthorizedException("User not found")
    request.state.user_id = user.user_id
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current user and verify the account may still act.

    Raises:
        UnauthorizedException: If the account was deactivated after the token was issued
    """
    if not current_user.is_active:
        raise UnauthorizedException("Account is deactivated")
    return current_user


def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if user has required role
    """
    def role_checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed_roles:
            raise ForbiddenException(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}. "
                f"Your role: {current_user.role.value}"
            )
        return current_user
    return role_checker


def ensure_self_or_roles(current_user: User, user_id: str, roles: List[UserRole]) -> None:
    """
    Allow access to an account's own resources, or to callers holding one of ``roles``.

    Raises:
        ForbiddenException: If neither condition holds
    """
    if current_user.user_id != user_id and current_user.role not in roles:
        raise ForbiddenException("You don't have permission to access this user")


# Convenience dependencies for specific roles
require_admin = require_roles([UserRole.ADMIN])
require_doctor_or_admin = require_roles([UserRole.DOCTOR, UserRole.ADMIN])
