"""
Core security utilities for authentication and password handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import secrets

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    data: Dict[str, Any],
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed, time-limited JWT access token.

    Args:
        data: Claims to encode in the token
        settings: Application settings holding the signing key and lifetime
        expires_delta: Token lifetime; defaults to ``access_token_expire_minutes``

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Returns:
        Dict containing token payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None


def generate_secure_token() -> str:
    """
    Generate a random single-use token for verification and password reset links.

    Returns:
        str: 64 hex characters (32 random bytes)
    """
    return secrets.token_hex(32)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_token_expiry_time(hours: int) -> datetime:
    """
    Get token expiration time.

    Args:
        hours: Hours until expiration

    Returns:
        datetime: Expiration time (UTC)
    """
    return utcnow() + timedelta(hours=hours)
