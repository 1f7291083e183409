"""
Authentication utilities for password hashing and JWT token management.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from ..config import get_settings


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class AuthResult:
    """Outcome of checking an admin credential."""

    authenticated: bool
    admin_id: Optional[str] = None
    role: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def denied(cls, reason: str) -> "AuthResult":
        return cls(authenticated=False, reason=reason)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against its hash.

    Args:
        plain_password: The plain text password
        hashed_password: The hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: The plain text password to hash

    Returns:
        The hashed password
    """
    return pwd_context.hash(password)


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        data: The data to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        The encoded JWT token
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})
    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def check_credential(token: Optional[str]) -> AuthResult:
    """
    Check an admin bearer credential without touching the store.

    Args:
        token: Raw JWT taken from the Authorization header or cookie

    Returns:
        AuthResult carrying the admin id on success, or the denial reason
    """
    if not token:
        return AuthResult.denied("You are not logged in! Please log in to get access.")

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError:
        return AuthResult.denied("Your token has expired. Please log in again.")
    except JWTError:
        return AuthResult.denied("Invalid token. Please log in again.")

    admin_id = payload.get("sub")
    if not admin_id:
        return AuthResult.denied("Invalid token. Please log in again.")

    return AuthResult(authenticated=True, admin_id=admin_id, role=payload.get("role"))
