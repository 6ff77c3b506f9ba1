"""
Security Utilities
Password hashing, password policy and JWT access tokens
"""

import logging
import re
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRATION_MINUTES, SECRET_KEY

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("audit.security")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


MIN_PASSWORD_LENGTH = 8
COMMON_PASSWORDS = frozenset({"password", "password1", "123456", "12345678", "qwerty", "admin", "letmein"})

# At least this many of the character classes below must appear
REQUIRED_CHARACTER_CLASSES = 3
CHARACTER_CLASSES = (
    ("lowercase letters", re.compile(r"[a-z]")),
    ("uppercase letters", re.compile(r"[A-Z]")),
    ("numbers", re.compile(r"\d")),
    ("special characters", re.compile(r"[^A-Za-z0-9]")),
)


def password_problems(password: str) -> list[str]:
    """Reasons a password is too weak to accept; empty when it is acceptable"""
    problems = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"must be at least {MIN_PASSWORD_LENGTH} characters long")
    if password.lower() in COMMON_PASSWORDS:
        problems.append("is a commonly used password")

    missing = [name for name, pattern in CHARACTER_CLASSES if not pattern.search(password)]
    if len(CHARACTER_CLASSES) - len(missing) < REQUIRED_CHARACTER_CLASSES:
        problems.append(f"needs more variety (add {', '.join(missing)})")
    return problems


# ============================================================================
# ACCESS TOKENS
# ============================================================================


def create_access_token(
    subject: str, claims: Optional[dict[str, Any]] = None, expires_delta: Optional[timedelta] = None
) -> tuple[str, datetime]:
    """
    Create a signed JWT access token

    Args:
        subject: User ID stored in the "sub" claim
        claims: Extra claims (username, roles, companyId)
        expires_delta: Token lifetime (default JWT_EXPIRATION_MINUTES)

    Returns:
        (encoded token, expiry as naive UTC datetime)
    """
    issued_at = datetime.utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes=JWT_EXPIRATION_MINUTES))

    to_encode = dict(claims or {})
    to_encode.update(
        {
            "sub": subject,
            "iat": issued_at,
            "exp": expire,
            "jti": str(uuid.uuid4()),
        }
    )
    encoded_jwt = jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt, expire


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify and decode a JWT access token

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


# ============================================================================
# AUDIT LOGGING
# ============================================================================


def log_security_event(event_type: str, user_id: Optional[str] = None, details: Optional[dict[str, Any]] = None):
    """Authentication-related audit line (login, failed_auth, register, password changes)"""
    security_logger.info(
        f"SECURITY_EVENT: type={event_type} user={user_id or '-'} details={details or {}}"
    )
