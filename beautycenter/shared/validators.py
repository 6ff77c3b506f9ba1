"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number.

    Separators (spaces, dashes, dots, parentheses) are stripped; a leading "+"
    is kept so international numbers stay in E.164 shape.

    Raises:
        ValueError: If the number does not have 7 to 15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    prefix = "+" if phone.startswith("+") else ""
    digits = re.sub(r"\D", "", phone)

    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must contain between 7 and 15 digits")

    return f"{prefix}{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_username(username: str) -> str:
    """Usernames are 3-50 characters of letters, digits, dots, dashes and underscores"""
    username = (username or "").strip()
    if not re.match(r"^[A-Za-z0-9._-]{3,50}$", username):
        raise ValueError(
            "Username must be 3-50 characters: letters, digits, '.', '-' or '_'"
        )
    return username


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp for storage and comparison.

    Aware datetimes are converted to UTC and stripped of tzinfo; naive
    datetimes are assumed to already be UTC.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
