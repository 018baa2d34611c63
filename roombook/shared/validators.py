"""Shared validation utilities"""

import re
import uuid
from datetime import date
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def parse_time_of_day(value: str) -> int:
    """
    Convert an "HH:mm" string to a minute-of-day integer.

    Raises:
        ValueError: If the string is not a valid 24h clock time
    """
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise ValueError("Invalid time (HH:mm)")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError("Invalid time (HH:mm)")

    return hours * 60 + minutes


def format_time_of_day(minutes: int) -> str:
    """Render a minute-of-day as "HH:mm", wrapping past midnight"""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_iso_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD calendar date.

    Raises:
        ValueError: If the string is malformed or not a real date
    """
    if not _DATE_PATTERN.match(value or ""):
        raise ValueError("Invalid date (YYYY-MM-DD)")
    return date.fromisoformat(value)


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not _EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email
