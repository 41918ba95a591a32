"""Shared validation utilities"""

import re
from typing import Optional

from ..domain.scheduling.time_calculator import TimeOfDay

# Loose international phone format: optional +, optional (area), digits and separators
PHONE_PATTERN = r"^[+]?[(]?[0-9]{1,4}[)]?[-\s./0-9]*$"
NAME_PATTERN = r"^[a-zA-ZÀ-ÿ\s'-]+$"


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to +<digits>.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number (e.g. +5215512345678), or the empty value unchanged

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    phone = phone.strip()
    if len(phone) > 20 or not re.match(PHONE_PATTERN, phone):
        raise ValueError("Invalid phone number format")

    digits = re.sub(r"\D", "", phone)
    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return f"+{digits}"


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

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if len(email) > 255 or not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_person_name(name: str, field: str = "Name") -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError(f"{field} is required")
    if len(name) > 100:
        raise ValueError(f"{field} cannot exceed 100 characters")
    if not re.match(NAME_PATTERN, name):
        raise ValueError(f"{field} contains invalid characters")
    return name


def validate_time_of_day(value: str) -> str:
    """Validate an HH:MM string and return it zero-padded"""
    return TimeOfDay.parse(value).format()


def validate_max_length(value: Optional[str], max_length: int, field: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(f"{field} cannot exceed {max_length} characters")
    return value
