"""
Student Applications Validation

Structural and business-rule checks on a submitted application. Validation
never stops at the first problem: every violated rule adds its own message
so the form client can show them all at once.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from intake.modules.student_applications.models import Gender, Grade, Relationship
from intake.modules.student_applications.schemas import ValidationResult

# Matched with fullmatch() so a trailing newline is not accepted
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# ASCII digits only; \d would also match other scripts' digits
PHONE_PATTERN = re.compile(r"\+?[1-9][0-9]{0,15}")
PHONE_FORMATTING = re.compile(r"[\s\-()]")

EARLIEST_DATE_OF_BIRTH = date(1950, 1, 1)
MIN_NAME_LENGTH = 2
MIN_ADDRESS_LENGTH = 10

VALID_GENDERS = {g.value for g in Gender}
VALID_GRADES = {g.value for g in Grade}
VALID_RELATIONSHIPS = {r.value for r in Relationship}


def _text(data: Mapping[str, Any], key: str) -> str:
    # Form fields are strings; anything else counts as missing
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_valid_phone(phone: str) -> bool:
    """Check a phone number after removing spaces, hyphens and parentheses."""
    return bool(PHONE_PATTERN.fullmatch(PHONE_FORMATTING.sub("", phone)))


def is_valid_date_of_birth(value: str, today: date | None = None) -> bool:
    """
    Check that a date of birth is plausible.

    The date must parse, must not be in the future, and must not be before
    1950-01-01. No age bounds are applied.
    """
    parsed = _parse_date(value.strip())
    if parsed is None:
        return False
    today = today or date.today()
    return EARLIEST_DATE_OF_BIRTH <= parsed <= today


def is_valid_grade(grade: str) -> bool:
    return grade in VALID_GRADES


def validate_application(data: Mapping[str, Any], today: date | None = None) -> ValidationResult:
    """
    Validate submitted application data.

    Args:
        data: Flat form data keyed by camelCase field names
        today: Reference date for the date of birth check (defaults to today)

    Returns:
        ValidationResult with valid=True only when every rule passes
    """
    errors: list[str] = []

    # Student information
    if len(_text(data, "firstName").strip()) < MIN_NAME_LENGTH:
        errors.append("First name must be at least 2 characters long")

    if len(_text(data, "lastName").strip()) < MIN_NAME_LENGTH:
        errors.append("Last name must be at least 2 characters long")

    date_of_birth = _text(data, "dateOfBirth")
    if not date_of_birth or not is_valid_date_of_birth(date_of_birth, today):
        errors.append("Valid date of birth is required")

    if _text(data, "gender") not in VALID_GENDERS:
        errors.append("Valid gender selection is required")

    if not is_valid_grade(_text(data, "grade")):
        errors.append("Valid grade selection is required")

    # Parent information
    if len(_text(data, "parentName").strip()) < MIN_NAME_LENGTH:
        errors.append("Parent/Guardian name must be at least 2 characters long")

    parent_email = _text(data, "parentEmail")
    if not parent_email or not is_valid_email(parent_email):
        errors.append("Valid parent email address is required")

    parent_phone = _text(data, "parentPhone")
    if not parent_phone or not is_valid_phone(parent_phone):
        errors.append("Valid parent phone number is required")

    if _text(data, "relationship") not in VALID_RELATIONSHIPS:
        errors.append("Valid relationship selection is required")

    if len(_text(data, "address").strip()) < MIN_ADDRESS_LENGTH:
        errors.append("Complete home address is required")

    # Emergency contact
    if len(_text(data, "emergencyName").strip()) < MIN_NAME_LENGTH:
        errors.append("Emergency contact name is required")

    emergency_phone = _text(data, "emergencyPhone")
    if not emergency_phone or not is_valid_phone(emergency_phone):
        errors.append("Valid emergency contact phone is required")

    # Business rules
    if parent_phone and emergency_phone and parent_phone.strip() == emergency_phone.strip():
        errors.append("Emergency contact phone should be different from parent phone")

    return ValidationResult(valid=not errors, errors=errors)
