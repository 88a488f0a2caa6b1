"""
Student Applications Shared Helpers

Business rules shared by the service, notifier, and task scheduler. They
operate on the submitted form data (camelCase keys) so the same rule applies
before and after the record is stored.
"""

from collections.abc import Mapping
from typing import Any

from intake.modules.student_applications.models import Grade, Priority

# Grade bands -> admissions officer responsible for them
OFFICER_ASSIGNMENTS: dict[str, str] = {
    Grade.KINDERGARTEN.value: "sarah.johnson@brightfutureacademy.edu",
    Grade.GRADE1.value: "sarah.johnson@brightfutureacademy.edu",
    Grade.GRADE2.value: "sarah.johnson@brightfutureacademy.edu",
    Grade.GRADE3.value: "michael.brown@brightfutureacademy.edu",
    Grade.GRADE4.value: "michael.brown@brightfutureacademy.edu",
    Grade.GRADE5.value: "michael.brown@brightfutureacademy.edu",
    Grade.GRADE6.value: "lisa.davis@brightfutureacademy.edu",
    Grade.GRADE7.value: "lisa.davis@brightfutureacademy.edu",
    Grade.GRADE8.value: "lisa.davis@brightfutureacademy.edu",
    Grade.GRADE9.value: "robert.wilson@brightfutureacademy.edu",
    Grade.GRADE10.value: "robert.wilson@brightfutureacademy.edu",
    Grade.GRADE11.value: "robert.wilson@brightfutureacademy.edu",
    Grade.GRADE12.value: "robert.wilson@brightfutureacademy.edu",
}

HIGH_PRIORITY_GRADES = {Grade.KINDERGARTEN.value, Grade.GRADE1.value}


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def calculate_priority(data: Mapping[str, Any]) -> Priority:
    """
    Calculate the review priority of an application.

    Rules are checked in order and the first match wins:
    1. Kindergarten or grade 1 -> HIGH
    2. Special needs mentioned -> HIGH
    3. Medical information provided -> MEDIUM
    4. Otherwise -> NORMAL

    Args:
        data: Submitted application data

    Returns:
        The computed Priority
    """
    if data.get("grade") in HIGH_PRIORITY_GRADES:
        return Priority.HIGH

    if _has_text(data.get("specialNeeds")):
        return Priority.HIGH

    if _has_text(data.get("medicalInfo")):
        return Priority.MEDIUM

    return Priority.NORMAL


def get_assigned_officer(grade: str | None, general_address: str) -> str:
    """
    Get the admissions officer responsible for a grade.

    Unknown grades fall back to general_address.
    """
    if grade is None:
        return general_address
    return OFFICER_ASSIGNMENTS.get(grade, general_address)


def get_student_name(data: Mapping[str, Any]) -> str:
    return f"{data.get('firstName', '')} {data.get('lastName', '')}".strip()
