"""
Student Applications Duplicate Detection

An application is a duplicate when an existing record has exactly the same
first name, last name, date of birth and parent email. Matching is exact:
near-duplicates such as typos in a name are not detected.
"""

import logging
from collections.abc import Mapping
from typing import Any

from intake.core.config import Settings
from intake.core.latency import simulate_io
from intake.modules.student_applications.models import ApplicationRecord
from intake.modules.student_applications.repository import ApplicationRepository

logger = logging.getLogger(__name__)

# Simulated query latency (seconds)
DUPLICATE_CHECK_DELAY = 0.5


def is_same_student(record: ApplicationRecord, data: Mapping[str, Any]) -> bool:
    return (
        record.first_name == data.get("firstName")
        and record.last_name == data.get("lastName")
        and record.date_of_birth == data.get("dateOfBirth")
        and record.parent_email == data.get("parentEmail")
    )


class DuplicateDetector:
    """Finds prior applications for the same student."""

    def __init__(self, repository: ApplicationRepository, settings: Settings) -> None:
        self._repository = repository
        self._settings = settings

    async def find_duplicate(self, data: Mapping[str, Any]) -> ApplicationRecord | None:
        """
        Find an existing application for the same student.

        Args:
            data: Submitted form data

        Returns:
            The first matching record in store order, or None
        """
        await simulate_io(self._settings, DUPLICATE_CHECK_DELAY)

        for application in await self._repository.list_all():
            if is_same_student(application, data):
                logger.warning(f"Duplicate application detected: existing={application.id}")
                return application

        return None
