"""
Student Applications Repository

Storage operations for application records in the applications collection.
The repository is the single source of truth for record state: every change
goes through update(), which enforces the record invariants:

- The id never changes once assigned
- createdAt never changes and updatedAt is never earlier than createdAt
- Notes are only appended, never edited or removed
"""

import logging
import secrets
import string
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from intake.core.config import Settings
from intake.core.kv import JsonCollection, KeyValueStore
from intake.core.latency import simulate_io
from intake.modules.student_applications.audit import AuditLog
from intake.modules.student_applications.exceptions import (
    ApplicationNotFoundError,
    RecordIntegrityError,
)
from intake.modules.student_applications.models import (
    ApplicationRecord,
    ApplicationStage,
    ApplicationStatus,
    AuditEventType,
    Priority,
)

logger = logging.getLogger(__name__)

APPLICATIONS_COLLECTION = "applications"

APPLICATION_ID_PREFIX = "APP"
APPLICATION_ID_SUFFIX_LENGTH = 5
APPLICATION_ID_ALPHABET = string.ascii_uppercase + string.digits

# Simulated database latency (seconds)
SAVE_DELAY = 0.8

ApplicationMutation = Callable[[ApplicationRecord], ApplicationRecord]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_application_id() -> str:
    """
    Generate an application id.

    Format: "APP" + epoch milliseconds + 5 random uppercase alphanumerics,
    e.g. APP1718000000000K3Q9Z. Unique with overwhelming probability; no
    collision check is made.
    """
    suffix = "".join(
        secrets.choice(APPLICATION_ID_ALPHABET) for _ in range(APPLICATION_ID_SUFFIX_LENGTH)
    )
    return f"{APPLICATION_ID_PREFIX}{int(time.time() * 1000)}{suffix}"


def _check_integrity(current: ApplicationRecord, updated: ApplicationRecord) -> None:
    if updated.id != current.id:
        raise RecordIntegrityError(f"Application id cannot be changed ({current.id})")

    if updated.created_at != current.created_at:
        raise RecordIntegrityError(f"createdAt cannot be changed for application {current.id}")

    if updated.notes[: len(current.notes)] != current.notes:
        raise RecordIntegrityError(f"Notes can only be appended for application {current.id}")


class ApplicationRepository:
    """Application records persisted in a key/value store."""

    def __init__(
        self,
        store: KeyValueStore,
        audit_log: AuditLog,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._applications = JsonCollection(
            store, f"{settings.store_namespace}:{APPLICATIONS_COLLECTION}", ApplicationRecord
        )
        self._audit_log = audit_log
        self._settings = settings
        self._clock = clock

    async def create(self, data: Mapping[str, Any], priority: Priority) -> str:
        """
        Create a new application record.

        The record starts as pending/submitted, unassigned, with no documents
        or notes. An APPLICATION_CREATED audit entry is appended once the
        record is saved.

        Args:
            data: Validated form data (camelCase keys)
            priority: Priority computed for the application

        Returns:
            The new application id
        """
        await simulate_io(self._settings, SAVE_DELAY)

        application_id = generate_application_id()
        now = self._clock()

        record = ApplicationRecord.model_validate(
            {
                **data,
                "id": application_id,
                "status": ApplicationStatus.PENDING,
                "createdAt": now,
                "updatedAt": now,
                "stage": ApplicationStage.SUBMITTED,
                "priority": priority,
                "assignedTo": None,
                "documents": [],
                "notes": [],
            }
        )

        async with self._applications.edit() as applications:
            applications.append(record)

        logger.info(f"Application {application_id} saved with priority {priority.value}")

        user_agent = data.get("userAgent")
        await self._audit_log.append(
            application_id,
            AuditEventType.APPLICATION_CREATED,
            dict(data),
            user_agent=user_agent if isinstance(user_agent, str) else None,
        )

        return application_id

    async def get_by_id(self, application_id: str) -> ApplicationRecord | None:
        """Get application by ID."""
        applications = await self._applications.load()
        return next((app for app in applications if app.id == application_id), None)

    async def list_all(self) -> list[ApplicationRecord]:
        """Get all applications in insertion order."""
        return await self._applications.load()

    async def update(self, application_id: str, mutation: ApplicationMutation) -> ApplicationRecord:
        """
        Apply a mutation to an application record.

        The mutation receives a copy of the stored record and returns the
        updated record. updatedAt is stamped by the repository.

        Args:
            application_id: Application id
            mutation: Function producing the updated record

        Returns:
            The updated ApplicationRecord

        Raises:
            ApplicationNotFoundError: If the application doesn't exist
            RecordIntegrityError: If the mutation breaks a record invariant
        """
        async with self._applications.edit() as applications:
            index = next(
                (i for i, app in enumerate(applications) if app.id == application_id), None
            )
            if index is None:
                raise ApplicationNotFoundError(application_id)

            current = applications[index]
            updated = mutation(current.model_copy(deep=True))
            _check_integrity(current, updated)

            updated = updated.model_copy(
                update={"updated_at": max(self._clock(), current.created_at)}
            )
            applications[index] = updated

        return updated
