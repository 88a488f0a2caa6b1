"""
Student Applications Service Layer

Orchestrates the application intake pipeline over the repository, audit log,
duplicate detector, notifier, and task scheduler.

Submission Flow (each step runs after the previous one finishes):
1. Validate the submitted data - any error rejects the submission
2. Check for a duplicate application - a match rejects the submission
3. Compute the priority and persist the record (APPLICATION_CREATED audited)
4. Send the confirmation email to the parent (best-effort)
5. Notify admissions staff (best-effort)
6. Schedule follow-up tasks (best-effort)
7. Return the accepted result

Best-effort steps never fail the submission: the record is already saved,
so a failure is logged and reported as a failed StepOutcome instead.

Validation and duplicate rejections are returned as results, not raised.
A failure before the record is saved returns a SubmissionFailed result.

Status Management:
- get_status returns the record with its audit history
- update_status changes the status, appends an admin note, and audits it
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from intake.core.config import Settings, get_settings
from intake.core.kv import KeyValueStore
from intake.core.latency import simulate_io
from intake.modules.student_applications.audit import AuditLog
from intake.modules.student_applications.duplicates import DuplicateDetector
from intake.modules.student_applications.exceptions import (
    ApplicationNotFoundError,
    ApplicationServiceError,
    ApplicationValidationError,
    DuplicateApplicationError,
    InternalProcessingError,
    InvalidStatusError,
    RecordIntegrityError,
)
from intake.modules.student_applications.helpers import calculate_priority
from intake.modules.student_applications.models import (
    ApplicationNote,
    ApplicationRecord,
    ApplicationStatus,
    AuditEventType,
)
from intake.modules.student_applications.notifier import Notifier
from intake.modules.student_applications.repository import ApplicationRepository
from intake.modules.student_applications.scheduling import TaskScheduler
from intake.modules.student_applications.schemas import (
    ApplicationStatusResponse,
    PipelineStep,
    RejectionReason,
    StatusUpdateResponse,
    StepOutcome,
    SubmissionAccepted,
    SubmissionFailed,
    SubmissionRejected,
)
from intake.modules.student_applications.validation import validate_application

logger = logging.getLogger(__name__)

__all__ = [
    "ApplicationNotFoundError",
    "ApplicationPipeline",
    "ApplicationServiceError",
    "ApplicationValidationError",
    "DuplicateApplicationError",
    "InternalProcessingError",
    "InvalidStatusError",
    "RecordIntegrityError",
    "create_pipeline",
]

ADMIN_NOTE_AUTHOR = "admin"

# Simulated query latency (seconds)
STATUS_QUERY_DELAY = 0.3
STATUS_UPDATE_DELAY = 0.2


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ApplicationPipeline:
    """Entry point for submitting applications and managing their status."""

    def __init__(
        self,
        repository: ApplicationRepository,
        audit_log: AuditLog,
        duplicate_detector: DuplicateDetector,
        notifier: Notifier,
        task_scheduler: TaskScheduler,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._audit_log = audit_log
        self._duplicates = duplicate_detector
        self._notifier = notifier
        self._scheduler = task_scheduler
        self._settings = settings
        self._clock = clock

    async def submit(
        self,
        data: Mapping[str, Any],
    ) -> SubmissionAccepted | SubmissionRejected | SubmissionFailed:
        """
        Process a student application submitted by the form client.

        Args:
            data: Flat form data keyed by camelCase field names

        Returns:
            SubmissionAccepted with the new application id,
            SubmissionRejected for invalid data or a duplicate, or
            SubmissionFailed if the application could not be saved
        """
        logger.info("Processing student application submission")

        try:
            application_id = await self._register(data)
        except ApplicationValidationError as e:
            return SubmissionRejected(
                reason=RejectionReason.VALIDATION,
                message=e.message,
                errors=e.errors,
            )
        except DuplicateApplicationError as e:
            return SubmissionRejected(
                reason=RejectionReason.DUPLICATE,
                message=e.message,
                existing_application_id=e.existing_application_id,
            )
        except InternalProcessingError as e:
            return SubmissionFailed(message=e.message, detail=e.detail)

        parent_email = str(data.get("parentEmail", ""))
        side_effects = [
            await self._run_best_effort(
                PipelineStep.CONFIRMATION_EMAIL,
                application_id,
                lambda: self._notifier.send_confirmation(parent_email, application_id, data),
            ),
            await self._run_best_effort(
                PipelineStep.ADMIN_NOTIFICATION,
                application_id,
                lambda: self._notifier.notify_admin(application_id, data),
            ),
            await self._run_best_effort(
                PipelineStep.FOLLOW_UP_TASKS,
                application_id,
                lambda: self._scheduler.schedule_follow_ups(application_id, data),
            ),
        ]

        logger.info(f"Application {application_id} submitted successfully")
        return SubmissionAccepted(application_id=application_id, side_effects=side_effects)

    async def _register(self, data: Mapping[str, Any]) -> str:
        """
        Validate, check for duplicates, and persist an application.

        Raises:
            ApplicationValidationError: If the data fails validation
            DuplicateApplicationError: If the student already has an application
            InternalProcessingError: If the store fails
        """
        validation = validate_application(data)
        if not validation.valid:
            logger.info(f"Application rejected with {len(validation.errors)} validation error(s)")
            raise ApplicationValidationError(validation.errors)

        try:
            existing = await self._duplicates.find_duplicate(data)
        except Exception as e:
            logger.error(f"Duplicate check failed: {e}")
            raise InternalProcessingError(f"Duplicate check failed: {e}") from e

        if existing is not None:
            raise DuplicateApplicationError(existing.id)

        priority = calculate_priority(data)
        try:
            return await self._repository.create(data, priority)
        except Exception as e:
            logger.error(f"Failed to save application: {e}")
            raise InternalProcessingError(f"Database save failed: {e}") from e

    async def _run_best_effort(
        self,
        step: PipelineStep,
        application_id: str,
        operation: Callable[[], Awaitable[Any]],
    ) -> StepOutcome:
        try:
            await operation()
        except Exception as e:
            logger.error(f"Step {step.value} failed for application {application_id}: {e}")
            return StepOutcome(step=step, succeeded=False, detail=str(e))
        return StepOutcome(step=step, succeeded=True)

    async def list_applications(self) -> list[ApplicationRecord]:
        return await self._repository.list_all()

    async def get_status(self, application_id: str) -> ApplicationStatusResponse:
        """
        Get an application with its audit history.

        Raises:
            ApplicationNotFoundError: If the application doesn't exist
        """
        await simulate_io(self._settings, STATUS_QUERY_DELAY)

        application = await self._repository.get_by_id(application_id)
        if application is None:
            logger.warning(f"Application not found: {application_id}")
            raise ApplicationNotFoundError(application_id)

        history = await self._audit_log.history(application_id)
        return ApplicationStatusResponse(application=application, status_history=history)

    async def update_status(
        self,
        application_id: str,
        new_status: ApplicationStatus | str,
        note: str,
    ) -> StatusUpdateResponse:
        """
        Change an application's status (admin use).

        Appends the note authored by "admin" and records a STATUS_UPDATED
        audit entry with the old and new status. Any status may follow any
        other; transitions are decided by the admissions team.

        Args:
            application_id: Application id
            new_status: New status value
            note: Admin note explaining the change

        Returns:
            StatusUpdateResponse with the updated record

        Raises:
            InvalidStatusError: If new_status is not a known status
            ApplicationNotFoundError: If the application doesn't exist
        """
        try:
            status = ApplicationStatus(new_status)
        except ValueError:
            raise InvalidStatusError(str(new_status)) from None

        await simulate_io(self._settings, STATUS_UPDATE_DELAY)

        admin_note = ApplicationNote(text=note, timestamp=self._clock(), author=ADMIN_NOTE_AUTHOR)
        # Status as read under the collection lock held by update()
        previous: list[ApplicationStatus] = []

        def apply(record: ApplicationRecord) -> ApplicationRecord:
            previous.append(record.status)
            return record.model_copy(
                update={"status": status, "notes": [*record.notes, admin_note]}
            )

        try:
            updated = await self._repository.update(application_id, apply)
        except ApplicationNotFoundError:
            logger.warning(f"Application not found: {application_id}")
            raise
        old_status = previous[0]

        await self._audit_log.append(
            application_id,
            AuditEventType.STATUS_UPDATED,
            {"oldStatus": old_status.value, "newStatus": status.value, "notes": note},
        )
        logger.info(
            f"Application {application_id} status changed: {old_status.value} -> {status.value}"
        )

        return StatusUpdateResponse(application=updated)


def create_pipeline(store: KeyValueStore, settings: Settings | None = None) -> ApplicationPipeline:
    """
    Wire a pipeline and all of its components over one key/value store.

    Args:
        store: The store holding the applications and audit collections
        settings: Settings to use (defaults to get_settings())

    Returns:
        A ready ApplicationPipeline
    """
    settings = settings or get_settings()
    audit_log = AuditLog(store, settings)
    repository = ApplicationRepository(store, audit_log, settings)
    return ApplicationPipeline(
        repository=repository,
        audit_log=audit_log,
        duplicate_detector=DuplicateDetector(repository, settings),
        notifier=Notifier(audit_log, settings),
        task_scheduler=TaskScheduler(audit_log, settings),
        settings=settings,
    )
