"""
Student Applications Schemas

Pydantic schemas for pipeline results, status responses, and the
structured descriptions of simulated side effects.
"""

import enum
from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field

from intake.modules.student_applications.models import (
    ApplicationRecord,
    AuditEntry,
    CamelModel,
    Priority,
)

ESTIMATED_PROCESSING_TIME = "2-3 business days"


class ValidationResult(CamelModel):
    """Outcome of validating a submitted record."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


class PipelineStep(str, enum.Enum):
    """Best-effort steps run after an application is persisted."""

    CONFIRMATION_EMAIL = "confirmation_email"
    ADMIN_NOTIFICATION = "admin_notification"
    FOLLOW_UP_TASKS = "follow_up_tasks"


class StepOutcome(CamelModel):
    """Captured result of a best-effort step."""

    step: PipelineStep
    succeeded: bool
    detail: str | None = None


class RejectionReason(str, enum.Enum):
    VALIDATION = "validation"
    DUPLICATE = "duplicate"


class SubmissionAccepted(CamelModel):
    """The application was persisted."""

    outcome: Literal["accepted"] = "accepted"
    success: Literal[True] = True
    application_id: str
    message: str = "Application submitted successfully"
    estimated_processing_time: str = ESTIMATED_PROCESSING_TIME
    side_effects: list[StepOutcome] = Field(default_factory=list)


class SubmissionRejected(CamelModel):
    """The application was refused because of invalid data or a duplicate."""

    outcome: Literal["rejected"] = "rejected"
    success: Literal[False] = False
    reason: RejectionReason
    message: str
    errors: list[str] = Field(default_factory=list)
    existing_application_id: str | None = None  # Only present for duplicates


class SubmissionFailed(CamelModel):
    """Processing failed before the application could be persisted."""

    outcome: Literal["failed"] = "failed"
    success: Literal[False] = False
    reason: Literal["internal"] = "internal"
    message: str = "Internal server error. Please try again later."
    detail: str


PipelineResult = Annotated[
    SubmissionAccepted | SubmissionRejected | SubmissionFailed,
    Field(discriminator="outcome"),
]


class EmailMessage(CamelModel):
    """A simulated outgoing email."""

    to: str
    subject: str
    html: str
    timestamp: datetime


class AdminNotification(CamelModel):
    """A simulated alert sent to admissions staff about a new application."""

    type: Literal["NEW_APPLICATION"] = "NEW_APPLICATION"
    application_id: str
    student_name: str
    grade: str
    priority: Priority
    assign_to: str
    timestamp: datetime


class ApplicationStatusResponse(CamelModel):
    """Response for an application status query."""

    success: bool = True
    application: ApplicationRecord
    status_history: list[AuditEntry]


class StatusUpdateResponse(CamelModel):
    """Response after an admin status update."""

    success: bool = True
    message: str = "Application status updated successfully"
    application: ApplicationRecord
