"""
Student Applications Models

Records persisted in the key/value store: applications and audit entries,
plus the enums shared by the whole module. Field names are snake_case in
Python and camelCase in storage, matching the keys the form client posts.
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApplicationStatus(str, enum.Enum):
    """Status of a student application."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"


class ApplicationStage(str, enum.Enum):
    """Processing stage. The pipeline only ever sets SUBMITTED."""

    SUBMITTED = "submitted"


class Priority(str, enum.Enum):
    """Review priority of an application."""

    NORMAL = "normal"
    MEDIUM = "medium"
    HIGH = "high"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Relationship(str, enum.Enum):
    """Relationship of the parent/guardian to the student."""

    FATHER = "father"
    MOTHER = "mother"
    GUARDIAN = "guardian"
    OTHER = "other"


class Grade(str, enum.Enum):
    """Grades a student can apply for."""

    KINDERGARTEN = "kindergarten"
    GRADE1 = "grade1"
    GRADE2 = "grade2"
    GRADE3 = "grade3"
    GRADE4 = "grade4"
    GRADE5 = "grade5"
    GRADE6 = "grade6"
    GRADE7 = "grade7"
    GRADE8 = "grade8"
    GRADE9 = "grade9"
    GRADE10 = "grade10"
    GRADE11 = "grade11"
    GRADE12 = "grade12"


class AuditEventType(str, enum.Enum):
    """Pipeline events recorded in the audit log."""

    APPLICATION_CREATED = "APPLICATION_CREATED"
    CONFIRMATION_EMAIL_SENT = "CONFIRMATION_EMAIL_SENT"
    ADMIN_NOTIFIED = "ADMIN_NOTIFIED"
    TASKS_SCHEDULED = "TASKS_SCHEDULED"
    STATUS_UPDATED = "STATUS_UPDATED"


class TaskType(str, enum.Enum):
    """Types of follow-up tasks."""

    REVIEW_APPLICATION = "REVIEW_APPLICATION"
    SEND_DECISION_EMAIL = "SEND_DECISION_EMAIL"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApplicationNote(CamelModel):
    """A note appended to an application by staff."""

    text: str
    timestamp: datetime
    author: str


class ApplicationRecord(CamelModel):
    """
    Student application as stored in the applications collection.

    Any extra keys posted by the form client (submission metadata and the
    like) are kept alongside the known fields.
    """

    model_config = ConfigDict(extra="allow")

    id: str

    # Student information
    first_name: str
    last_name: str
    date_of_birth: str
    gender: str
    grade: str

    # Parent/guardian information
    parent_name: str
    parent_email: str
    parent_phone: str
    relationship: str
    address: str

    # Emergency contact
    emergency_name: str
    emergency_phone: str

    # Optional details
    special_needs: str | None = None
    medical_info: str | None = None

    # Processing state
    status: ApplicationStatus = ApplicationStatus.PENDING
    stage: ApplicationStage = ApplicationStage.SUBMITTED
    priority: Priority = Priority.NORMAL
    assigned_to: str | None = None
    documents: list[dict[str, Any]] = Field(default_factory=list)
    notes: list[ApplicationNote] = Field(default_factory=list)

    # Audit timestamps
    created_at: datetime
    updated_at: datetime

    @property
    def student_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class AuditEntry(CamelModel):
    """One immutable pipeline event in the audit log."""

    model_config = ConfigDict(frozen=True)

    application_id: str
    event_type: AuditEventType
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    user_agent: str | None = None


class FollowUpTask(CamelModel):
    """Follow-up work item produced when an application is accepted."""

    type: TaskType
    application_id: str
    due_date: datetime
    priority: Priority
    assigned_to: str
