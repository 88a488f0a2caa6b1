"""
Student Applications Notifier

Simulated notifications for new applications. Nothing is delivered: each
message is built, logged, kept in the outbox, and recorded in the audit log.
The channel is modelled as always available, so sends always succeed.

The outbox grows with every send until drain_outbox() is called.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from intake.core.config import Settings
from intake.core.email import application_confirmation_subject, render_application_confirmation
from intake.core.latency import simulate_io
from intake.modules.student_applications.audit import AuditLog
from intake.modules.student_applications.helpers import (
    calculate_priority,
    get_assigned_officer,
    get_student_name,
)
from intake.modules.student_applications.models import AuditEventType
from intake.modules.student_applications.schemas import AdminNotification, EmailMessage

logger = logging.getLogger(__name__)

# Simulated delivery latency (seconds)
CONFIRMATION_EMAIL_DELAY = 0.3
ADMIN_NOTIFICATION_DELAY = 0.2


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Notifier:
    """Sends (simulated) confirmation emails and admin alerts."""

    def __init__(
        self,
        audit_log: AuditLog,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._audit_log = audit_log
        self._settings = settings
        self._clock = clock
        self.outbox: list[EmailMessage | AdminNotification] = []

    def drain_outbox(self) -> list[EmailMessage | AdminNotification]:
        """Return the messages sent so far and empty the outbox."""
        messages, self.outbox = self.outbox, []
        return messages

    async def send_confirmation(
        self,
        email: str,
        application_id: str,
        data: Mapping[str, Any],
    ) -> EmailMessage:
        """
        Send the application confirmation email to the parent.

        Args:
            email: Parent email address
            application_id: Id of the new application
            data: Submitted form data

        Returns:
            The EmailMessage that was sent
        """
        await simulate_io(self._settings, CONFIRMATION_EMAIL_DELAY)

        now = self._clock()
        student_name = get_student_name(data)
        message = EmailMessage(
            to=email,
            subject=application_confirmation_subject(student_name),
            html=render_application_confirmation(
                school_name=self._settings.school_name,
                parent_name=str(data.get("parentName", "")),
                student_name=student_name,
                application_id=application_id,
                grade=str(data.get("grade", "")),
                submitted_on=now.date(),
                admissions_email=self._settings.admissions_email,
            ),
            timestamp=now,
        )

        self.outbox.append(message)
        logger.info(f"Confirmation email sent for application {application_id}")
        await self._audit_log.append(
            application_id, AuditEventType.CONFIRMATION_EMAIL_SENT, {"email": email}
        )
        return message

    async def notify_admin(
        self,
        application_id: str,
        data: Mapping[str, Any],
    ) -> AdminNotification:
        """
        Alert admissions staff about a new application.

        The alert is routed to the officer responsible for the grade and
        carries the application's priority.
        """
        await simulate_io(self._settings, ADMIN_NOTIFICATION_DELAY)

        grade = data.get("grade")
        notification = AdminNotification(
            application_id=application_id,
            student_name=get_student_name(data),
            grade=str(grade or ""),
            priority=calculate_priority(data),
            assign_to=get_assigned_officer(grade, self._settings.admissions_email),
            timestamp=self._clock(),
        )

        self.outbox.append(notification)
        logger.info(
            f"Admin notification for application {application_id} sent to {notification.assign_to}"
        )
        await self._audit_log.append(
            application_id,
            AuditEventType.ADMIN_NOTIFIED,
            notification.model_dump(mode="json", by_alias=True),
        )
        return notification
