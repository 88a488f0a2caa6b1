"""
Student Applications Follow-up Scheduling

Every accepted application gets two follow-up tasks:
- REVIEW_APPLICATION: due in 2 business days, high priority, assigned to the
  admissions officer for the student's grade
- SEND_DECISION_EMAIL: due in 3 business days, medium priority, assigned to
  the general admissions address (Settings.admissions_email)

Tasks are not queued anywhere; only their count is recorded in the audit log.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime, timedelta
from typing import Any, TypeVar

from intake.core.config import Settings
from intake.core.latency import simulate_io
from intake.modules.student_applications.audit import AuditLog
from intake.modules.student_applications.helpers import get_assigned_officer
from intake.modules.student_applications.models import (
    AuditEventType,
    FollowUpTask,
    Priority,
    TaskType,
)

logger = logging.getLogger(__name__)

# date.weekday() values for Saturday and Sunday
WEEKEND_DAYS = frozenset({5, 6})

REVIEW_DUE_BUSINESS_DAYS = 2
DECISION_DUE_BUSINESS_DAYS = 3

# Simulated scheduling latency (seconds)
SCHEDULE_DELAY = 0.1

D = TypeVar("D", date, datetime)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def add_business_days(start: D, days: int) -> D:
    """
    Add business days to a date or datetime.

    Steps forward one calendar day at a time and only counts days that are
    not weekend days. The time of day is preserved.

    Example: Friday + 2 business days -> the following Tuesday.
    """
    result = start
    added = 0
    while added < days:
        result = result + timedelta(days=1)
        if result.weekday() not in WEEKEND_DAYS:
            added += 1
    return result


class TaskScheduler:
    """Creates follow-up tasks for new applications."""

    def __init__(
        self,
        audit_log: AuditLog,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._audit_log = audit_log
        self._settings = settings
        self._clock = clock

    async def schedule_follow_ups(
        self,
        application_id: str,
        data: Mapping[str, Any],
    ) -> list[FollowUpTask]:
        """
        Schedule the review and decision tasks for an application.

        Args:
            application_id: Id of the new application
            data: Submitted form data

        Returns:
            The REVIEW_APPLICATION and SEND_DECISION_EMAIL tasks, in that order
        """
        await simulate_io(self._settings, SCHEDULE_DELAY)

        now = self._clock()
        admissions_email = self._settings.admissions_email
        tasks = [
            FollowUpTask(
                type=TaskType.REVIEW_APPLICATION,
                application_id=application_id,
                due_date=add_business_days(now, REVIEW_DUE_BUSINESS_DAYS),
                priority=Priority.HIGH,
                assigned_to=get_assigned_officer(data.get("grade"), admissions_email),
            ),
            FollowUpTask(
                type=TaskType.SEND_DECISION_EMAIL,
                application_id=application_id,
                due_date=add_business_days(now, DECISION_DUE_BUSINESS_DAYS),
                priority=Priority.MEDIUM,
                assigned_to=admissions_email,
            ),
        ]

        logger.info(f"Scheduled {len(tasks)} follow-up tasks for application {application_id}")
        await self._audit_log.append(
            application_id, AuditEventType.TASKS_SCHEDULED, {"tasks": len(tasks)}
        )
        return tasks
