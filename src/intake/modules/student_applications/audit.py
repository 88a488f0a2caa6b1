"""
Student Applications Audit Log

Append-only record of pipeline events, kept in the auditLog collection.
Entries are never modified or deleted, and history is returned in insertion
order, which is also the order the pipeline steps ran in.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from intake.core.config import Settings
from intake.core.kv import JsonCollection, KeyValueStore
from intake.modules.student_applications.models import AuditEntry, AuditEventType

logger = logging.getLogger(__name__)

AUDIT_COLLECTION = "auditLog"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuditLog:
    """Audit trail for application events."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._entries = JsonCollection(
            store, f"{settings.store_namespace}:{AUDIT_COLLECTION}", AuditEntry
        )
        self._clock = clock

    async def append(
        self,
        application_id: str,
        event_type: AuditEventType,
        payload: dict[str, Any] | None = None,
        user_agent: str | None = None,
    ) -> AuditEntry:
        """Append one audit entry and return it."""
        entry = AuditEntry(
            application_id=application_id,
            event_type=event_type,
            payload=payload or {},
            timestamp=self._clock(),
            user_agent=user_agent,
        )

        async with self._entries.edit() as entries:
            entries.append(entry)

        logger.info(f"Audit event {event_type.value} logged for application {application_id}")
        return entry

    async def history(self, application_id: str) -> list[AuditEntry]:
        """Get all entries for one application, oldest first."""
        entries = await self._entries.load()
        return [entry for entry in entries if entry.application_id == application_id]

    async def list_all(self) -> list[AuditEntry]:
        return await self._entries.load()
