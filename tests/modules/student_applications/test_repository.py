"""
Unit tests for the application repository and audit log.

These tests focus on record creation, lookups, and the update invariants.
"""

import json
import re

import pytest

from intake.modules.student_applications.exceptions import (
    ApplicationNotFoundError,
    RecordIntegrityError,
)
from intake.modules.student_applications.models import (
    ApplicationNote,
    ApplicationStage,
    ApplicationStatus,
    AuditEventType,
    Priority,
)
from intake.modules.student_applications.repository import generate_application_id

ID_PATTERN = re.compile(r"^APP\d{13}[A-Z0-9]{5}$")


class TestGenerateApplicationId:
    """Tests for application id generation."""

    def test_id_format(self):
        assert ID_PATTERN.match(generate_application_id())

    def test_ids_are_unique(self):
        ids = {generate_application_id() for _ in range(200)}
        assert len(ids) == 200


class TestCreate:
    """Tests for ApplicationRepository.create."""

    @pytest.mark.asyncio
    async def test_create_sets_initial_state(self, repository, sample_application_data):
        """New records are pending, submitted, unassigned, with no documents or notes."""
        application_id = await repository.create(sample_application_data, Priority.MEDIUM)

        record = await repository.get_by_id(application_id)

        assert record is not None
        assert record.id == application_id
        assert record.first_name == "Emma"
        assert record.parent_email == "laura.thompson@example.com"
        assert record.status == ApplicationStatus.PENDING
        assert record.stage == ApplicationStage.SUBMITTED
        assert record.priority == Priority.MEDIUM
        assert record.assigned_to is None
        assert record.documents == []
        assert record.notes == []
        assert record.created_at == record.updated_at

    @pytest.mark.asyncio
    async def test_create_keeps_extra_submitted_fields(
        self, repository, store, settings, sample_application_data
    ):
        """Extra keys posted by the client are stored verbatim in camelCase."""
        sample_application_data["submissionDate"] = "2026-10-19T09:30:00Z"

        application_id = await repository.create(sample_application_data, Priority.NORMAL)

        raw = json.loads(await store.get(f"{settings.store_namespace}:applications"))
        assert raw[0]["id"] == application_id
        assert raw[0]["submissionDate"] == "2026-10-19T09:30:00Z"
        assert raw[0]["firstName"] == "Emma"
        assert raw[0]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_create_audits_application_created(
        self, repository, audit_log, sample_application_data
    ):
        sample_application_data["userAgent"] = "Mozilla/5.0"

        application_id = await repository.create(sample_application_data, Priority.NORMAL)

        history = await audit_log.history(application_id)
        assert [entry.event_type for entry in history] == [AuditEventType.APPLICATION_CREATED]
        assert history[0].payload["firstName"] == "Emma"
        assert history[0].user_agent == "Mozilla/5.0"

    @pytest.mark.asyncio
    async def test_list_all_preserves_insertion_order(
        self, repository, sample_application_data, second_application_data
    ):
        first = await repository.create(sample_application_data, Priority.NORMAL)
        second = await repository.create(second_application_data, Priority.HIGH)

        applications = await repository.list_all()

        assert [app.id for app in applications] == [first, second]


class TestGetById:
    @pytest.mark.asyncio
    async def test_unknown_id_returns_none(self, repository):
        assert await repository.get_by_id("APP0000000000000XXXXX") is None

    @pytest.mark.asyncio
    async def test_empty_store_lists_nothing(self, repository):
        assert await repository.list_all() == []


class TestUpdate:
    """Tests for ApplicationRepository.update invariants."""

    @pytest.mark.asyncio
    async def test_update_applies_mutation_and_stamps_updated_at(
        self, repository, sample_application_data
    ):
        application_id = await repository.create(sample_application_data, Priority.NORMAL)
        original = await repository.get_by_id(application_id)

        updated = await repository.update(
            application_id,
            lambda record: record.model_copy(update={"assigned_to": "lisa.davis@example.edu"}),
        )

        assert updated.assigned_to == "lisa.davis@example.edu"
        assert updated.updated_at >= original.created_at
        stored = await repository.get_by_id(application_id)
        assert stored.assigned_to == "lisa.davis@example.edu"

    @pytest.mark.asyncio
    async def test_update_unknown_id_raises_not_found(self, repository):
        with pytest.raises(ApplicationNotFoundError) as exc_info:
            await repository.update("APP0000000000000XXXXX", lambda record: record)

        assert exc_info.value.error_code == "APPLICATION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_changing_id_is_rejected(self, repository, sample_application_data):
        application_id = await repository.create(sample_application_data, Priority.NORMAL)

        with pytest.raises(RecordIntegrityError):
            await repository.update(
                application_id, lambda record: record.model_copy(update={"id": "APP1"})
            )

        assert await repository.get_by_id(application_id) is not None

    @pytest.mark.asyncio
    async def test_removing_notes_is_rejected(
        self, repository, sample_application_data, fixed_clock
    ):
        application_id = await repository.create(sample_application_data, Priority.NORMAL)
        note = ApplicationNote(text="Called parent", timestamp=fixed_clock(), author="admin")
        await repository.update(
            application_id, lambda record: record.model_copy(update={"notes": [note]})
        )

        with pytest.raises(RecordIntegrityError):
            await repository.update(
                application_id, lambda record: record.model_copy(update={"notes": []})
            )

        stored = await repository.get_by_id(application_id)
        assert [n.text for n in stored.notes] == ["Called parent"]


class TestAuditLog:
    """Tests for AuditLog."""

    @pytest.mark.asyncio
    async def test_history_filters_by_application(self, audit_log):
        await audit_log.append("APP1", AuditEventType.APPLICATION_CREATED, {"a": 1})
        await audit_log.append("APP2", AuditEventType.APPLICATION_CREATED, {"b": 2})
        await audit_log.append("APP1", AuditEventType.ADMIN_NOTIFIED)

        history = await audit_log.history("APP1")

        assert [entry.event_type for entry in history] == [
            AuditEventType.APPLICATION_CREATED,
            AuditEventType.ADMIN_NOTIFIED,
        ]
        assert history[1].payload == {}
        assert len(await audit_log.list_all()) == 3

    @pytest.mark.asyncio
    async def test_history_of_unknown_application_is_empty(self, audit_log):
        assert await audit_log.history("APP-missing") == []

    @pytest.mark.asyncio
    async def test_entries_are_stored_in_camel_case(self, audit_log, store, settings):
        await audit_log.append("APP1", AuditEventType.TASKS_SCHEDULED, {"tasks": 2})

        raw = json.loads(await store.get(f"{settings.store_namespace}:auditLog"))

        assert raw == [
            {
                "applicationId": "APP1",
                "eventType": "TASKS_SCHEDULED",
                "payload": {"tasks": 2},
                "timestamp": raw[0]["timestamp"],
                "userAgent": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_empty_stored_value_reads_as_empty(self, audit_log, store, settings):
        await store.set(f"{settings.store_namespace}:auditLog", "")
        assert await audit_log.list_all() == []
