"""
Fixtures for student applications tests.
"""

from datetime import UTC, datetime

import pytest

from intake.core.kv import MemoryKeyValueStore
from intake.modules.student_applications.audit import AuditLog
from intake.modules.student_applications.duplicates import DuplicateDetector
from intake.modules.student_applications.notifier import Notifier
from intake.modules.student_applications.repository import ApplicationRepository
from intake.modules.student_applications.scheduling import TaskScheduler
from intake.modules.student_applications.service import ApplicationPipeline

# Monday
FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=UTC)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def store():
    """Create an empty in-memory key/value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def audit_log(store, settings):
    return AuditLog(store, settings)


@pytest.fixture
def repository(store, audit_log, settings):
    return ApplicationRepository(store, audit_log, settings)


@pytest.fixture
def notifier(audit_log, settings):
    return Notifier(audit_log, settings)


@pytest.fixture
def task_scheduler(audit_log, settings, fixed_clock):
    return TaskScheduler(audit_log, settings, clock=fixed_clock)


@pytest.fixture
def pipeline(repository, audit_log, notifier, task_scheduler, settings):
    """Create a pipeline with real components over the in-memory store."""
    return ApplicationPipeline(
        repository=repository,
        audit_log=audit_log,
        duplicate_detector=DuplicateDetector(repository, settings),
        notifier=notifier,
        task_scheduler=task_scheduler,
        settings=settings,
    )


@pytest.fixture
def sample_application_data():
    """A fully valid form submission (grade 3, no special needs or medical info)."""
    return {
        "firstName": "Emma",
        "lastName": "Thompson",
        "dateOfBirth": "2015-04-12",
        "gender": "female",
        "grade": "grade3",
        "parentName": "Laura Thompson",
        "parentEmail": "laura.thompson@example.com",
        "parentPhone": "(555) 123-4567",
        "relationship": "mother",
        "address": "42 Maple Avenue, Springfield",
        "emergencyName": "David Thompson",
        "emergencyPhone": "+1 555 987 6543",
        "specialNeeds": "",
        "medicalInfo": "",
    }


@pytest.fixture
def second_application_data(sample_application_data):
    """A valid submission for a different student of the same family."""
    return {
        **sample_application_data,
        "firstName": "Oliver",
        "dateOfBirth": "2019-09-01",
        "grade": "kindergarten",
    }
