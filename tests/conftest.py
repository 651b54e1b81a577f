"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from activity.application.services.activity_logger import ActivityLogger
from activity.infrastructure.repositories.document_activity_repository import (
    DocumentActivityRepository,
)
from core.domain.value_objects import RequestOrigin
from core.infrastructure.document_store_adapters import InMemoryDocumentStore
from licenses.domain.license import LicenseMutation, LicenseRecord
from licenses.domain.services import LicenseStateMachine
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from policies.infrastructure.repositories.document_ban_list_repository import (
    DocumentBanListRepository,
)
from policies.infrastructure.repositories.document_settings_repository import (
    DocumentSettingsRepository,
)
from resets.infrastructure.repositories.document_reset_request_repository import (
    DocumentResetRequestRepository,
)

START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock; each call returns the current fake time."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Fixture for a fake clock starting at 2024-01-01 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def store():
    """Fixture for an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def license_repository(store):
    """Fixture for LicenseRepository."""
    return DocumentLicenseRepository(store)


@pytest.fixture
def ban_list_repository(store):
    """Fixture for BanListRepository."""
    return DocumentBanListRepository(store)


@pytest.fixture
def settings_repository(store):
    """Fixture for SettingsRepository."""
    return DocumentSettingsRepository(store)


@pytest.fixture
def activity_repository(store):
    """Fixture for ActivityRepository."""
    return DocumentActivityRepository(store)


@pytest.fixture
def reset_request_repository(store):
    """Fixture for ResetRequestRepository."""
    return DocumentResetRequestRepository(store)


@pytest.fixture
def activity_logger(activity_repository, clock):
    """Fixture for ActivityLogger."""
    return ActivityLogger(activity_repository, clock=clock)


@pytest.fixture
def state_machine(license_repository, ban_list_repository, settings_repository, clock):
    """Fixture for LicenseStateMachine."""
    return LicenseStateMachine(
        license_repository=license_repository,
        ban_list_repository=ban_list_repository,
        settings_repository=settings_repository,
        clock=clock,
    )


@pytest.fixture
def origin():
    """Fixture for a client request origin."""
    return RequestOrigin(ip="203.0.113.7", user_agent="client/1.0")


@pytest.fixture
def admin_origin():
    """Fixture for an admin request origin."""
    return RequestOrigin(ip="198.51.100.1", user_agent="browser", actor="admin")


@pytest.fixture
def make_license(license_repository, clock):
    """Fixture returning a coroutine that stores a license record."""

    async def _make(key, hwid="", expiry=None, created_at=None):
        record = LicenseRecord.create(
            key=key, created_at=created_at or clock(), created_by="admin", expiry=expiry
        )
        assert await license_repository.create(record)
        if hwid:
            await license_repository.apply(
                key, LicenseMutation.bind(hwid=hwid, now=clock(), expected_hwid="")
            )
        return await license_repository.find_by_key(key)

    return _make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(db, api_client):
    """Fixture for an API client holding an admin session."""
    from django.urls import reverse

    response = api_client.post(
        reverse("admin-api:login"),
        {"username": "admin", "password": "admin-password"},
        format="json",
    )
    assert response.status_code == 200
    return api_client
