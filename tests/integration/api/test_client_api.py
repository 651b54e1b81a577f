"""
Integration tests for the client API.
"""
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.urls import reverse

from core.infrastructure.document_store_adapters import DjangoDocumentStore
from licenses.domain.license import LicenseRecord
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from policies.infrastructure.repositories.document_ban_list_repository import (
    DocumentBanListRepository,
)
from resets.infrastructure.repositories.document_reset_request_repository import (
    DocumentResetRequestRepository,
)


@pytest.fixture
def db_store(db):
    """Fixture for the database-backed document store."""
    return DjangoDocumentStore()


@pytest.fixture
def db_license(db_store):
    """Fixture for an unbound license saved in the database."""
    record = LicenseRecord.create(
        key="LIC-AAAA", created_at=datetime.now(timezone.utc), created_by="admin"
    )
    async_to_sync(DocumentLicenseRepository(db_store).create)(record)
    return record


def _call(api_client, name, license_key, hwid):
    response = api_client.get(reverse(name), {"license": license_key, "hwid": hwid})
    assert response.status_code == 200
    assert response["Content-Type"].startswith("text/plain")
    return response.content.decode()


@pytest.mark.django_db
@pytest.mark.integration
class TestClientAPI:
    """Integration tests for validate, register and license-info."""

    def test_validate_missing_params(self, api_client):
        """Test that missing parameters answer FAILED."""
        response = api_client.get(reverse("client:validate"))
        assert response.status_code == 200
        assert response.content.decode() == "FAILED"

    def test_validate_unknown(self, api_client):
        """Test that an unknown license is INVALID_LICENSE."""
        assert _call(api_client, "client:validate", "LIC-NONE", "HW-1") == "INVALID_LICENSE"

    def test_register_then_validate(self, api_client, db_license, db_store):
        """Test the full client flow for one license."""
        assert _call(api_client, "client:validate", "LIC-AAAA", "HW-1") == "HWID_MISMATCH"
        assert _call(api_client, "client:register", "LIC-AAAA", "HW-1") == "SUCCESS"
        assert _call(api_client, "client:register", "LIC-AAAA", "HW-1") == "SUCCESS"
        assert _call(api_client, "client:validate", "LIC-AAAA", "HW-1") == "VALID"
        assert _call(api_client, "client:validate", "LIC-AAAA", "HW-2") == "HWID_MISMATCH"
        assert _call(api_client, "client:register", "LIC-AAAA", "HW-2") == "ALREADY_REGISTERED"

        record = async_to_sync(DocumentLicenseRepository(db_store).find_by_key)("LIC-AAAA")
        assert record.hwid == "HW-1"
        assert len(record.history) == 2

    def test_banned_hwid(self, api_client, db_license, db_store):
        """Test that a banned HWID is rejected."""
        async_to_sync(DocumentBanListRepository(db_store).add)("HW-BAD")
        assert _call(api_client, "client:register", "LIC-AAAA", "HW-BAD") == "BANNED"

    def test_hwid_in_use(self, api_client, db_license, db_store):
        """Test that one HWID cannot hold two licenses."""
        second = LicenseRecord.create(key="LIC-BBBB", created_at=datetime.now(timezone.utc))
        async_to_sync(DocumentLicenseRepository(db_store).create)(second)

        assert _call(api_client, "client:register", "LIC-AAAA", "HW-1") == "SUCCESS"
        assert _call(api_client, "client:register", "LIC-BBBB", "HW-1") == "HWID_IN_USE"

    def test_expired(self, api_client, db_store):
        """Test that an expired license is EXPIRED."""
        record = LicenseRecord.create(
            key="LIC-OLD",
            created_at=datetime.now(timezone.utc),
            expiry=datetime.now(timezone.utc) - timedelta(days=1),
        )
        async_to_sync(DocumentLicenseRepository(db_store).create)(record)
        assert _call(api_client, "client:validate", "LIC-OLD", "HW-1") == "EXPIRED"

    def test_whitespace_is_significant(self, api_client, db_license):
        """Test that keys are not trimmed."""
        assert _call(api_client, "client:validate", " LIC-AAAA", "HW-1") == "INVALID_LICENSE"

    def test_license_info(self, api_client, db_license):
        """Test the license summary."""
        response = api_client.get(reverse("client:license-info"), {"license": "LIC-AAAA"})
        assert response.status_code == 200
        assert response.content.decode() == (
            "Status: INACTIVE | Activated: Not activated | Expires: Never | Last Seen: Never"
        )

    def test_license_info_not_found(self, api_client):
        """Test the summary of an unknown license."""
        response = api_client.get(reverse("client:license-info"), {"license": "LIC-NONE"})
        assert response.content.decode() == "License not found."


@pytest.mark.django_db
@pytest.mark.integration
class TestRequestHwidResetAPI:
    """Integration tests for request-hwid-reset."""

    def test_request_reset(self, api_client, db_store):
        """Test submitting a reset request."""
        response = api_client.post(
            reverse("client:request-hwid-reset"),
            {"license": "LIC-AAAA", "hwid": "HW-NEW", "reason": "new PC"},
            format="json",
            HTTP_X_FORWARDED_FOR="203.0.113.7",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "REQUESTED"
        request = async_to_sync(DocumentResetRequestRepository(db_store).find_by_id)(
            data["requestId"]
        )
        assert request.license == "LIC-AAAA"
        assert request.reason == "new PC"
        assert request.request_ip == "203.0.113.7"

    def test_missing_fields(self, api_client):
        """Test that license and HWID are required."""
        response = api_client.post(
            reverse("client:request-hwid-reset"), {"license": "LIC-AAAA"}, format="json"
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Missing license or HWID"}
