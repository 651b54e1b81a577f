"""
Integration tests for the Django document store adapter.
"""
from datetime import datetime, timezone

import pytest
from asgiref.sync import async_to_sync

from core.infrastructure.document_store_adapters import DjangoDocumentStore
from core.infrastructure.models import Document
from licenses.domain.license import LicenseMutation, LicenseRecord
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from policies.infrastructure.repositories.document_ban_list_repository import (
    DocumentBanListRepository,
)


@pytest.fixture
def django_store():
    """Fixture for DjangoDocumentStore."""
    return DjangoDocumentStore()


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoDocumentStore:
    """Tests for DjangoDocumentStore."""

    def test_create_and_get(self, django_store):
        """Test creating and reading a document."""
        assert async_to_sync(django_store.create)("licenses", "LIC-1", {"hwid": ""})
        assert not async_to_sync(django_store.create)("licenses", "LIC-1", {"hwid": "x"})

        assert async_to_sync(django_store.get)("licenses", "LIC-1") == {"hwid": ""}
        assert async_to_sync(django_store.get)("licenses", "LIC-2") is None
        assert Document.objects.filter(collection="licenses").count() == 1

    def test_set_merge(self, django_store):
        """Test replace and merge writes."""
        async_to_sync(django_store.set)("settings", "general", {"apiEnabled": True})
        async_to_sync(django_store.set)(
            "settings", "general", {"maintenanceMode": True}, merge=True
        )
        assert async_to_sync(django_store.get)("settings", "general") == {
            "apiEnabled": True,
            "maintenanceMode": True,
        }

    def test_conditional_update(self, django_store):
        """Test append and precondition handling."""
        async_to_sync(django_store.set)("licenses", "LIC-1", {"hwid": "", "history": []})

        assert async_to_sync(django_store.update)(
            "licenses",
            "LIC-1",
            {"hwid": "HW-1"},
            append={"history": [{"action": "REGISTER"}]},
            expected={"hwid": ""},
        )
        assert not async_to_sync(django_store.update)(
            "licenses", "LIC-1", {"hwid": "HW-2"}, expected={"hwid": ""}
        )
        assert not async_to_sync(django_store.update)("licenses", "LIC-X", {"hwid": "HW"})

        document = async_to_sync(django_store.get)("licenses", "LIC-1")
        assert document == {"hwid": "HW-1", "history": [{"action": "REGISTER"}]}

    def test_add_query_delete(self, django_store):
        """Test generated keys, ordering and deletion."""
        first = async_to_sync(django_store.add)("activityLog", {"timestamp": "2024-01-01"})
        second = async_to_sync(django_store.add)("activityLog", {"timestamp": "2024-01-02"})

        rows = async_to_sync(django_store.query)("activityLog", order_by="timestamp")
        assert [key for key, _ in rows] == [second, first]
        assert len(async_to_sync(django_store.get_all)("activityLog")) == 2

        assert async_to_sync(django_store.delete)("activityLog", first)
        assert not async_to_sync(django_store.delete)("activityLog", first)

    def test_license_repository_on_database(self, django_store):
        """Test the license repository end to end on the database."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        repository = DocumentLicenseRepository(django_store)
        async_to_sync(repository.create)(LicenseRecord.create(key="LIC-1", created_at=now))

        bind = LicenseMutation.bind(hwid="HW-1", now=now, expected_hwid="")
        assert async_to_sync(repository.apply)("LIC-1", bind)
        assert not async_to_sync(repository.apply)("LIC-1", bind)

        record = async_to_sync(repository.find_by_key)("LIC-1")
        assert record.hwid == "HW-1"
        assert len(record.history) == 1
        assert async_to_sync(repository.find_keys_by_hwid)("HW-1") == ["LIC-1"]

    def test_ban_list_on_database(self, django_store):
        """Test the ban list repository on the database."""
        repository = DocumentBanListRepository(django_store)
        assert async_to_sync(repository.add)("HW-1")
        assert not async_to_sync(repository.add)("HW-1")
        assert async_to_sync(repository.remove)("HW-1")
        assert len(async_to_sync(repository.get)()) == 0
