"""
Unit tests for service settings.
"""
import pytest

from core.domain.exceptions import MalformedDocumentError
from policies.domain.settings import ServiceSettings
from policies.infrastructure.repositories.document_settings_repository import (
    GENERAL_KEY,
    SETTINGS_COLLECTION,
)


class TestServiceSettings:
    """Tests for ServiceSettings entity."""

    def test_defaults(self):
        """Test default values."""
        settings = ServiceSettings()
        assert settings.api_enabled is True
        assert settings.max_devices_per_license == 1
        assert settings.allow_hwid_change is True
        assert settings.auto_expire_in_days == 30
        assert settings.maintenance_mode is False

    def test_updated(self):
        """Test that updated returns a changed copy."""
        settings = ServiceSettings().updated({"api_enabled": False})
        assert settings.api_enabled is False
        assert ServiceSettings().api_enabled is True

    def test_unknown_field(self):
        """Test that unknown fields are rejected."""
        with pytest.raises(ValueError, match="Unknown settings: colour"):
            ServiceSettings().updated({"colour": "red"})

    @pytest.mark.parametrize(
        "changes",
        [
            {"max_devices_per_license": 0},
            {"auto_expire_in_days": -1},
            {"api_enabled": "yes"},
            {"max_devices_per_license": True},
        ],
    )
    def test_invalid_values(self, changes):
        """Test that invalid values are rejected."""
        with pytest.raises(ValueError):
            ServiceSettings().updated(changes)


class TestDocumentSettingsRepository:
    """Tests for the settings/general document."""

    async def test_defaults_when_missing(self, settings_repository):
        """Test that a missing document yields defaults."""
        assert await settings_repository.get() == ServiceSettings()

    async def test_defaults_per_field(self, settings_repository, store):
        """Test that missing fields default individually."""
        await store.set(SETTINGS_COLLECTION, GENERAL_KEY, {"apiEnabled": False})
        settings = await settings_repository.get()
        assert settings.api_enabled is False
        assert settings.max_devices_per_license == 1

    async def test_update_merges(self, settings_repository, store):
        """Test that updates only write the changed fields."""
        await store.set(SETTINGS_COLLECTION, GENERAL_KEY, {"legacyFlag": "x"})

        await settings_repository.update({"maintenance_mode": True})

        document = await store.get(SETTINGS_COLLECTION, GENERAL_KEY)
        assert document == {"legacyFlag": "x", "maintenanceMode": True}
        assert (await settings_repository.get()).maintenance_mode is True

    async def test_wrong_type(self, settings_repository, store):
        """Test that a wrongly typed stored value is rejected."""
        await store.set(SETTINGS_COLLECTION, GENERAL_KEY, {"apiEnabled": "false"})
        with pytest.raises(MalformedDocumentError):
            await settings_repository.get()
