"""
Document store implementation of SettingsRepository port.
"""
from typing import Any, Dict, Mapping

from core.domain.exceptions import MalformedDocumentError
from core.infrastructure.document_store import Document, DocumentStore
from policies.domain.settings import ServiceSettings
from policies.ports.settings_repository import SettingsRepository

SETTINGS_COLLECTION = "settings"
GENERAL_KEY = "general"

# Stored field name -> (ServiceSettings attribute, type)
FIELD_MAP = {
    "apiEnabled": ("api_enabled", bool),
    "maxDevicesPerLicense": ("max_devices_per_license", int),
    "allowHwidChange": ("allow_hwid_change", bool),
    "autoExpireInDays": ("auto_expire_in_days", int),
    "maintenanceMode": ("maintenance_mode", bool),
}


class DocumentSettingsRepository(SettingsRepository):
    """
    Document store implementation of SettingsRepository.

    This adapter:
    1. Maps the camelCase settings/general document to ServiceSettings
    2. Applies defaults for every missing field
    3. Merges partial updates into the stored document
    """

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store."""
        self.store = store

    def _to_domain(self, document: Mapping[str, Any]) -> ServiceSettings:
        """
        Convert a stored document to ServiceSettings.

        Args:
            document: settings/general document (may be empty)

        Returns:
            ServiceSettings with defaults for missing fields

        Raises:
            MalformedDocumentError: If a stored value has the wrong type
        """
        values: Dict[str, Any] = {}
        for stored_name, (attribute, kind) in FIELD_MAP.items():
            value = document.get(stored_name)
            if value is None:
                continue
            # bool is a subclass of int
            if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
                raise MalformedDocumentError(
                    f"Setting '{stored_name}' has invalid value {value!r}",
                    SETTINGS_COLLECTION,
                )
            values[attribute] = value
        try:
            return ServiceSettings(**values)
        except ValueError as e:
            raise MalformedDocumentError(str(e), SETTINGS_COLLECTION) from e

    def _to_document(self, settings: ServiceSettings) -> Document:
        """Convert ServiceSettings to a stored document."""
        return {
            stored_name: getattr(settings, attribute)
            for stored_name, (attribute, _) in FIELD_MAP.items()
        }

    async def get(self) -> ServiceSettings:
        """Get current settings with defaults applied per field."""
        document = await self.store.get(SETTINGS_COLLECTION, GENERAL_KEY)
        return self._to_domain(document or {})

    async def update(self, changes: Mapping[str, Any]) -> ServiceSettings:
        """Merge changes into the stored settings."""
        current = await self.get()
        updated = current.updated(changes)
        document = self._to_document(updated)
        attributes = {attribute: stored for stored, (attribute, _) in FIELD_MAP.items()}
        await self.store.set(
            SETTINGS_COLLECTION,
            GENERAL_KEY,
            {attributes[name]: document[attributes[name]] for name in changes},
            merge=True,
        )
        return updated
