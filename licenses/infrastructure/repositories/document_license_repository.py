"""
Document store implementation of LicenseRepository port.

This adapter converts between LicenseRecord entities and camelCase
documents in the ``licenses`` collection.
"""
import logging
from typing import Any, List, Optional

from core.domain.exceptions import MalformedDocumentError
from core.domain.timestamps import format_timestamp, parse_timestamp
from core.infrastructure.document_store import Document, DocumentStore
from licenses.domain.license import (
    HistoryAction,
    HistoryEntry,
    LicenseMutation,
    LicenseRecord,
)
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

LICENSES_COLLECTION = "licenses"

# LicenseRecord attribute -> stored field name
FIELD_NAMES = {
    "hwid": "hwid",
    "expiry": "expiry",
    "activated_at": "activatedAt",
    "last_validated": "lastValidated",
    "created_at": "createdAt",
    "created_by": "createdBy",
    "activation_ip": "activationIP",
    "device_info": "deviceInfo",
    "batch_id": "batchId",
}
TIMESTAMP_FIELDS = {"expiry", "activated_at", "last_validated", "created_at"}


def _stored_value(attribute: str, value: Any) -> Any:
    """Convert an attribute value to its stored form."""
    if attribute in TIMESTAMP_FIELDS:
        # unset timestamps are stored as "" for compatibility with existing data
        return format_timestamp(value) or ""
    return value


class DocumentLicenseRepository(LicenseRepository):
    """
    Document store implementation of LicenseRepository.

    This adapter:
    1. Converts documents to LicenseRecord entities
    2. Converts LicenseRecord entities and mutations to documents
    3. Applies binding mutations as compare-and-swap writes on ``hwid``
    """

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store."""
        self.store = store

    def _history_to_domain(self, raw: Any) -> HistoryEntry:
        if not isinstance(raw, dict):
            raise ValueError("history entry must be an object")
        return HistoryEntry(
            action=HistoryAction(raw.get("action")),
            date=parse_timestamp(raw.get("date")),
            details=raw.get("details"),
            ip=raw.get("ip"),
            admin=raw.get("admin"),
        )

    def _history_to_document(self, entry: HistoryEntry) -> Document:
        document = {"action": entry.action.value, "date": format_timestamp(entry.date)}
        for name in ("details", "ip", "admin"):
            value = getattr(entry, name)
            if value is not None:
                document[name] = value
        return document

    def _to_domain(self, key: str, document: Document) -> LicenseRecord:
        """
        Convert a stored document to a LicenseRecord.

        Args:
            key: License key (document key)
            document: Stored licenses document

        Returns:
            LicenseRecord

        Raises:
            MalformedDocumentError: If a field cannot be parsed
        """
        try:
            values = {}
            for attribute, stored_name in FIELD_NAMES.items():
                value = document.get(stored_name)
                if attribute in TIMESTAMP_FIELDS:
                    value = parse_timestamp(value)
                values[attribute] = value
            values["hwid"] = values["hwid"] or ""
            history = document.get("history") or []
            if not isinstance(history, list):
                raise ValueError("history must be a list")
            return LicenseRecord(
                key=key,
                history=tuple(self._history_to_domain(raw) for raw in history),
                **values,
            )
        except (TypeError, ValueError) as e:
            logger.error("Malformed license document %s: %s", key, e)
            raise MalformedDocumentError(
                f"License {key} is malformed: {e}", LICENSES_COLLECTION
            ) from e

    def _to_document(self, record: LicenseRecord) -> Document:
        """
        Convert a LicenseRecord to a stored document.

        Args:
            record: LicenseRecord entity

        Returns:
            Document with camelCase field names
        """
        document = {
            stored_name: _stored_value(attribute, getattr(record, attribute))
            for attribute, stored_name in FIELD_NAMES.items()
        }
        if record.batch_id is None:
            del document["batchId"]
        document["history"] = [self._history_to_document(e) for e in record.history]
        return document

    async def find_by_key(self, key: str) -> Optional[LicenseRecord]:
        """Find a license record by key."""
        document = await self.store.get(LICENSES_COLLECTION, key)
        if document is None:
            return None
        return self._to_domain(key, document)

    async def list_all(self) -> List[LicenseRecord]:
        """List every license record, newest first."""
        rows = await self.store.query(LICENSES_COLLECTION, order_by="createdAt", descending=True)
        return [self._to_domain(key, document) for key, document in rows]

    async def create(self, record: LicenseRecord) -> bool:
        """Create a license record if its key is free."""
        return await self.store.create(LICENSES_COLLECTION, record.key, self._to_document(record))

    async def apply(self, key: str, mutation: LicenseMutation) -> bool:
        """Persist a mutation as one atomic write."""
        fields = {
            FIELD_NAMES[attribute]: _stored_value(attribute, value)
            for attribute, value in mutation.changes.items()
        }
        append = None
        if mutation.history_entry is not None:
            append = {"history": [self._history_to_document(mutation.history_entry)]}
        expected = None
        if mutation.expected_hwid is not None:
            expected = {"hwid": mutation.expected_hwid}
        return await self.store.update(
            LICENSES_COLLECTION, key, fields, append=append, expected=expected
        )

    async def delete(self, key: str) -> bool:
        """Delete a license record."""
        return await self.store.delete(LICENSES_COLLECTION, key)

    async def find_keys_by_hwid(self, hwid: str) -> List[str]:
        """Find the keys of every license bound to a HWID."""
        documents = await self.store.get_all(LICENSES_COLLECTION)
        return [key for key, document in documents.items() if document.get("hwid") == hwid]
