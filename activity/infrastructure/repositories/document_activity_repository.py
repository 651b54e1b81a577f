"""
Document store implementation of ActivityRepository port.
"""
from dataclasses import replace
from typing import List

from core.domain.exceptions import MalformedDocumentError
from core.domain.timestamps import format_timestamp, parse_timestamp
from core.infrastructure.document_store import Document, DocumentStore
from activity.domain.activity import ActivityEntry
from activity.ports.activity_repository import DEFAULT_LIMIT, ActivityRepository

ACTIVITY_COLLECTION = "activityLog"


class DocumentActivityRepository(ActivityRepository):
    """
    Document store implementation of ActivityRepository.

    Entries are stored under generated keys and read back ordered by
    ``timestamp``.
    """

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store."""
        self.store = store

    def _to_domain(self, key: str, document: Document) -> ActivityEntry:
        """
        Convert a stored document to an ActivityEntry.

        Args:
            key: Document key
            document: Stored activityLog document

        Returns:
            ActivityEntry
        """
        try:
            timestamp = parse_timestamp(document.get("timestamp") or document.get("date"))
        except ValueError as e:
            raise MalformedDocumentError(
                f"Activity entry {key} has an invalid timestamp", ACTIVITY_COLLECTION
            ) from e
        return ActivityEntry(
            id=key,
            action=str(document.get("action", "")),
            details=str(document.get("details", "")),
            timestamp=timestamp,
            ip=document.get("ip") or "unknown",
            user_agent=document.get("userAgent") or "unknown",
        )

    def _to_document(self, entry: ActivityEntry) -> Document:
        """Convert an ActivityEntry to a stored document."""
        stamp = format_timestamp(entry.timestamp)
        return {
            "timestamp": stamp,
            "action": entry.action,
            "details": entry.details,
            "ip": entry.ip,
            "userAgent": entry.user_agent,
            "date": stamp,
        }

    async def append(self, entry: ActivityEntry) -> ActivityEntry:
        """Append an activity entry."""
        key = await self.store.add(ACTIVITY_COLLECTION, self._to_document(entry))
        return replace(entry, id=key)

    async def list_recent(self, limit: int = DEFAULT_LIMIT) -> List[ActivityEntry]:
        """List the most recent entries, newest first."""
        rows = await self.store.query(
            ACTIVITY_COLLECTION, order_by="timestamp", descending=True, limit=limit
        )
        return [self._to_domain(key, document) for key, document in rows]
