"""
Document store implementation of ResetRequestRepository port.
"""
from dataclasses import replace
from typing import List, Optional

from core.domain.exceptions import MalformedDocumentError
from core.domain.timestamps import format_timestamp, parse_timestamp
from core.infrastructure.document_store import Document, DocumentStore
from resets.domain.reset_request import DEFAULT_REASON, HwidResetRequest, ResetRequestStatus
from resets.ports.reset_request_repository import ResetRequestRepository

RESET_REQUESTS_COLLECTION = "hwidRequests"


class DocumentResetRequestRepository(ResetRequestRepository):
    """Document store implementation of ResetRequestRepository."""

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store."""
        self.store = store

    def _to_domain(self, key: str, document: Document) -> HwidResetRequest:
        """
        Convert a stored document to a HwidResetRequest.

        Args:
            key: Document key (request id)
            document: Stored hwidRequests document

        Returns:
            HwidResetRequest

        Raises:
            MalformedDocumentError: If required fields are missing or invalid
        """
        try:
            return HwidResetRequest(
                id=key,
                license=document.get("license") or "",
                hwid=document.get("hwid") or "",
                reason=document.get("reason") or DEFAULT_REASON,
                request_ip=document.get("requestIP") or "unknown",
                user_agent=document.get("userAgent") or "unknown",
                status=ResetRequestStatus(document.get("status") or "pending"),
                timestamp=parse_timestamp(document.get("timestamp")),
            )
        except ValueError as e:
            raise MalformedDocumentError(
                f"Reset request {key} is malformed: {e}", RESET_REQUESTS_COLLECTION
            ) from e

    def _to_document(self, request: HwidResetRequest) -> Document:
        """Convert a HwidResetRequest to a stored document."""
        return {
            "license": request.license,
            "hwid": request.hwid,
            "reason": request.reason,
            "requestIP": request.request_ip,
            "userAgent": request.user_agent,
            "status": request.status.value,
            "timestamp": format_timestamp(request.timestamp),
        }

    async def add(self, request: HwidResetRequest) -> HwidResetRequest:
        """Store a new request under a generated id."""
        key = await self.store.add(RESET_REQUESTS_COLLECTION, self._to_document(request))
        return replace(request, id=key)

    async def find_by_id(self, request_id: str) -> Optional[HwidResetRequest]:
        """Find a request by id."""
        document = await self.store.get(RESET_REQUESTS_COLLECTION, request_id)
        if document is None:
            return None
        return self._to_domain(request_id, document)

    async def list_pending(self) -> List[HwidResetRequest]:
        """List pending requests, newest first."""
        rows = await self.store.query(
            RESET_REQUESTS_COLLECTION, order_by="timestamp", descending=True
        )
        return [
            self._to_domain(key, document)
            for key, document in rows
            if (document.get("status") or "pending") == ResetRequestStatus.PENDING.value
        ]

    async def delete(self, request_id: str) -> bool:
        """Delete a request."""
        return await self.store.delete(RESET_REQUESTS_COLLECTION, request_id)
