"""
Document store adapter implementations.

Provides a Django ORM implementation of DocumentStore for production and
an in-memory implementation for tests and local tooling.
"""

import asyncio
import copy
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction

from core.domain.exceptions import PersistenceError
from core.infrastructure.document_store import Document, DocumentStore, fields_match
from core.infrastructure.models import Document as DocumentModel

logger = logging.getLogger(__name__)


def _merged(
    data: Document,
    fields: Document,
    append: Optional[Mapping[str, Sequence[Any]]],
) -> Document:
    """Return a copy of data with fields set and list items appended."""
    result = dict(data)
    result.update(fields)
    for field, items in (append or {}).items():
        result[field] = list(result.get(field) or []) + list(items)
    return result


def _sort_key(field: str):
    """Sort documents by a field; documents without the field sort lowest."""

    def key(item: Tuple[str, Document]):
        value = item[1].get(field)
        return (value is not None, "" if value is None else str(value))

    return key


class DjangoDocumentStore(DocumentStore):
    """
    Django ORM implementation of DocumentStore.

    This adapter:
    1. Stores each document as a row of the documents table
    2. Serialises conditional updates with select_for_update()
    3. Wraps database errors in PersistenceError
    """

    @sync_to_async
    def get(self, collection: str, key: str) -> Optional[Document]:
        """
        Get one document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            Document data or None if not found
        """
        try:
            model = DocumentModel.objects.filter(collection=collection, key=key).first()
        except DatabaseError as e:
            raise PersistenceError(f"Error reading {collection}/{key}", collection) from e
        return dict(model.data) if model else None

    @sync_to_async
    def get_all(self, collection: str) -> Dict[str, Document]:
        """
        Get every document in a collection.

        Args:
            collection: Collection name

        Returns:
            Mapping of key to document data
        """
        try:
            models = DocumentModel.objects.filter(collection=collection)
            return {model.key: dict(model.data) for model in models}
        except DatabaseError as e:
            raise PersistenceError(f"Error reading {collection}", collection) from e

    @sync_to_async
    def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        """
        Write a document, creating it if needed.

        Args:
            collection: Collection name
            key: Document key
            data: Document data
            merge: Merge into an existing document instead of replacing it
        """
        try:
            with transaction.atomic():
                model, created = DocumentModel.objects.select_for_update().get_or_create(
                    collection=collection, key=key, defaults={"data": data}
                )
                if not created:
                    model.data = _merged(model.data, data, None) if merge else data
                    model.save(update_fields=["data", "updated_at"])
        except DatabaseError as e:
            raise PersistenceError(f"Error writing {collection}/{key}", collection) from e

    @sync_to_async
    def create(self, collection: str, key: str, data: Document) -> bool:
        """
        Create a document only if the key is free.

        Args:
            collection: Collection name
            key: Document key
            data: Document data

        Returns:
            True if created, False if the key already exists
        """
        try:
            with transaction.atomic():
                DocumentModel.objects.create(collection=collection, key=key, data=data)
            return True
        except IntegrityError:
            logger.info("Document %s/%s already exists", collection, key)
            return False
        except DatabaseError as e:
            raise PersistenceError(f"Error creating {collection}/{key}", collection) from e

    @sync_to_async
    def update(
        self,
        collection: str,
        key: str,
        fields: Document,
        append: Optional[Mapping[str, Sequence[Any]]] = None,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """
        Atomically update an existing document.

        Args:
            collection: Collection name
            key: Document key
            fields: Top-level fields to set
            append: Items to append to list fields
            expected: Precondition on current field values

        Returns:
            True if written, False if missing or the precondition failed
        """
        try:
            with transaction.atomic():
                model = (
                    DocumentModel.objects.select_for_update()
                    .filter(collection=collection, key=key)
                    .first()
                )
                if model is None:
                    return False
                if expected and not fields_match(model.data, expected):
                    logger.info("Precondition failed for %s/%s", collection, key)
                    return False
                model.data = _merged(model.data, fields, append)
                model.save(update_fields=["data", "updated_at"])
                return True
        except DatabaseError as e:
            raise PersistenceError(f"Error updating {collection}/{key}", collection) from e

    @sync_to_async
    def delete(self, collection: str, key: str) -> bool:
        """
        Delete a document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            True if a document was deleted
        """
        try:
            deleted, _ = DocumentModel.objects.filter(collection=collection, key=key).delete()
        except DatabaseError as e:
            raise PersistenceError(f"Error deleting {collection}/{key}", collection) from e
        return deleted > 0

    @sync_to_async
    def add(self, collection: str, data: Document) -> str:
        """
        Insert a document under a generated key.

        Args:
            collection: Collection name
            data: Document data

        Returns:
            Generated key
        """
        key = uuid.uuid4().hex
        try:
            DocumentModel.objects.create(collection=collection, key=key, data=data)
        except DatabaseError as e:
            raise PersistenceError(f"Error adding to {collection}", collection) from e
        return key

    @sync_to_async
    def query(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Document]]:
        """
        List documents ordered by a top-level field.

        Args:
            collection: Collection name
            order_by: Field to order by
            descending: Largest first
            limit: Maximum number of documents

        Returns:
            List of (key, document) pairs
        """
        prefix = "-" if descending else ""
        try:
            queryset = DocumentModel.objects.filter(collection=collection).order_by(
                f"{prefix}data__{order_by}", f"{prefix}id"
            )
            if limit is not None:
                queryset = queryset[:limit]
            return [(model.key, dict(model.data)) for model in queryset]
        except DatabaseError as e:
            raise PersistenceError(f"Error querying {collection}", collection) from e


class InMemoryDocumentStore(DocumentStore):
    """
    In-memory implementation of DocumentStore.

    Writes are serialised with an asyncio.Lock. Documents are deep-copied
    on the way in and out so callers never share state with the store.
    """

    def __init__(self):
        """Initialize the store."""
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def get(self, collection: str, key: str) -> Optional[Document]:
        """Get one document."""
        data = self._collection(collection).get(key)
        return copy.deepcopy(data) if data is not None else None

    async def get_all(self, collection: str) -> Dict[str, Document]:
        """Get every document in a collection."""
        return copy.deepcopy(self._collection(collection))

    async def set(self, collection: str, key: str, data: Document, merge: bool = False) -> None:
        """Write a document, creating it if needed."""
        async with self._lock:
            documents = self._collection(collection)
            if merge and key in documents:
                documents[key] = _merged(documents[key], copy.deepcopy(data), None)
            else:
                documents[key] = copy.deepcopy(data)

    async def create(self, collection: str, key: str, data: Document) -> bool:
        """Create a document only if the key is free."""
        async with self._lock:
            documents = self._collection(collection)
            if key in documents:
                return False
            documents[key] = copy.deepcopy(data)
            return True

    async def update(
        self,
        collection: str,
        key: str,
        fields: Document,
        append: Optional[Mapping[str, Sequence[Any]]] = None,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Atomically update an existing document."""
        async with self._lock:
            documents = self._collection(collection)
            if key not in documents:
                return False
            if expected and not fields_match(documents[key], expected):
                return False
            documents[key] = _merged(
                documents[key], copy.deepcopy(fields), copy.deepcopy(append)
            )
            return True

    async def delete(self, collection: str, key: str) -> bool:
        """Delete a document."""
        async with self._lock:
            return self._collection(collection).pop(key, None) is not None

    async def add(self, collection: str, data: Document) -> str:
        """Insert a document under a generated key."""
        key = uuid.uuid4().hex
        async with self._lock:
            self._collection(collection)[key] = copy.deepcopy(data)
        return key

    async def query(
        self,
        collection: str,
        order_by: str,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Tuple[str, Document]]:
        """List documents ordered by a top-level field."""
        items = list(self._collection(collection).items())
        if descending:
            # ties keep insertion order, newest first
            items.reverse()
        items = sorted(
            items,
            key=_sort_key(order_by),
            reverse=descending,
        )
        if limit is not None:
            items = items[:limit]
        return [(key, copy.deepcopy(data)) for key, data in items]
