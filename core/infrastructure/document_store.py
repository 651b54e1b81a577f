"""
Document store abstraction (port).

The license server keeps all of its state as JSON documents addressed
by (collection, key). This module defines the narrow interface the
repositories are written against; adapters live in
document_store_adapters.py.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Document = Dict[str, Any]


def fields_match(document: Mapping[str, Any], expected: Mapping[str, Any]) -> bool:
    """
    Check a document against an update precondition.

    Missing fields and empty values compare equal, so ``{"hwid": ""}``
    matches both a document with ``hwid=""`` and one with no ``hwid``.

    Args:
        document: Stored document
        expected: Field values the document must currently hold

    Returns:
        True if every expected field matches
    """
    for field, value in expected.items():
        current = document.get(field)
        if current in (None, "") and value in (None, ""):
            continue
        if current != value:
            return False
    return True


class DocumentStore(ABC):
    """
    Abstract document store port.

    Implementations guarantee atomicity per document only. No operation
    spans more than one document.
    """

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[Document]:
        """
        Get one document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            Document data or None if not found
        """
        pass

    @abstractmethod
    async def get_all(self, collection: str) -> Dict[str, Document]:
        """
        Get every document in a collection.

        Args:
            collection: Collection name

        Returns:
            Mapping of key to document data
        """
        pass

    @abstractmethod
    async def set(
        self, collection: str, key: str, data: Document, merge: bool = False
    ) -> None:
        """
        Write a document, creating it if needed.

        Args:
            collection: Collection name
            key: Document key
            data: Document data
            merge: Merge top-level fields into an existing document
                instead of replacing it
        """
        pass

    @abstractmethod
    async def create(self, collection: str, key: str, data: Document) -> bool:
        """
        Create a document only if the key is free.

        Args:
            collection: Collection name
            key: Document key
            data: Document data

        Returns:
            True if created, False if the key already exists
        """
        pass

    @abstractmethod
    async def update(
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
            expected: Precondition checked with fields_match() before writing

        Returns:
            True if written, False if the document is missing or the
            precondition failed
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, key: str) -> bool:
        """
        Delete a document.

        Args:
            collection: Collection name
            key: Document key

        Returns:
            True if a document was deleted
        """
        pass

    @abstractmethod
    async def add(self, collection: str, data: Document) -> str:
        """
        Insert a document under a generated key.

        Args:
            collection: Collection name
            data: Document data

        Returns:
            Generated key
        """
        pass

    @abstractmethod
    async def query(
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
            descending: Newest/largest first
            limit: Maximum number of documents (None for all)

        Returns:
            List of (key, document) pairs
        """
        pass
