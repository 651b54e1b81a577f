"""
License repository port (interface).

This defines the contract for license record persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from licenses.domain.license import LicenseMutation, LicenseRecord


class LicenseRepository(ABC):
    """
    Abstract repository for LicenseRecord entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[LicenseRecord]:
        """
        Find a license record by key.

        Args:
            key: License key

        Returns:
            LicenseRecord or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[LicenseRecord]:
        """
        List every license record, newest first.

        Returns:
            List of LicenseRecord
        """
        pass

    @abstractmethod
    async def create(self, record: LicenseRecord) -> bool:
        """
        Create a license record if its key is free.

        Args:
            record: Record to create

        Returns:
            True if created, False if the key already exists
        """
        pass

    @abstractmethod
    async def apply(self, key: str, mutation: LicenseMutation) -> bool:
        """
        Persist a mutation as one atomic write.

        When ``mutation.expected_hwid`` is set the write only happens if
        the stored record is still bound to that HWID.

        Args:
            key: License key
            mutation: Mutation to persist

        Returns:
            True if written, False if the record is missing or the
            HWID precondition failed
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a license record.

        Args:
            key: License key

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    async def find_keys_by_hwid(self, hwid: str) -> List[str]:
        """
        Find the keys of every license bound to a HWID.

        Args:
            hwid: HWID to look for

        Returns:
            License keys bound to the HWID
        """
        pass
