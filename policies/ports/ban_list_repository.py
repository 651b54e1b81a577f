"""
Ban list repository port (interface).

This defines the contract for ban list persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod

from policies.domain.ban_list import BanList


class BanListRepository(ABC):
    """Abstract repository for the global ban list."""

    @abstractmethod
    async def get(self) -> BanList:
        """
        Get the current ban list.

        Returns:
            BanList (empty when nothing is stored)
        """
        pass

    @abstractmethod
    async def add(self, hwid: str) -> bool:
        """
        Add a HWID to the ban list.

        Args:
            hwid: HWID to ban, trimmed before it is stored

        Returns:
            True if added, False if it was already banned

        Raises:
            ValueError: If the HWID is empty or whitespace-only
        """
        pass

    @abstractmethod
    async def remove(self, hwid: str) -> bool:
        """
        Remove every occurrence of a HWID from the ban list.

        Args:
            hwid: HWID to unban, trimmed before matching

        Returns:
            True if the HWID was on the list

        Raises:
            ValueError: If the HWID is empty or whitespace-only
        """
        pass
