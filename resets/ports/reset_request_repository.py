"""
HWID reset request repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from resets.domain.reset_request import HwidResetRequest


class ResetRequestRepository(ABC):
    """Abstract repository for HwidResetRequest entities."""

    @abstractmethod
    async def add(self, request: HwidResetRequest) -> HwidResetRequest:
        """
        Store a new request under a generated id.

        Args:
            request: Request to store

        Returns:
            Stored request with its id
        """
        pass

    @abstractmethod
    async def find_by_id(self, request_id: str) -> Optional[HwidResetRequest]:
        """
        Find a request by id.

        Args:
            request_id: Request id

        Returns:
            HwidResetRequest or None if not found
        """
        pass

    @abstractmethod
    async def list_pending(self) -> List[HwidResetRequest]:
        """
        List pending requests, newest first.

        Returns:
            List of HwidResetRequest
        """
        pass

    @abstractmethod
    async def delete(self, request_id: str) -> bool:
        """
        Delete a request.

        Args:
            request_id: Request id

        Returns:
            True if a request was deleted
        """
        pass
