"""
Activity repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List

from activity.domain.activity import ActivityEntry

DEFAULT_LIMIT = 100


class ActivityRepository(ABC):
    """Abstract repository for the append-only activity log."""

    @abstractmethod
    async def append(self, entry: ActivityEntry) -> ActivityEntry:
        """
        Append an activity entry.

        Args:
            entry: Entry to store

        Returns:
            Stored entry with its generated id
        """
        pass

    @abstractmethod
    async def list_recent(self, limit: int = DEFAULT_LIMIT) -> List[ActivityEntry]:
        """
        List the most recent entries, newest first.

        Args:
            limit: Maximum number of entries

        Returns:
            List of ActivityEntry
        """
        pass
