"""
ListActivityHandler.

Handles the list activity query for the admin dashboard.
"""
from typing import List

from activity.application.queries.list_activity import ListActivityQuery
from activity.domain.activity import ActivityEntry
from activity.ports.activity_repository import ActivityRepository


class ListActivityHandler:
    """Handler for ListActivityQuery."""

    def __init__(self, activity_repository: ActivityRepository):
        """Initialize handler with repository."""
        self.activity_repository = activity_repository

    async def handle(self, query: ListActivityQuery) -> List[ActivityEntry]:
        """
        Handle list activity query.

        Args:
            query: ListActivityQuery

        Returns:
            Entries, newest first
        """
        return await self.activity_repository.list_recent(query.limit)
