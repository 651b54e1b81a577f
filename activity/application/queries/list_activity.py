"""
ListActivityQuery.

Query to read the most recent activity entries.
"""
from dataclasses import dataclass

from activity.ports.activity_repository import DEFAULT_LIMIT

MAX_LIMIT = 1000


@dataclass
class ListActivityQuery:
    """Query to list recent activity entries."""

    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        """Validate query."""
        if self.limit < 1 or self.limit > MAX_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_LIMIT}")
