"""
Activity logging service.

Writes audit entries on behalf of client and admin handlers. A failed
write never changes the outcome of the operation being logged.
"""
import logging
from typing import Optional

from activity.domain.activity import ActivityAction, ActivityEntry
from activity.ports.activity_repository import ActivityRepository
from core.domain.exceptions import PersistenceError
from core.domain.timestamps import Clock, utcnow
from core.domain.value_objects import RequestOrigin

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Service for writing activity entries."""

    def __init__(self, activity_repository: ActivityRepository, clock: Clock = utcnow):
        """Initialize service with repository and clock."""
        self.activity_repository = activity_repository
        self.clock = clock

    async def log(
        self,
        action: ActivityAction,
        details: str,
        origin: Optional[RequestOrigin] = None,
    ) -> Optional[ActivityEntry]:
        """
        Append an activity entry.

        Args:
            action: Activity action
            details: Free-text details
            origin: Caller IP and user agent

        Returns:
            Stored entry, or None if the write failed
        """
        origin = origin or RequestOrigin()
        entry = ActivityEntry.create(
            action=action,
            details=details,
            timestamp=self.clock(),
            ip=origin.ip,
            user_agent=origin.user_agent,
        )
        try:
            return await self.activity_repository.append(entry)
        except PersistenceError as e:
            logger.error(
                "Error logging activity %s: %s",
                action.value,
                e.message,
                extra={"action": action.value, "details": details},
                exc_info=True,
            )
            return None
