"""
Activity entry domain entity.

Activity entries form an append-only audit trail of client API calls
and admin actions.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ActivityAction(Enum):
    """Actions recorded in the activity log."""

    API_VALIDATE = "API_VALIDATE"
    API_REGISTER = "API_REGISTER"
    HWID_RESET_REQUEST = "HWID_RESET_REQUEST"
    ADMIN_LOGIN_SUCCESS = "ADMIN_LOGIN_SUCCESS"
    ADMIN_LOGIN_FAILED = "ADMIN_LOGIN_FAILED"
    ADMIN_LOGOUT = "ADMIN_LOGOUT"
    LICENSE_GENERATED = "LICENSE_GENERATED"
    BULK_GENERATE = "BULK_GENERATE"
    LICENSE_DELETED = "LICENSE_DELETED"
    HWID_RESET = "HWID_RESET"
    HWID_RESET_APPROVED = "HWID_RESET_APPROVED"
    HWID_RESET_DENIED = "HWID_RESET_DENIED"
    HWID_BANNED = "HWID_BANNED"
    HWID_UNBANNED = "HWID_UNBANNED"
    SETTINGS_UPDATED = "SETTINGS_UPDATED"

    def __str__(self) -> str:
        """Return action as string."""
        return self.value


@dataclass(frozen=True)
class ActivityEntry:
    """
    Activity entry domain entity.

    ``action`` is kept as a plain string when read back so that entries
    written by older deployments with unknown actions still load.
    """

    action: str
    details: str
    timestamp: datetime
    ip: str = "unknown"
    user_agent: str = "unknown"
    id: Optional[str] = None

    @classmethod
    def create(
        cls,
        action: ActivityAction,
        details: str,
        timestamp: datetime,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> "ActivityEntry":
        """
        Create a new ActivityEntry.

        Args:
            action: Activity action
            details: Free-text details
            timestamp: When it happened
            ip: Caller IP
            user_agent: Caller user agent

        Returns:
            ActivityEntry instance
        """
        return cls(
            action=action.value,
            details=details,
            timestamp=timestamp,
            ip=ip or "unknown",
            user_agent=user_agent or "unknown",
        )
