"""
HWID reset request domain entity.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

DEFAULT_REASON = "No reason provided"


class ResetRequestStatus(Enum):
    """Status of a HWID reset request."""

    PENDING = "pending"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


@dataclass(frozen=True)
class HwidResetRequest:
    """
    HWID reset request domain entity.

    Requests are resolved by deletion, so every stored request is
    pending.
    """

    license: str
    hwid: str
    timestamp: datetime
    reason: str = DEFAULT_REASON
    request_ip: str = "unknown"
    user_agent: str = "unknown"
    status: ResetRequestStatus = ResetRequestStatus.PENDING
    id: Optional[str] = None

    def __post_init__(self):
        """Validate reset request."""
        if not self.license or not self.hwid:
            raise ValueError("Missing license or HWID")

    @classmethod
    def create(
        cls,
        license: str,
        hwid: str,
        timestamp: datetime,
        reason: Optional[str] = None,
        request_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> "HwidResetRequest":
        """
        Create a new pending HwidResetRequest.

        Args:
            license: License key the reset is requested for
            hwid: HWID the caller reports
            timestamp: Submission time
            reason: Free-text reason
            request_ip: Caller IP
            user_agent: Caller user agent

        Returns:
            HwidResetRequest instance
        """
        return cls(
            license=license,
            hwid=hwid,
            timestamp=timestamp,
            reason=reason or DEFAULT_REASON,
            request_ip=request_ip or "unknown",
            user_agent=user_agent or "unknown",
        )
