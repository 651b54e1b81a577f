"""
HWID reset request commands.
"""
from dataclasses import dataclass, field
from typing import Optional

from core.domain.value_objects import RequestOrigin


@dataclass
class RequestHwidResetCommand:
    """Command sent by client software to ask for a HWID reset."""

    license_key: str
    hwid: str
    reason: Optional[str] = None
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class ApproveHwidResetCommand:
    """Command to approve a pending reset request."""

    request_id: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class DenyHwidResetCommand:
    """Command to deny a pending reset request."""

    request_id: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)
