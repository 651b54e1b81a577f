"""
Ban list and settings commands.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.domain.value_objects import RequestOrigin


@dataclass
class BanHwidCommand:
    """Command to add a HWID to the global ban list."""

    hwid: str
    reason: Optional[str] = None
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class UnbanHwidCommand:
    """Command to remove a HWID from the global ban list."""

    hwid: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class UpdateSettingsCommand:
    """Command to change some service settings."""

    changes: Dict[str, Any]
    origin: RequestOrigin = field(default_factory=RequestOrigin)
