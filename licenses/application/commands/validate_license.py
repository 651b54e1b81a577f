"""
ValidateLicenseCommand.

Command sent by client software to check a license on a device.
"""
from dataclasses import dataclass, field

from core.domain.value_objects import RequestOrigin


@dataclass
class ValidateLicenseCommand:
    """Command to validate a license key against a HWID."""

    license_key: str
    hwid: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)
