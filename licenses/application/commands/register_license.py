"""
RegisterLicenseCommand.

Command sent by client software to bind a license to a device.
"""
from dataclasses import dataclass, field

from core.domain.value_objects import RequestOrigin


@dataclass
class RegisterLicenseCommand:
    """Command to bind a HWID to a license key."""

    license_key: str
    hwid: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)
