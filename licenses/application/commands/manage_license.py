"""
Admin license maintenance commands.
"""
from dataclasses import dataclass, field

from core.domain.value_objects import RequestOrigin


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license record."""

    license_key: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class ResetHwidCommand:
    """Command to unbind the HWID of a license."""

    license_key: str
    origin: RequestOrigin = field(default_factory=RequestOrigin)
