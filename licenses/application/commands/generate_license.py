"""
License generation commands.

Commands an admin uses to create one license or a batch of licenses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.domain.value_objects import RequestOrigin
from licenses.domain.license_key import DEFAULT_PREFIX

MAX_BULK_COUNT = 100


@dataclass
class GenerateLicenseCommand:
    """
    Command to create a single license.

    A key is generated when ``license_key`` is empty.
    """

    license_key: Optional[str] = None
    expiry: Optional[datetime] = None
    origin: RequestOrigin = field(default_factory=RequestOrigin)


@dataclass
class BulkGenerateLicensesCommand:
    """Command to create ``count`` licenses sharing one batch id."""

    count: int = 1
    prefix: str = DEFAULT_PREFIX
    expiry: Optional[datetime] = None
    origin: RequestOrigin = field(default_factory=RequestOrigin)

    def __post_init__(self):
        """Validate command."""
        if not 1 <= self.count <= MAX_BULK_COUNT:
            raise ValueError(f"count must be between 1 and {MAX_BULK_COUNT}")
        self.prefix = (self.prefix or DEFAULT_PREFIX).strip() or DEFAULT_PREFIX
