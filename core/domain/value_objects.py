"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True, eq=False)
class RequestOrigin(ValueObject):
    """Where a request came from, recorded on activity entries and history."""

    ip: str = "unknown"
    user_agent: str = "unknown"
    actor: Optional[str] = None

    def __str__(self) -> str:
        """Return origin as string."""
        return f"{self.actor or 'anonymous'}@{self.ip}"


class LicenseStatus(Enum):
    """Display status of a license, derived at read time."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value
