"""
Outcome codes returned by the client API.

Each operation has its own closed set of outcomes; the enum value is the
exact text sent to client software.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from licenses.domain.license import LicenseMutation


class ValidationOutcome(Enum):
    """Outcomes of validate(license, hwid)."""

    FAILED = "FAILED"
    API_DISABLED = "API_DISABLED"
    BANNED = "BANNED"
    INVALID_LICENSE = "INVALID_LICENSE"
    EXPIRED = "EXPIRED"
    VALID = "VALID"
    HWID_MISMATCH = "HWID_MISMATCH"
    ERROR = "ERROR"

    def __str__(self) -> str:
        """Return outcome as string."""
        return self.value


class RegistrationOutcome(Enum):
    """Outcomes of register(license, hwid)."""

    FAILED = "FAILED"
    API_DISABLED = "API_DISABLED"
    BANNED = "BANNED"
    INVALID_LICENSE = "INVALID_LICENSE"
    EXPIRED = "EXPIRED"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    HWID_IN_USE = "HWID_IN_USE"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"

    def __str__(self) -> str:
        """Return outcome as string."""
        return self.value


class LicenseCreationOutcome(Enum):
    """Outcomes of creating a license record."""

    CREATED = "CREATED"
    DUPLICATE_KEY = "DUPLICATE_KEY"

    def __str__(self) -> str:
        """Return outcome as string."""
        return self.value


OutcomeT = TypeVar("OutcomeT", ValidationOutcome, RegistrationOutcome)


@dataclass(frozen=True)
class Decision(Generic[OutcomeT]):
    """An outcome plus the record mutation that must be persisted, if any."""

    outcome: OutcomeT
    mutation: Optional[LicenseMutation] = None
