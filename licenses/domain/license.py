"""
License record domain entity.

This is the core domain entity representing a license key and the device
bound to it. It contains business logic and is independent of
infrastructure.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.domain.value_objects import LicenseStatus


class HistoryAction(Enum):
    """Actions recorded in a license's history."""

    REGISTER = "REGISTER"
    HWID_RESET_BY_ADMIN = "HWID_RESET_BY_ADMIN"
    HWID_RESET_APPROVED = "HWID_RESET_APPROVED"

    def __str__(self) -> str:
        """Return action as string."""
        return self.value


@dataclass(frozen=True)
class HistoryEntry:
    """One append-only entry of a license's history."""

    action: HistoryAction
    date: datetime
    details: Optional[str] = None
    ip: Optional[str] = None
    admin: Optional[str] = None


@dataclass(frozen=True)
class LicenseRecord:
    """
    License record domain entity.

    An empty ``hwid`` means the license is not bound to a device.
    Expiry is never stored as a state: it is derived from ``expiry`` at
    read time.
    """

    key: str
    hwid: str = ""
    expiry: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    last_validated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    history: Tuple[HistoryEntry, ...] = field(default_factory=tuple)
    activation_ip: Optional[str] = None
    device_info: Optional[str] = None
    batch_id: Optional[Any] = None

    def __post_init__(self):
        """Validate license record."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.key) > 255:
            raise ValueError("License key too long")

    @classmethod
    def create(
        cls,
        key: str,
        created_at: datetime,
        created_by: Optional[str] = None,
        expiry: Optional[datetime] = None,
        batch_id: Optional[Any] = None,
    ) -> "LicenseRecord":
        """
        Create a new, unbound LicenseRecord.

        Args:
            key: License key
            created_at: Creation time
            created_by: Admin who created the license
            expiry: Optional expiration time
            batch_id: Batch identifier for bulk-created keys

        Returns:
            LicenseRecord instance
        """
        return cls(
            key=key,
            expiry=expiry,
            created_at=created_at,
            created_by=created_by,
            batch_id=batch_id,
        )

    @property
    def is_bound(self) -> bool:
        """True if a HWID is bound to this license."""
        return bool(self.hwid)

    def is_expired(self, now: datetime) -> bool:
        """
        Check if the license is expired.

        A license expires one instant after its expiry timestamp, so
        ``now == expiry`` is still valid.

        Args:
            now: Current time

        Returns:
            True if an expiry is set and now is past it
        """
        if self.expiry is None:
            return False
        return now > self.expiry

    def status(self, now: datetime) -> LicenseStatus:
        """
        Derive the display status.

        Args:
            now: Current time

        Returns:
            EXPIRED, ACTIVE (bound) or INACTIVE (unbound)
        """
        if self.is_expired(now):
            return LicenseStatus.EXPIRED
        if self.is_bound:
            return LicenseStatus.ACTIVE
        return LicenseStatus.INACTIVE

    def apply(self, mutation: "LicenseMutation") -> "LicenseRecord":
        """
        Create a new LicenseRecord with a mutation applied.

        Args:
            mutation: Mutation to apply

        Returns:
            New LicenseRecord instance
        """
        history = self.history
        if mutation.history_entry is not None:
            history = history + (mutation.history_entry,)
        return replace(self, history=history, **mutation.changes)


@dataclass(frozen=True)
class LicenseMutation:
    """
    The exact change a decision makes to a license record.

    ``changes`` maps LicenseRecord field names to new values. When
    ``expected_hwid`` is set, the write must only happen if the stored
    record is still bound to that value.
    """

    changes: Dict[str, Any]
    history_entry: Optional[HistoryEntry] = None
    expected_hwid: Optional[str] = None

    @classmethod
    def touch(cls, now: datetime) -> "LicenseMutation":
        """Refresh the last validation time."""
        return cls(changes={"last_validated": now})

    @classmethod
    def bind(
        cls,
        hwid: str,
        now: datetime,
        expected_hwid: str,
        ip: Optional[str] = None,
        device_info: Optional[str] = None,
    ) -> "LicenseMutation":
        """
        Bind a HWID to the license.

        Args:
            hwid: HWID to bind
            now: Activation time
            expected_hwid: HWID the record held when the decision was made
            ip: Caller IP
            device_info: Caller user agent

        Returns:
            LicenseMutation instance
        """
        return cls(
            changes={
                "hwid": hwid,
                "activated_at": now,
                "last_validated": now,
                "activation_ip": ip,
                "device_info": device_info or "Unknown",
            },
            history_entry=HistoryEntry(
                action=HistoryAction.REGISTER,
                date=now,
                details=hwid,
                ip=ip,
            ),
            expected_hwid=expected_hwid,
        )

    @classmethod
    def reset(
        cls, now: datetime, action: HistoryAction, admin: Optional[str] = None
    ) -> "LicenseMutation":
        """
        Unbind the license's HWID.

        Args:
            now: Reset time
            action: HWID_RESET_BY_ADMIN or HWID_RESET_APPROVED
            admin: Admin performing the reset

        Returns:
            LicenseMutation instance
        """
        return cls(
            changes={"hwid": "", "activated_at": None},
            history_entry=HistoryEntry(action=action, date=now, admin=admin),
        )
