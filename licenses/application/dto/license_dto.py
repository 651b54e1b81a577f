"""
License DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from licenses.domain.license import LicenseRecord
from licenses.domain.outcomes import LicenseCreationOutcome


@dataclass
class HistoryEntryDTO:
    """DTO for one license history entry."""

    action: str
    date: Optional[datetime]
    details: Optional[str] = None
    ip: Optional[str] = None
    admin: Optional[str] = None


@dataclass
class LicenseDTO:
    """DTO for license information on the admin dashboard."""

    license_key: str
    hwid: str
    status: str
    expiry: Optional[datetime]
    activated_at: Optional[datetime]
    last_validated: Optional[datetime]
    created_at: Optional[datetime]
    created_by: Optional[str]
    activation_ip: Optional[str]
    device_info: Optional[str]
    batch_id: Optional[Any]
    history: List[HistoryEntryDTO] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: LicenseRecord, now: datetime) -> "LicenseDTO":
        """
        Build a LicenseDTO from a record.

        Args:
            record: License record
            now: Time used to derive the status

        Returns:
            LicenseDTO
        """
        return cls(
            license_key=record.key,
            hwid=record.hwid,
            status=record.status(now).value,
            expiry=record.expiry,
            activated_at=record.activated_at,
            last_validated=record.last_validated,
            created_at=record.created_at,
            created_by=record.created_by,
            activation_ip=record.activation_ip,
            device_info=record.device_info,
            batch_id=record.batch_id,
            history=[
                HistoryEntryDTO(
                    action=entry.action.value,
                    date=entry.date,
                    details=entry.details,
                    ip=entry.ip,
                    admin=entry.admin,
                )
                for entry in record.history
            ],
        )


@dataclass
class GenerateLicenseResultDTO:
    """DTO for a single license generation."""

    outcome: LicenseCreationOutcome
    license_key: str
    expiry: Optional[datetime] = None


@dataclass
class BulkGenerateResultDTO:
    """DTO for bulk license generation."""

    batch_id: int
    license_keys: List[str]
    expiry: Optional[datetime] = None

    @property
    def count(self) -> int:
        """Number of licenses created."""
        return len(self.license_keys)


@dataclass
class DashboardStatsDTO:
    """DTO for dashboard counters."""

    total_licenses: int
    active_licenses: int
    inactive_licenses: int
    expired_licenses: int
    recent_validations: int
    banned_hwids: int
    pending_reset_requests: int
