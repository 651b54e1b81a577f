"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity. LicenseStateMachine decides the outcome of
client validate/register calls; persisting the resulting mutation is
left to the application layer.
"""
from datetime import datetime
from typing import Optional

from core.domain.timestamps import Clock, utcnow
from licenses.domain.license import LicenseMutation, LicenseRecord
from licenses.domain.outcomes import Decision, RegistrationOutcome, ValidationOutcome
from licenses.ports.license_repository import LicenseRepository
from policies.domain.ban_list import is_banned
from policies.ports.ban_list_repository import BanListRepository
from policies.ports.settings_repository import SettingsRepository


def is_expired(record: LicenseRecord, now: datetime) -> bool:
    """
    Expiration policy.

    Args:
        record: License record
        now: Current time

    Returns:
        False without an expiry, else now > expiry
    """
    return record.is_expired(now)


class LicenseStateMachine:
    """
    Domain service for license validation and registration decisions.

    Reads happen lazily in decision order, so an early rejection never
    touches later collections: settings, then ban list, then the record,
    then (register only) the HWID scan.
    """

    def __init__(
        self,
        license_repository: LicenseRepository,
        ban_list_repository: BanListRepository,
        settings_repository: SettingsRepository,
        clock: Clock = utcnow,
    ):
        """Initialize state machine with repositories and clock."""
        self.license_repository = license_repository
        self.ban_list_repository = ban_list_repository
        self.settings_repository = settings_repository
        self.clock = clock

    async def _precheck(self, key: str, hwid: str, now: datetime):
        """
        Run the checks shared by validate and register.

        Returns:
            (rejection name, None) or (None, record)
        """
        settings = await self.settings_repository.get()
        if not settings.api_enabled:
            return "API_DISABLED", None

        ban_list = await self.ban_list_repository.get()
        if is_banned(hwid, ban_list):
            return "BANNED", None

        record = await self.license_repository.find_by_key(key)
        if record is None:
            return "INVALID_LICENSE", None

        if is_expired(record, now):
            return "EXPIRED", None

        return None, record

    async def validate(self, key: str, hwid: str) -> Decision[ValidationOutcome]:
        """
        Decide the outcome of a validate call.

        Validate never binds a HWID. A VALID decision carries a mutation
        refreshing ``last_validated``.

        Args:
            key: License key
            hwid: Caller HWID

        Returns:
            Decision with ValidationOutcome
        """
        if not key or not hwid:
            return Decision(ValidationOutcome.FAILED)

        now = self.clock()
        rejection, record = await self._precheck(key, hwid, now)
        if rejection:
            return Decision(ValidationOutcome[rejection])

        if record.hwid == hwid:
            return Decision(ValidationOutcome.VALID, LicenseMutation.touch(now))

        return Decision(ValidationOutcome.HWID_MISMATCH)

    async def register(
        self,
        key: str,
        hwid: str,
        ip: Optional[str] = None,
        device_info: Optional[str] = None,
    ) -> Decision[RegistrationOutcome]:
        """
        Decide the outcome of a register call.

        Re-registering the bound HWID succeeds again and produces a fresh
        binding mutation.

        Args:
            key: License key
            hwid: Caller HWID
            ip: Caller IP, recorded on success
            device_info: Caller user agent, recorded on success

        Returns:
            Decision with RegistrationOutcome
        """
        if not key or not hwid:
            return Decision(RegistrationOutcome.FAILED)

        now = self.clock()
        rejection, record = await self._precheck(key, hwid, now)
        if rejection:
            return Decision(RegistrationOutcome[rejection])

        if record.is_bound and record.hwid != hwid:
            return Decision(RegistrationOutcome.ALREADY_REGISTERED)

        bound_keys = await self.license_repository.find_keys_by_hwid(hwid)
        if any(bound_key != key for bound_key in bound_keys):
            return Decision(RegistrationOutcome.HWID_IN_USE)

        mutation = LicenseMutation.bind(
            hwid=hwid,
            now=now,
            expected_hwid=record.hwid,
            ip=ip,
            device_info=device_info,
        )
        return Decision(RegistrationOutcome.SUCCESS, mutation)
