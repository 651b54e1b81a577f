"""
Ban list and settings handlers.
"""
import logging

from activity.application.services.activity_logger import ActivityLogger
from activity.domain.activity import ActivityAction
from core.domain.exceptions import InvalidHwidError, InvalidSettingsError
from core.metrics import ban_list_changes_total
from policies.application.commands.policy_commands import (
    BanHwidCommand,
    UnbanHwidCommand,
    UpdateSettingsCommand,
)
from policies.domain.ban_list import BanList, normalize_hwid
from policies.domain.settings import ServiceSettings
from policies.ports.ban_list_repository import BanListRepository
from policies.ports.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)


class BanHwidHandler:
    """Handler for BanHwidCommand."""

    def __init__(self, ban_list_repository: BanListRepository, activity_logger: ActivityLogger):
        """Initialize handler with repository and activity logger."""
        self.ban_list_repository = ban_list_repository
        self.activity_logger = activity_logger

    async def handle(self, command: BanHwidCommand) -> bool:
        """
        Handle ban HWID command.

        Args:
            command: BanHwidCommand

        Returns:
            True if the HWID was added, False if it was already banned

        Raises:
            InvalidHwidError: If the HWID is empty or whitespace-only
        """
        try:
            hwid = normalize_hwid(command.hwid)
        except ValueError as e:
            raise InvalidHwidError(str(e)) from e

        if not await self.ban_list_repository.add(hwid):
            logger.info("HWID %s is already banned", hwid)
            return False

        ban_list_changes_total.labels(operation="ban").inc()
        await self.activity_logger.log(
            ActivityAction.HWID_BANNED,
            f"HWID: {hwid} Reason: {command.reason or 'No reason'}",
            command.origin,
        )
        return True


class UnbanHwidHandler:
    """Handler for UnbanHwidCommand."""

    def __init__(self, ban_list_repository: BanListRepository, activity_logger: ActivityLogger):
        """Initialize handler with repository and activity logger."""
        self.ban_list_repository = ban_list_repository
        self.activity_logger = activity_logger

    async def handle(self, command: UnbanHwidCommand) -> bool:
        """
        Handle unban HWID command.

        Unbanning a HWID that is not listed is a no-op but is still
        logged.

        Args:
            command: UnbanHwidCommand

        Returns:
            True if the HWID was on the list

        Raises:
            InvalidHwidError: If the HWID is empty or whitespace-only
        """
        try:
            hwid = normalize_hwid(command.hwid)
        except ValueError as e:
            raise InvalidHwidError(str(e)) from e

        removed = await self.ban_list_repository.remove(hwid)
        if removed:
            ban_list_changes_total.labels(operation="unban").inc()
        await self.activity_logger.log(
            ActivityAction.HWID_UNBANNED,
            f"HWID: {hwid}",
            command.origin,
        )
        return removed


class GetBanListHandler:
    """Handler returning the current ban list."""

    def __init__(self, ban_list_repository: BanListRepository):
        """Initialize handler with repository."""
        self.ban_list_repository = ban_list_repository

    async def handle(self) -> BanList:
        """Return the current ban list."""
        return await self.ban_list_repository.get()


class GetSettingsHandler:
    """Handler returning current settings."""

    def __init__(self, settings_repository: SettingsRepository):
        """Initialize handler with repository."""
        self.settings_repository = settings_repository

    async def handle(self) -> ServiceSettings:
        """Return current settings with defaults applied."""
        return await self.settings_repository.get()


class UpdateSettingsHandler:
    """Handler for UpdateSettingsCommand."""

    def __init__(self, settings_repository: SettingsRepository, activity_logger: ActivityLogger):
        """Initialize handler with repository and activity logger."""
        self.settings_repository = settings_repository
        self.activity_logger = activity_logger

    async def handle(self, command: UpdateSettingsCommand) -> ServiceSettings:
        """
        Handle update settings command.

        Args:
            command: UpdateSettingsCommand

        Returns:
            Settings after the update

        Raises:
            InvalidSettingsError: If a field is unknown or a value is invalid
        """
        if not command.changes:
            raise InvalidSettingsError("No settings to update")
        try:
            updated = await self.settings_repository.update(command.changes)
        except ValueError as e:
            raise InvalidSettingsError(str(e)) from e

        changed = ", ".join(f"{name}={value}" for name, value in sorted(command.changes.items()))
        await self.activity_logger.log(
            ActivityAction.SETTINGS_UPDATED,
            f"Settings updated: {changed}",
            command.origin,
        )
        return updated
