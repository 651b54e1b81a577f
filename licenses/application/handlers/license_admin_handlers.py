"""
License admin handlers.

Handlers for generate, bulk generate, delete and HWID reset commands.
"""
import logging
from typing import List

from activity.application.services.activity_logger import ActivityLogger
from activity.domain.activity import ActivityAction
from core.domain.exceptions import LicenseNotFoundError
from core.domain.timestamps import Clock, utcnow
from core.metrics import hwid_resets_total, licenses_generated_total
from licenses.application.commands.generate_license import (
    BulkGenerateLicensesCommand,
    GenerateLicenseCommand,
)
from licenses.application.commands.manage_license import DeleteLicenseCommand, ResetHwidCommand
from licenses.application.dto.license_dto import BulkGenerateResultDTO, GenerateLicenseResultDTO
from licenses.domain.license import HistoryAction, LicenseMutation, LicenseRecord
from licenses.domain.license_key import generate_license_key
from licenses.domain.outcomes import LicenseCreationOutcome
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 5


def _expiry_label(command) -> str:
    return command.expiry.isoformat() if command.expiry else "Never"


class GenerateLicenseHandler:
    """Handler for GenerateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repository, activity logger and clock."""
        self.license_repository = license_repository
        self.activity_logger = activity_logger
        self.clock = clock

    async def handle(self, command: GenerateLicenseCommand) -> GenerateLicenseResultDTO:
        """
        Handle generate license command.

        A duplicate explicit key is reported as DUPLICATE_KEY and nothing
        is written.

        Args:
            command: GenerateLicenseCommand

        Returns:
            GenerateLicenseResultDTO
        """
        license_key = (command.license_key or "").strip() or generate_license_key()
        record = LicenseRecord.create(
            key=license_key,
            created_at=self.clock(),
            created_by=command.origin.actor,
            expiry=command.expiry,
        )

        if not await self.license_repository.create(record):
            logger.info("License %s already exists", license_key)
            return GenerateLicenseResultDTO(
                outcome=LicenseCreationOutcome.DUPLICATE_KEY,
                license_key=license_key,
                expiry=command.expiry,
            )

        licenses_generated_total.labels(mode="single").inc()
        await self.activity_logger.log(
            ActivityAction.LICENSE_GENERATED,
            f"License: {license_key} Expiry: {_expiry_label(command)}",
            command.origin,
        )
        return GenerateLicenseResultDTO(
            outcome=LicenseCreationOutcome.CREATED,
            license_key=license_key,
            expiry=command.expiry,
        )


class BulkGenerateLicensesHandler:
    """Handler for BulkGenerateLicensesCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repository, activity logger and clock."""
        self.license_repository = license_repository
        self.activity_logger = activity_logger
        self.clock = clock

    async def _create_unique(self, command: BulkGenerateLicensesCommand, batch_id: int) -> str:
        """Create one license, regenerating the key on collision."""
        for _ in range(MAX_KEY_ATTEMPTS):
            record = LicenseRecord.create(
                key=generate_license_key(command.prefix),
                created_at=self.clock(),
                created_by=command.origin.actor,
                expiry=command.expiry,
                batch_id=batch_id,
            )
            if await self.license_repository.create(record):
                return record.key
            logger.warning("Generated key %s collided, regenerating", record.key)
        raise RuntimeError("Could not generate a unique license key")

    async def handle(self, command: BulkGenerateLicensesCommand) -> BulkGenerateResultDTO:
        """
        Handle bulk generate command.

        Args:
            command: BulkGenerateLicensesCommand

        Returns:
            BulkGenerateResultDTO with every created key
        """
        batch_id = int(self.clock().timestamp() * 1000)
        keys: List[str] = []
        for _ in range(command.count):
            keys.append(await self._create_unique(command, batch_id))

        licenses_generated_total.labels(mode="bulk").inc(len(keys))
        await self.activity_logger.log(
            ActivityAction.BULK_GENERATE,
            f"Generated {len(keys)} licenses with prefix: {command.prefix}",
            command.origin,
        )
        return BulkGenerateResultDTO(batch_id=batch_id, license_keys=keys, expiry=command.expiry)


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, activity_logger: ActivityLogger):
        """Initialize handler with repository and activity logger."""
        self.license_repository = license_repository
        self.activity_logger = activity_logger

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Handle delete license command.

        Args:
            command: DeleteLicenseCommand

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        if not await self.license_repository.delete(command.license_key):
            raise LicenseNotFoundError(f"License {command.license_key} not found")

        await self.activity_logger.log(
            ActivityAction.LICENSE_DELETED,
            f"License: {command.license_key}",
            command.origin,
        )


class ResetHwidHandler:
    """Handler for ResetHwidCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repository, activity logger and clock."""
        self.license_repository = license_repository
        self.activity_logger = activity_logger
        self.clock = clock

    async def handle(self, command: ResetHwidCommand) -> None:
        """
        Handle reset HWID command.

        Args:
            command: ResetHwidCommand

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        mutation = LicenseMutation.reset(
            now=self.clock(),
            action=HistoryAction.HWID_RESET_BY_ADMIN,
            admin=command.origin.actor,
        )
        if not await self.license_repository.apply(command.license_key, mutation):
            raise LicenseNotFoundError(f"License {command.license_key} not found")

        hwid_resets_total.labels(source="admin").inc()
        await self.activity_logger.log(
            ActivityAction.HWID_RESET,
            f"License: {command.license_key}",
            command.origin,
        )
