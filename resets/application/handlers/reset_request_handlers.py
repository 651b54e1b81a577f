"""
HWID reset request handlers.

Clients submit requests; admins approve (unbinding the license) or deny
them. Either resolution deletes the request.
"""
import logging
from typing import List

from activity.application.services.activity_logger import ActivityLogger
from activity.domain.activity import ActivityAction
from core.domain.exceptions import InvalidHwidError, ResetRequestNotFoundError
from core.domain.timestamps import Clock, utcnow
from core.metrics import hwid_resets_total
from licenses.domain.license import HistoryAction, LicenseMutation
from licenses.ports.license_repository import LicenseRepository
from resets.application.commands.reset_request_commands import (
    ApproveHwidResetCommand,
    DenyHwidResetCommand,
    RequestHwidResetCommand,
)
from resets.domain.reset_request import HwidResetRequest
from resets.ports.reset_request_repository import ResetRequestRepository

logger = logging.getLogger(__name__)


class RequestHwidResetHandler:
    """Handler for RequestHwidResetCommand."""

    def __init__(
        self,
        reset_request_repository: ResetRequestRepository,
        activity_logger: ActivityLogger,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repository, activity logger and clock."""
        self.reset_request_repository = reset_request_repository
        self.activity_logger = activity_logger
        self.clock = clock

    async def handle(self, command: RequestHwidResetCommand) -> HwidResetRequest:
        """
        Handle request HWID reset command.

        Args:
            command: RequestHwidResetCommand

        Returns:
            Stored HwidResetRequest with its id

        Raises:
            InvalidHwidError: If the license or HWID is missing
        """
        if not command.license_key or not command.hwid:
            raise InvalidHwidError("Missing license or HWID")

        request = await self.reset_request_repository.add(
            HwidResetRequest.create(
                license=command.license_key,
                hwid=command.hwid,
                timestamp=self.clock(),
                reason=command.reason,
                request_ip=command.origin.ip,
                user_agent=command.origin.user_agent,
            )
        )
        await self.activity_logger.log(
            ActivityAction.HWID_RESET_REQUEST,
            f"License: {request.license} HWID: {request.hwid} RequestID: {request.id}",
            command.origin,
        )
        return request


class ApproveHwidResetHandler:
    """Handler for ApproveHwidResetCommand."""

    def __init__(
        self,
        reset_request_repository: ResetRequestRepository,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repositories, activity logger and clock."""
        self.reset_request_repository = reset_request_repository
        self.license_repository = license_repository
        self.activity_logger = activity_logger
        self.clock = clock

    async def handle(self, command: ApproveHwidResetCommand) -> HwidResetRequest:
        """
        Handle approve HWID reset command.

        The license named by the request is unbound if it still exists,
        then the request is deleted.

        Args:
            command: ApproveHwidResetCommand

        Returns:
            The resolved request

        Raises:
            ResetRequestNotFoundError: If the request does not exist
        """
        request = await self.reset_request_repository.find_by_id(command.request_id)
        if request is None:
            raise ResetRequestNotFoundError(f"Reset request {command.request_id} not found")

        mutation = LicenseMutation.reset(
            now=self.clock(),
            action=HistoryAction.HWID_RESET_APPROVED,
            admin=command.origin.actor,
        )
        if await self.license_repository.apply(request.license, mutation):
            hwid_resets_total.labels(source="request").inc()
        else:
            logger.warning(
                "License %s for reset request %s no longer exists",
                request.license,
                request.id,
            )

        await self.reset_request_repository.delete(request.id)
        await self.activity_logger.log(
            ActivityAction.HWID_RESET_APPROVED,
            f"License: {request.license} RequestID: {request.id}",
            command.origin,
        )
        return request


class DenyHwidResetHandler:
    """Handler for DenyHwidResetCommand."""

    def __init__(
        self,
        reset_request_repository: ResetRequestRepository,
        activity_logger: ActivityLogger,
    ):
        """Initialize handler with repository and activity logger."""
        self.reset_request_repository = reset_request_repository
        self.activity_logger = activity_logger

    async def handle(self, command: DenyHwidResetCommand) -> None:
        """
        Handle deny HWID reset command.

        Args:
            command: DenyHwidResetCommand

        Raises:
            ResetRequestNotFoundError: If the request does not exist
        """
        if not await self.reset_request_repository.delete(command.request_id):
            raise ResetRequestNotFoundError(f"Reset request {command.request_id} not found")

        await self.activity_logger.log(
            ActivityAction.HWID_RESET_DENIED,
            f"RequestID: {command.request_id}",
            command.origin,
        )


class ListResetRequestsHandler:
    """Handler listing pending reset requests."""

    def __init__(self, reset_request_repository: ResetRequestRepository):
        """Initialize handler with repository."""
        self.reset_request_repository = reset_request_repository

    async def handle(self) -> List[HwidResetRequest]:
        """
        List pending reset requests.

        Returns:
            Pending requests, newest first
        """
        return await self.reset_request_repository.list_pending()
