"""
GetLicenseInfoHandler.

Builds the one-line license summary returned to client software.
"""
import logging

from core.domain.timestamps import Clock, format_time_ago, utcnow
from licenses.application.queries.get_license_info import GetLicenseInfoQuery
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "License not found."
ERROR_MESSAGE = "Error retrieving license information"


class GetLicenseInfoHandler:
    """Handler for GetLicenseInfoQuery."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utcnow):
        """Initialize handler with repository and clock."""
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, query: GetLicenseInfoQuery) -> str:
        """
        Handle get license info query.

        Args:
            query: GetLicenseInfoQuery

        Returns:
            ``Status: ... | Activated: ... | Expires: ... | Last Seen: ...``,
            or a not-found/error message
        """
        if not query.license_key:
            return NOT_FOUND_MESSAGE

        try:
            record = await self.license_repository.find_by_key(query.license_key)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Error retrieving license info for %s", query.license_key, exc_info=True
            )
            return ERROR_MESSAGE

        if record is None:
            return NOT_FOUND_MESSAGE

        now = self.clock()
        activated = (
            record.activated_at.strftime("%Y-%m-%d %H:%M:%S")
            if record.activated_at
            else "Not activated"
        )
        expires = record.expiry.strftime("%Y-%m-%d") if record.expiry else "Never"
        last_seen = (
            format_time_ago(record.last_validated, now) if record.last_validated else "Never"
        )
        return (
            f"Status: {record.status(now).value} | Activated: {activated} | "
            f"Expires: {expires} | Last Seen: {last_seen}"
        )
