"""
Admin dashboard query handlers.

Handlers for listing licenses and computing dashboard counters.
"""
from datetime import timedelta
from typing import List

from core.domain.timestamps import Clock, utcnow
from licenses.application.dto.license_dto import DashboardStatsDTO, LicenseDTO
from licenses.application.queries.list_licenses import GetDashboardStatsQuery, ListLicensesQuery
from licenses.domain.services import is_expired
from licenses.ports.license_repository import LicenseRepository
from policies.ports.ban_list_repository import BanListRepository
from resets.ports.reset_request_repository import ResetRequestRepository

RECENT_WINDOW = timedelta(hours=24)


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utcnow):
        """Initialize handler with repository and clock."""
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, query: ListLicensesQuery) -> List[LicenseDTO]:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            LicenseDTOs, newest first
        """
        now = self.clock()
        records = await self.license_repository.list_all()
        return [LicenseDTO.from_record(record, now) for record in records]


class GetDashboardStatsHandler:
    """Handler for GetDashboardStatsQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        ban_list_repository: BanListRepository,
        reset_request_repository: ResetRequestRepository,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repositories and clock."""
        self.license_repository = license_repository
        self.ban_list_repository = ban_list_repository
        self.reset_request_repository = reset_request_repository
        self.clock = clock

    async def handle(self, query: GetDashboardStatsQuery) -> DashboardStatsDTO:
        """
        Handle dashboard stats query.

        Expired licenses count as expired whether bound or not; active
        and inactive only cover licenses that have not expired.

        Args:
            query: GetDashboardStatsQuery

        Returns:
            DashboardStatsDTO
        """
        now = self.clock()
        records = await self.license_repository.list_all()
        ban_list = await self.ban_list_repository.get()
        pending = await self.reset_request_repository.list_pending()

        expired = [r for r in records if is_expired(r, now)]
        live = [r for r in records if not is_expired(r, now)]
        return DashboardStatsDTO(
            total_licenses=len(records),
            active_licenses=sum(1 for r in live if r.is_bound),
            inactive_licenses=sum(1 for r in live if not r.is_bound),
            expired_licenses=len(expired),
            recent_validations=sum(
                1
                for r in records
                if r.last_validated is not None and now - r.last_validated <= RECENT_WINDOW
            ),
            banned_hwids=len(ban_list),
            pending_reset_requests=len(pending),
        )
