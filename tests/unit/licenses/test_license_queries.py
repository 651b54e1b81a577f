"""
Unit tests for license info and dashboard query handlers.
"""
from datetime import timedelta

from core.domain.exceptions import PersistenceError
from licenses.application.handlers.dashboard_handlers import (
    GetDashboardStatsHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.get_license_info_handler import (
    ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    GetLicenseInfoHandler,
)
from licenses.application.queries.get_license_info import GetLicenseInfoQuery
from licenses.application.queries.list_licenses import GetDashboardStatsQuery, ListLicensesQuery
from licenses.domain.license import LicenseMutation
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from resets.domain.reset_request import HwidResetRequest


class UnreachableLicenseRepository(DocumentLicenseRepository):
    """Store is unreachable."""

    async def find_by_key(self, key):
        raise PersistenceError("timeout", "licenses")


class TestGetLicenseInfoHandler:
    """Tests for GetLicenseInfoHandler."""

    async def test_unbound_license(self, license_repository, make_license, clock):
        """Test the summary of a fresh license."""
        await make_license("LIC-1")
        handler = GetLicenseInfoHandler(license_repository, clock=clock)

        summary = await handler.handle(GetLicenseInfoQuery(license_key="LIC-1"))

        assert summary == (
            "Status: INACTIVE | Activated: Not activated | Expires: Never | Last Seen: Never"
        )

    async def test_bound_license(self, license_repository, make_license, clock):
        """Test the summary of a bound license with an expiry."""
        await make_license("LIC-1", hwid="HW-1", expiry=clock() + timedelta(days=10))
        clock.advance(hours=3)
        handler = GetLicenseInfoHandler(license_repository, clock=clock)

        summary = await handler.handle(GetLicenseInfoQuery(license_key="LIC-1"))

        assert summary == (
            "Status: ACTIVE | Activated: 2024-01-01 12:00:00 | "
            "Expires: 2024-01-11 | Last Seen: 3h ago"
        )

    async def test_expired_license(self, license_repository, make_license, clock):
        """Test that an expired license reports EXPIRED."""
        await make_license("LIC-1", expiry=clock() - timedelta(days=1))
        handler = GetLicenseInfoHandler(license_repository, clock=clock)

        summary = await handler.handle(GetLicenseInfoQuery(license_key="LIC-1"))

        assert summary.startswith("Status: EXPIRED | ")

    async def test_not_found(self, license_repository):
        """Test unknown and empty keys."""
        handler = GetLicenseInfoHandler(license_repository)
        assert await handler.handle(GetLicenseInfoQuery(license_key="LIC-X")) == NOT_FOUND_MESSAGE
        assert await handler.handle(GetLicenseInfoQuery(license_key="")) == NOT_FOUND_MESSAGE

    async def test_store_fault(self, store):
        """Test that a store fault yields the error message."""
        handler = GetLicenseInfoHandler(UnreachableLicenseRepository(store))
        assert await handler.handle(GetLicenseInfoQuery(license_key="LIC-1")) == ERROR_MESSAGE


class TestDashboardHandlers:
    """Tests for ListLicensesHandler and GetDashboardStatsHandler."""

    async def test_list_licenses(self, license_repository, make_license, clock):
        """Test that licenses are listed with derived status."""
        await make_license("LIC-1", hwid="HW-1")
        clock.advance(seconds=1)
        await make_license("LIC-2")

        licenses = await ListLicensesHandler(license_repository, clock=clock).handle(
            ListLicensesQuery()
        )

        assert [(dto.license_key, dto.status) for dto in licenses] == [
            ("LIC-2", "INACTIVE"),
            ("LIC-1", "ACTIVE"),
        ]
        assert licenses[1].history[0].action == "REGISTER"

    async def test_stats(
        self,
        license_repository,
        ban_list_repository,
        reset_request_repository,
        make_license,
        clock,
    ):
        """Test dashboard counters."""
        past = clock() - timedelta(days=1, seconds=1)
        await make_license("LIC-ACTIVE", hwid="HW-1")
        await make_license("LIC-INACTIVE")
        await make_license("LIC-EXPIRED", hwid="HW-2", expiry=past)
        await make_license("LIC-STALE", hwid="HW-3")
        await license_repository.apply("LIC-STALE", LicenseMutation.touch(past))
        await ban_list_repository.add("HW-9")
        await reset_request_repository.add(
            HwidResetRequest.create(license="LIC-ACTIVE", hwid="HW-1", timestamp=clock())
        )

        handler = GetDashboardStatsHandler(
            license_repository, ban_list_repository, reset_request_repository, clock=clock
        )
        stats = await handler.handle(GetDashboardStatsQuery())

        assert stats.total_licenses == 4
        assert stats.active_licenses == 2
        assert stats.inactive_licenses == 1
        assert stats.expired_licenses == 1
        assert stats.recent_validations == 2
        assert stats.banned_hwids == 1
        assert stats.pending_reset_requests == 1
