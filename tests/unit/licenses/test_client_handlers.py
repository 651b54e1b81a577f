"""
Unit tests for client license handlers.
"""
import pytest

from core.domain.exceptions import PersistenceError
from licenses.application.commands.register_license import RegisterLicenseCommand
from licenses.application.commands.validate_license import ValidateLicenseCommand
from licenses.application.handlers.client_license_handlers import (
    MAX_BIND_ATTEMPTS,
    RegisterLicenseHandler,
    ValidateLicenseHandler,
)
from licenses.domain.license import LicenseMutation
from licenses.domain.outcomes import RegistrationOutcome, ValidationOutcome
from licenses.domain.services import LicenseStateMachine
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)


class RacingLicenseRepository(DocumentLicenseRepository):
    """Binds a competing HWID just before the first conditional write."""

    def __init__(self, store, clock, competitor="HW-OTHER"):
        super().__init__(store)
        self.clock = clock
        self.competitor = competitor
        self.apply_calls = 0

    async def apply(self, key, mutation):
        self.apply_calls += 1
        if self.apply_calls == 1 and mutation.expected_hwid is not None:
            await super().apply(
                key,
                LicenseMutation.bind(hwid=self.competitor, now=self.clock(), expected_hwid=""),
            )
        return await super().apply(key, mutation)


class LosingLicenseRepository(DocumentLicenseRepository):
    """Every conditional write loses."""

    def __init__(self, store):
        super().__init__(store)
        self.apply_calls = 0

    async def apply(self, key, mutation):
        self.apply_calls += 1
        return False


class BrokenLicenseRepository(DocumentLicenseRepository):
    """Store is unreachable."""

    async def find_by_key(self, key):
        raise PersistenceError("connection refused", "licenses")


def _handlers(license_repository, ban_list_repository, settings_repository, clock, logger):
    state_machine = LicenseStateMachine(
        license_repository=license_repository,
        ban_list_repository=ban_list_repository,
        settings_repository=settings_repository,
        clock=clock,
    )
    return (
        ValidateLicenseHandler(state_machine, license_repository, logger),
        RegisterLicenseHandler(state_machine, license_repository, logger),
    )


@pytest.fixture
def handlers(license_repository, ban_list_repository, settings_repository, clock, activity_logger):
    """Fixture for (validate handler, register handler) on the in-memory store."""
    return _handlers(
        license_repository, ban_list_repository, settings_repository, clock, activity_logger
    )


class TestValidateLicenseHandler:
    """Tests for ValidateLicenseHandler."""

    async def test_valid_refreshes_last_validated(
        self, handlers, make_license, license_repository, clock, origin
    ):
        """Test that VALID persists the last validation time."""
        await make_license("LIC-1", hwid="HW-1")
        later = clock.advance(minutes=10)

        outcome = await handlers[0].handle(
            ValidateLicenseCommand(license_key="LIC-1", hwid="HW-1", origin=origin)
        )

        assert outcome is ValidationOutcome.VALID
        assert (await license_repository.find_by_key("LIC-1")).last_validated == later

    async def test_logs_activity(self, handlers, make_license, activity_repository, origin):
        """Test that validate calls are recorded with their result."""
        await make_license("LIC-1", hwid="HW-1")

        await handlers[0].handle(
            ValidateLicenseCommand(license_key="LIC-1", hwid="HW-2", origin=origin)
        )

        entries = await activity_repository.list_recent()
        assert len(entries) == 1
        assert entries[0].action == "API_VALIDATE"
        assert entries[0].details == "License: LIC-1 HWID: HW-2 Result: HWID_MISMATCH"
        assert entries[0].ip == "203.0.113.7"
        assert entries[0].user_agent == "client/1.0"

    async def test_failed_is_not_logged(self, handlers, activity_repository):
        """Test that malformed calls are not recorded."""
        outcome = await handlers[0].handle(ValidateLicenseCommand(license_key="", hwid="HW"))
        assert outcome is ValidationOutcome.FAILED
        assert await activity_repository.list_recent() == []

    async def test_store_fault_is_error(
        self, store, ban_list_repository, settings_repository, clock, activity_logger,
        activity_repository,
    ):
        """Test that a persistence fault is reported as ERROR."""
        validate, _ = _handlers(
            BrokenLicenseRepository(store),
            ban_list_repository,
            settings_repository,
            clock,
            activity_logger,
        )

        outcome = await validate.handle(ValidateLicenseCommand(license_key="LIC-1", hwid="HW-1"))

        assert outcome is ValidationOutcome.ERROR
        entries = await activity_repository.list_recent()
        assert entries[0].details.endswith("Result: ERROR")


class TestRegisterLicenseHandler:
    """Tests for RegisterLicenseHandler."""

    async def test_success(self, handlers, make_license, license_repository, origin):
        """Test a successful binding."""
        await make_license("LIC-1")

        outcome = await handlers[1].handle(
            RegisterLicenseCommand(license_key="LIC-1", hwid="HW-1", origin=origin)
        )

        assert outcome is RegistrationOutcome.SUCCESS
        record = await license_repository.find_by_key("LIC-1")
        assert record.hwid == "HW-1"
        assert record.activation_ip == "203.0.113.7"

    async def test_lost_race_reruns_decision(
        self, store, make_license, ban_list_repository, settings_repository, clock,
        activity_logger,
    ):
        """Test that a concurrent binding makes the loser ALREADY_REGISTERED."""
        await make_license("LIC-1")
        racing = RacingLicenseRepository(store, clock)
        _, register = _handlers(
            racing, ban_list_repository, settings_repository, clock, activity_logger
        )

        outcome = await register.handle(RegisterLicenseCommand(license_key="LIC-1", hwid="HW-1"))

        assert outcome is RegistrationOutcome.ALREADY_REGISTERED
        record = await racing.find_by_key("LIC-1")
        assert record.hwid == "HW-OTHER"
        assert len(record.history) == 1

    async def test_gives_up_after_repeated_conflicts(
        self, store, make_license, ban_list_repository, settings_repository, clock,
        activity_logger,
    ):
        """Test that endless conflicts end in ERROR."""
        await make_license("LIC-1")
        losing = LosingLicenseRepository(store)
        _, register = _handlers(
            losing, ban_list_repository, settings_repository, clock, activity_logger
        )

        outcome = await register.handle(RegisterLicenseCommand(license_key="LIC-1", hwid="HW-1"))

        assert outcome is RegistrationOutcome.ERROR
        assert losing.apply_calls == MAX_BIND_ATTEMPTS

    async def test_rejection_writes_nothing(
        self, handlers, make_license, license_repository, activity_repository
    ):
        """Test that a rejected registration leaves the record untouched."""
        before = await make_license("LIC-1", hwid="HW-1")

        outcome = await handlers[1].handle(
            RegisterLicenseCommand(license_key="LIC-1", hwid="HW-2")
        )

        assert outcome is RegistrationOutcome.ALREADY_REGISTERED
        assert await license_repository.find_by_key("LIC-1") == before
        entries = await activity_repository.list_recent()
        assert entries[0].action == "API_REGISTER"
        assert entries[0].details == "License: LIC-1 HWID: HW-2 Result: ALREADY_REGISTERED"
