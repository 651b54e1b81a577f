"""
Unit tests for LicenseStateMachine.
"""
from datetime import timedelta

import pytest

from licenses.domain.license import HistoryAction
from licenses.domain.outcomes import RegistrationOutcome, ValidationOutcome


async def _register(state_machine, license_repository, key, hwid, ip="203.0.113.7"):
    """Decide a registration and persist its mutation, like the handler does."""
    decision = await state_machine.register(key, hwid, ip=ip, device_info="client/1.0")
    if decision.mutation is not None:
        assert await license_repository.apply(key, decision.mutation)
    return decision.outcome


class TestValidate:
    """Tests for validate decisions."""

    async def test_empty_input_fails(self, state_machine):
        """Test that a missing key or HWID fails before any read."""
        assert (await state_machine.validate("", "HW")).outcome is ValidationOutcome.FAILED
        assert (await state_machine.validate("LIC", "")).outcome is ValidationOutcome.FAILED

    async def test_unknown_license(self, state_machine):
        """Test that an unknown key is INVALID_LICENSE."""
        decision = await state_machine.validate("LIC-UNKNOWN", "HW-1")
        assert decision.outcome is ValidationOutcome.INVALID_LICENSE
        assert decision.mutation is None

    async def test_matching_hwid_is_valid_and_touches(self, state_machine, make_license, clock):
        """Test that the bound HWID validates and refreshes last_validated."""
        await make_license("LIC-1", hwid="HW-1")
        clock.advance(minutes=5)

        decision = await state_machine.validate("LIC-1", "HW-1")

        assert decision.outcome is ValidationOutcome.VALID
        assert decision.mutation.changes == {"last_validated": clock()}

    async def test_unbound_license_is_mismatch(self, state_machine, make_license):
        """Test that validate never binds an unbound license."""
        await make_license("LIC-1")
        decision = await state_machine.validate("LIC-1", "HW-1")
        assert decision.outcome is ValidationOutcome.HWID_MISMATCH
        assert decision.mutation is None

    async def test_other_hwid_is_mismatch(self, state_machine, make_license):
        """Test that a different HWID is HWID_MISMATCH."""
        await make_license("LIC-1", hwid="HW-1")
        decision = await state_machine.validate("LIC-1", "HW-2")
        assert decision.outcome is ValidationOutcome.HWID_MISMATCH

    async def test_expiry_is_strict(self, state_machine, make_license, clock):
        """Test that a license is valid at its expiry instant and expired after it."""
        await make_license("LIC-1", hwid="HW-1", expiry=clock() + timedelta(hours=1))

        clock.advance(hours=1)
        assert (await state_machine.validate("LIC-1", "HW-1")).outcome is ValidationOutcome.VALID

        clock.advance(microseconds=1)
        assert (await state_machine.validate("LIC-1", "HW-1")).outcome is ValidationOutcome.EXPIRED

    async def test_ban_wins_over_everything_but_api_disabled(
        self, state_machine, make_license, ban_list_repository, settings_repository
    ):
        """Test precedence: API_DISABLED, then BANNED, then license checks."""
        await make_license("LIC-1", hwid="HW-1")
        await ban_list_repository.add("HW-1")

        assert (await state_machine.validate("LIC-1", "HW-1")).outcome is ValidationOutcome.BANNED
        assert (
            await state_machine.validate("LIC-MISSING", "HW-1")
        ).outcome is ValidationOutcome.BANNED

        await settings_repository.update({"api_enabled": False})
        assert (
            await state_machine.validate("LIC-1", "HW-1")
        ).outcome is ValidationOutcome.API_DISABLED

    async def test_ban_after_binding(self, state_machine, make_license, ban_list_repository):
        """Test that banning a bound HWID rejects it on the next validate."""
        await make_license("LIC-1", hwid="HW-1")
        assert (await state_machine.validate("LIC-1", "HW-1")).outcome is ValidationOutcome.VALID

        await ban_list_repository.add("HW-1")

        assert (await state_machine.validate("LIC-1", "HW-1")).outcome is ValidationOutcome.BANNED


class TestRegister:
    """Tests for register decisions."""

    async def test_empty_input_fails(self, state_machine):
        """Test that a missing key or HWID fails."""
        assert (await state_machine.register("", "HW")).outcome is RegistrationOutcome.FAILED
        assert (await state_machine.register("LIC", "")).outcome is RegistrationOutcome.FAILED

    async def test_binds_unbound_license(
        self, state_machine, license_repository, make_license, clock
    ):
        """Test that registering an unbound license binds it."""
        await make_license("LIC-1")

        outcome = await _register(state_machine, license_repository, "LIC-1", "HW-1")

        assert outcome is RegistrationOutcome.SUCCESS
        record = await license_repository.find_by_key("LIC-1")
        assert record.hwid == "HW-1"
        assert record.activated_at == clock()
        assert record.last_validated == clock()
        assert record.activation_ip == "203.0.113.7"
        assert record.device_info == "client/1.0"
        assert [e.action for e in record.history] == [HistoryAction.REGISTER]

    async def test_reregister_same_hwid_is_idempotent(
        self, state_machine, license_repository, make_license, clock
    ):
        """Test that re-registering refreshes timestamps and appends history."""
        await make_license("LIC-1")
        await _register(state_machine, license_repository, "LIC-1", "HW-1")
        later = clock.advance(hours=2)

        outcome = await _register(state_machine, license_repository, "LIC-1", "HW-1")

        assert outcome is RegistrationOutcome.SUCCESS
        record = await license_repository.find_by_key("LIC-1")
        assert record.hwid == "HW-1"
        assert record.activated_at == later
        assert record.last_validated == later
        assert len(record.history) == 2

    async def test_other_hwid_already_registered(
        self, state_machine, license_repository, make_license
    ):
        """Test that a bound license rejects another HWID."""
        await make_license("LIC-1", hwid="HW-1")

        outcome = await _register(state_machine, license_repository, "LIC-1", "HW-2")

        assert outcome is RegistrationOutcome.ALREADY_REGISTERED
        assert (await license_repository.find_by_key("LIC-1")).hwid == "HW-1"

    async def test_hwid_bound_elsewhere_is_in_use(
        self, state_machine, license_repository, make_license
    ):
        """Test that a HWID can only hold one license."""
        await make_license("LIC-A", hwid="HW-1")
        await make_license("LIC-B")

        outcome = await _register(state_machine, license_repository, "LIC-B", "HW-1")

        assert outcome is RegistrationOutcome.HWID_IN_USE
        assert (await license_repository.find_by_key("LIC-B")).hwid == ""

    async def test_full_lifecycle(
        self, state_machine, license_repository, make_license, ban_list_repository
    ):
        """Test register, validate, second device, reset and rebind on one key."""
        await make_license("LIC-AAAA")

        assert (
            await _register(state_machine, license_repository, "LIC-AAAA", "HW-1")
        ) is RegistrationOutcome.SUCCESS
        assert (
            await state_machine.validate("LIC-AAAA", "HW-1")
        ).outcome is ValidationOutcome.VALID
        assert (
            await state_machine.validate("LIC-AAAA", "HW-2")
        ).outcome is ValidationOutcome.HWID_MISMATCH
        assert (
            await _register(state_machine, license_repository, "LIC-AAAA", "HW-2")
        ) is RegistrationOutcome.ALREADY_REGISTERED

        await ban_list_repository.add("HW-2")
        assert (
            await _register(state_machine, license_repository, "LIC-AAAA", "HW-2")
        ) is RegistrationOutcome.BANNED

    async def test_expired_license(self, state_machine, license_repository, make_license, clock):
        """Test that an expired license cannot be registered."""
        await make_license("LIC-1", expiry=clock() - timedelta(seconds=1))

        outcome = await _register(state_machine, license_repository, "LIC-1", "HW-1")

        assert outcome is RegistrationOutcome.EXPIRED

    async def test_api_disabled(self, state_machine, settings_repository):
        """Test that a disabled API rejects before reading any license."""
        await settings_repository.update({"api_enabled": False})
        decision = await state_machine.register("LIC-MISSING", "HW-1")
        assert decision.outcome is RegistrationOutcome.API_DISABLED

    async def test_success_mutation_expects_seen_hwid(self, state_machine, make_license):
        """Test that a binding mutation is conditional on the HWID it saw."""
        await make_license("LIC-1")
        decision = await state_machine.register("LIC-1", "HW-1")
        assert decision.mutation.expected_hwid == ""


@pytest.mark.parametrize(
    "hwid, banned",
    [("HW-1", True), ("hw-1", False), ("HW-1 ", False)],
)
async def test_ban_match_is_exact(state_machine, make_license, ban_list_repository, hwid, banned):
    """Test that ban matching is exact and case-sensitive."""
    await make_license("LIC-1")
    await ban_list_repository.add("HW-1")
    decision = await state_machine.validate("LIC-1", hwid)
    assert (decision.outcome is ValidationOutcome.BANNED) is banned
