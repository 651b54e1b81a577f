"""
Client license handlers.

Handlers for the validate and register calls made by client software.
Both answer with an outcome code and never raise: any fault is logged
and reported as ERROR.
"""
import logging

from activity.application.services.activity_logger import ActivityLogger
from activity.domain.activity import ActivityAction
from core.domain.exceptions import ConcurrentModificationError
from core.metrics import (
    errors_total,
    license_bind_conflicts_total,
    license_registrations_total,
    license_validations_total,
)
from licenses.application.commands.register_license import RegisterLicenseCommand
from licenses.application.commands.validate_license import ValidateLicenseCommand
from licenses.domain.outcomes import RegistrationOutcome, ValidationOutcome
from licenses.domain.services import LicenseStateMachine
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

MAX_BIND_ATTEMPTS = 3


def _details(license_key: str, hwid: str, outcome) -> str:
    return f"License: {license_key} HWID: {hwid} Result: {outcome.value}"


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

    def __init__(
        self,
        state_machine: LicenseStateMachine,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
    ):
        """Initialize handler with state machine, repository and logger."""
        self.state_machine = state_machine
        self.license_repository = license_repository
        self.activity_logger = activity_logger

    async def handle(self, command: ValidateLicenseCommand) -> ValidationOutcome:
        """
        Handle validate license command.

        Args:
            command: ValidateLicenseCommand

        Returns:
            ValidationOutcome
        """
        if not command.license_key or not command.hwid:
            license_validations_total.labels(outcome=ValidationOutcome.FAILED.value).inc()
            return ValidationOutcome.FAILED

        try:
            decision = await self.state_machine.validate(command.license_key, command.hwid)
            if decision.mutation is not None:
                await self.license_repository.apply(command.license_key, decision.mutation)
            outcome = decision.outcome
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Error validating license %s",
                command.license_key,
                extra={"license_key": command.license_key, "hwid": command.hwid},
                exc_info=True,
            )
            errors_total.labels(error_type="validate", endpoint="validate").inc()
            outcome = ValidationOutcome.ERROR

        license_validations_total.labels(outcome=outcome.value).inc()
        await self.activity_logger.log(
            ActivityAction.API_VALIDATE,
            _details(command.license_key, command.hwid, outcome),
            command.origin,
        )
        return outcome


class RegisterLicenseHandler:
    """
    Handler for RegisterLicenseCommand.

    A SUCCESS decision is written with a compare-and-swap on the HWID
    the decision saw. When another writer changed the record first the
    whole decision is re-run.
    """

    def __init__(
        self,
        state_machine: LicenseStateMachine,
        license_repository: LicenseRepository,
        activity_logger: ActivityLogger,
    ):
        """Initialize handler with state machine, repository and logger."""
        self.state_machine = state_machine
        self.license_repository = license_repository
        self.activity_logger = activity_logger

    async def _decide_and_bind(self, command: RegisterLicenseCommand) -> RegistrationOutcome:
        for _ in range(MAX_BIND_ATTEMPTS):
            decision = await self.state_machine.register(
                command.license_key,
                command.hwid,
                ip=command.origin.ip,
                device_info=command.origin.user_agent,
            )
            if decision.mutation is None:
                return decision.outcome
            if await self.license_repository.apply(command.license_key, decision.mutation):
                return decision.outcome
            license_bind_conflicts_total.inc()
            logger.info(
                "License %s changed during registration, retrying",
                command.license_key,
            )
        raise ConcurrentModificationError(
            f"License {command.license_key} kept changing during registration"
        )

    async def handle(self, command: RegisterLicenseCommand) -> RegistrationOutcome:
        """
        Handle register license command.

        Args:
            command: RegisterLicenseCommand

        Returns:
            RegistrationOutcome
        """
        if not command.license_key or not command.hwid:
            license_registrations_total.labels(outcome=RegistrationOutcome.FAILED.value).inc()
            return RegistrationOutcome.FAILED

        try:
            outcome = await self._decide_and_bind(command)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Error registering license %s",
                command.license_key,
                extra={"license_key": command.license_key, "hwid": command.hwid},
                exc_info=True,
            )
            errors_total.labels(error_type="register", endpoint="register").inc()
            outcome = RegistrationOutcome.ERROR

        license_registrations_total.labels(outcome=outcome.value).inc()
        await self.activity_logger.log(
            ActivityAction.API_REGISTER,
            _details(command.license_key, command.hwid, outcome),
            command.origin,
        )
        return outcome
