"""
Client API views.

These endpoints are used by client software to:
- Validate a license on a device
- Register (bind) a license to a device
- Read a license summary
- Ask for a HWID reset

Validate, register and license-info answer in plain text.
"""

import logging

from asgiref.sync import async_to_sync
from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activity.application.services.activity_logger import ActivityLogger
from activity.infrastructure.repositories.document_activity_repository import (
    DocumentActivityRepository,
)
from api.request_context import request_origin
from api.v1.client.serializers import (
    LicenseInfoQuerySerializer,
    LicenseQuerySerializer,
    RequestHwidResetResponseSerializer,
    RequestHwidResetSerializer,
)
from core.domain.exceptions import InvalidHwidError
from core.infrastructure.document_store_adapters import DjangoDocumentStore
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.register_license import RegisterLicenseCommand
from licenses.application.commands.validate_license import ValidateLicenseCommand
from licenses.application.handlers.client_license_handlers import (
    RegisterLicenseHandler,
    ValidateLicenseHandler,
)
from licenses.application.handlers.get_license_info_handler import GetLicenseInfoHandler
from licenses.application.queries.get_license_info import GetLicenseInfoQuery
from licenses.domain.outcomes import RegistrationOutcome, ValidationOutcome
from licenses.domain.services import LicenseStateMachine
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from policies.infrastructure.repositories.document_ban_list_repository import (
    DocumentBanListRepository,
)
from policies.infrastructure.repositories.document_settings_repository import (
    DocumentSettingsRepository,
)
from resets.application.commands.reset_request_commands import RequestHwidResetCommand
from resets.application.handlers.reset_request_handlers import RequestHwidResetHandler
from resets.infrastructure.repositories.document_reset_request_repository import (
    DocumentResetRequestRepository,
)

logger = logging.getLogger(__name__)

# Initialize repositories (in production, use DI container)
_store = DjangoDocumentStore()
_license_repo = DocumentLicenseRepository(_store)
_ban_list_repo = DocumentBanListRepository(_store)
_settings_repo = DocumentSettingsRepository(_store)
_activity_repo = DocumentActivityRepository(_store)
_reset_request_repo = DocumentResetRequestRepository(_store)

tracer = get_tracer(__name__)

LICENSE_PARAMETERS = [
    OpenApiParameter(name="license", type=str, location=OpenApiParameter.QUERY, required=True),
    OpenApiParameter(name="hwid", type=str, location=OpenApiParameter.QUERY, required=True),
]


def _text(value: str) -> HttpResponse:
    return HttpResponse(value, content_type="text/plain; charset=utf-8")


def _state_machine() -> LicenseStateMachine:
    return LicenseStateMachine(
        license_repository=_license_repo,
        ban_list_repository=_ban_list_repo,
        settings_repository=_settings_repo,
    )


def _set_outcome(span, outcome) -> None:
    span.set_attribute("outcome", outcome.value)
    if outcome.value == "ERROR":
        span.set_status(Status(StatusCode.ERROR, "Persistence fault"))
    else:
        span.set_status(Status(StatusCode.OK))


class ValidateLicenseView(APIView):
    """View for validating a license on a device."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description="Check a license key against the caller's HWID. Never binds.",
        tags=["Client API"],
        parameters=LICENSE_PARAMETERS,
        responses={
            (200, "text/plain"): {
                "type": "string",
                "enum": [outcome.value for outcome in ValidationOutcome],
            }
        },
    )
    def get(self, request: Request) -> HttpResponse:
        """Validate a license."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> HttpResponse:
        """Async handler for validate."""
        with tracer.start_as_current_span("validate_license") as span:
            params = LicenseQuerySerializer(data=request.query_params)
            params.is_valid()
            license_key = params.validated_data.get("license", "")
            span.set_attribute("license_key", license_key)

            handler = ValidateLicenseHandler(
                state_machine=_state_machine(),
                license_repository=_license_repo,
                activity_logger=ActivityLogger(_activity_repo),
            )
            outcome = await handler.handle(
                ValidateLicenseCommand(
                    license_key=license_key,
                    hwid=params.validated_data.get("hwid", ""),
                    origin=request_origin(request),
                )
            )
            _set_outcome(span, outcome)
            return _text(outcome.value)


class RegisterLicenseView(APIView):
    """View for binding a license to a device."""

    @extend_schema(
        operation_id="register_license",
        summary="Register License",
        description=(
            "Bind the caller's HWID to an unbound license. Re-registering the "
            "bound HWID succeeds again."
        ),
        tags=["Client API"],
        parameters=LICENSE_PARAMETERS,
        responses={
            (200, "text/plain"): {
                "type": "string",
                "enum": [outcome.value for outcome in RegistrationOutcome],
            }
        },
    )
    def get(self, request: Request) -> HttpResponse:
        """Register a license."""
        return async_to_sync(self._handle_register)(request)

    async def _handle_register(self, request: Request) -> HttpResponse:
        """Async handler for register."""
        with tracer.start_as_current_span("register_license") as span:
            params = LicenseQuerySerializer(data=request.query_params)
            params.is_valid()
            license_key = params.validated_data.get("license", "")
            span.set_attribute("license_key", license_key)

            handler = RegisterLicenseHandler(
                state_machine=_state_machine(),
                license_repository=_license_repo,
                activity_logger=ActivityLogger(_activity_repo),
            )
            outcome = await handler.handle(
                RegisterLicenseCommand(
                    license_key=license_key,
                    hwid=params.validated_data.get("hwid", ""),
                    origin=request_origin(request),
                )
            )
            _set_outcome(span, outcome)
            return _text(outcome.value)


class LicenseInfoView(APIView):
    """View for the one-line license summary."""

    @extend_schema(
        operation_id="license_info",
        summary="License Info",
        tags=["Client API"],
        parameters=[LICENSE_PARAMETERS[0]],
        responses={(200, "text/plain"): OpenApiTypes.STR},
    )
    def get(self, request: Request) -> HttpResponse:
        """Summarise a license."""
        return async_to_sync(self._handle_license_info)(request)

    async def _handle_license_info(self, request: Request) -> HttpResponse:
        """Async handler for license info."""
        with tracer.start_as_current_span("license_info") as span:
            params = LicenseInfoQuerySerializer(data=request.query_params)
            params.is_valid()
            license_key = params.validated_data.get("license", "")
            span.set_attribute("license_key", license_key)

            handler = GetLicenseInfoHandler(license_repository=_license_repo)
            summary = await handler.handle(GetLicenseInfoQuery(license_key=license_key))
            span.set_status(Status(StatusCode.OK))
            return _text(summary)


class RequestHwidResetView(APIView):
    """View for submitting a HWID reset request."""

    @extend_schema(
        operation_id="request_hwid_reset",
        summary="Request HWID Reset",
        description="Queue a HWID reset request for an admin to approve or deny.",
        tags=["Client API"],
        request=RequestHwidResetSerializer,
        responses={
            200: RequestHwidResetResponseSerializer,
            400: {"description": "Missing license or HWID"},
        },
    )
    def post(self, request: Request) -> Response:
        """Submit a HWID reset request."""
        return async_to_sync(self._handle_request_reset)(request)

    async def _handle_request_reset(self, request: Request) -> Response:
        """Async handler for HWID reset requests."""
        with tracer.start_as_current_span("request_hwid_reset") as span:
            serializer = RequestHwidResetSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            handler = RequestHwidResetHandler(
                reset_request_repository=_reset_request_repo,
                activity_logger=ActivityLogger(_activity_repo),
            )
            try:
                reset_request = await handler.handle(
                    RequestHwidResetCommand(
                        license_key=serializer.validated_data["license"],
                        hwid=serializer.validated_data["hwid"],
                        reason=serializer.validated_data["reason"],
                        origin=request_origin(request),
                    )
                )
            except InvalidHwidError as e:
                span.set_status(Status(StatusCode.ERROR, e.message))
                return Response({"error": e.message}, status=status.HTTP_400_BAD_REQUEST)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.error("HWID reset request error", exc_info=True)
                span.set_status(Status(StatusCode.ERROR, "Internal server error"))
                return Response(
                    {"error": "Internal server error"},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                )

            span.set_attribute("request_id", reset_request.id)
            span.set_status(Status(StatusCode.OK))
            response_serializer = RequestHwidResetResponseSerializer(
                {"status": "REQUESTED", "request_id": reset_request.id}
            )
            return Response(response_serializer.data, status=status.HTTP_200_OK)
