"""
Admin API views.

These endpoints are used by operators to:
- Log in and out
- Generate, bulk generate, delete and reset licenses
- Resolve HWID reset requests
- Manage the ban list and service settings
- Read the dashboard counters and the activity log

Every endpoint except login requires an admin session (see
core.middleware.auth.AdminSessionMiddleware).
"""

import logging

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activity.application.handlers.list_activity_handler import ListActivityHandler
from activity.application.queries.list_activity import ListActivityQuery
from activity.application.services.activity_logger import ActivityLogger
from activity.domain.activity import ActivityAction
from activity.infrastructure.repositories.document_activity_repository import (
    DocumentActivityRepository,
)
from api.request_context import request_origin
from api.v1.admin.serializers import (
    ActivityEntrySerializer,
    ActivityQuerySerializer,
    BanHwidRequestSerializer,
    BanListSerializer,
    BulkGenerateRequestSerializer,
    BulkGenerateResponseSerializer,
    DashboardStatsSerializer,
    GenerateLicenseRequestSerializer,
    GenerateLicenseResponseSerializer,
    LicenseKeyRequestSerializer,
    LicenseSerializer,
    LoginRequestSerializer,
    ResetRequestIdSerializer,
    ResetRequestSerializer,
    SettingsSerializer,
    UnbanHwidRequestSerializer,
)
from core.config import get_service_config
from core.domain.exceptions import InvalidCredentialsError
from core.infrastructure.document_store_adapters import DjangoDocumentStore
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import SESSION_ADMIN_KEY
from licenses.application.commands.generate_license import (
    BulkGenerateLicensesCommand,
    GenerateLicenseCommand,
)
from licenses.application.commands.manage_license import DeleteLicenseCommand, ResetHwidCommand
from licenses.application.handlers.dashboard_handlers import (
    GetDashboardStatsHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.license_admin_handlers import (
    BulkGenerateLicensesHandler,
    DeleteLicenseHandler,
    GenerateLicenseHandler,
    ResetHwidHandler,
)
from licenses.application.queries.list_licenses import GetDashboardStatsQuery, ListLicensesQuery
from licenses.domain.outcomes import LicenseCreationOutcome
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)
from policies.application.commands.policy_commands import (
    BanHwidCommand,
    UnbanHwidCommand,
    UpdateSettingsCommand,
)
from policies.application.handlers.policy_handlers import (
    BanHwidHandler,
    GetBanListHandler,
    GetSettingsHandler,
    UnbanHwidHandler,
    UpdateSettingsHandler,
)
from policies.infrastructure.repositories.document_ban_list_repository import (
    DocumentBanListRepository,
)
from policies.infrastructure.repositories.document_settings_repository import (
    DocumentSettingsRepository,
)
from resets.application.commands.reset_request_commands import (
    ApproveHwidResetCommand,
    DenyHwidResetCommand,
)
from resets.application.handlers.reset_request_handlers import (
    ApproveHwidResetHandler,
    DenyHwidResetHandler,
    ListResetRequestsHandler,
)
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

ADMIN_TAGS = ["Admin API"]


def _activity_logger() -> ActivityLogger:
    return ActivityLogger(_activity_repo)


def _validation_error(span, serializer) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


class LoginView(APIView):
    """View for admin login."""

    @extend_schema(
        operation_id="admin_login",
        summary="Admin Login",
        description="Check admin credentials and start a 30 minute session.",
        tags=ADMIN_TAGS,
        request=LoginRequestSerializer,
        responses={200: {"description": "Logged in"}, 401: {"description": "Bad credentials"}},
    )
    def post(self, request: Request) -> Response:
        """Log in as admin."""
        with tracer.start_as_current_span("admin_login") as span:
            serializer = LoginRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            username = serializer.validated_data["username"]
            config = get_service_config()
            origin = request_origin(request, actor=username)

            if not config.credentials_match(username, serializer.validated_data["password"]):
                async_to_sync(_activity_logger().log)(
                    ActivityAction.ADMIN_LOGIN_FAILED,
                    f"Failed login attempt for: {username}",
                    origin,
                )
                span.set_status(Status(StatusCode.ERROR, "Invalid credentials"))
                raise InvalidCredentialsError()

            request.session.cycle_key()
            request.session[SESSION_ADMIN_KEY] = config.admin_username
            async_to_sync(_activity_logger().log)(
                ActivityAction.ADMIN_LOGIN_SUCCESS, "Admin logged in", origin
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "ok", "username": config.admin_username})


class LogoutView(APIView):
    """View for admin logout."""

    @extend_schema(
        operation_id="admin_logout",
        summary="Admin Logout",
        tags=ADMIN_TAGS,
        request=None,
        responses={200: {"description": "Logged out"}},
    )
    def post(self, request: Request) -> Response:
        """Log out and clear the session."""
        origin = request_origin(request)
        request.session.flush()
        async_to_sync(_activity_logger().log)(
            ActivityAction.ADMIN_LOGOUT, "Admin logged out", origin
        )
        return Response({"status": "ok"})


class DashboardView(APIView):
    """View for dashboard counters."""

    @extend_schema(
        operation_id="admin_dashboard",
        summary="Dashboard Statistics",
        tags=ADMIN_TAGS,
        responses={200: DashboardStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get dashboard counters."""
        return async_to_sync(self._handle_dashboard)(request)

    async def _handle_dashboard(self, request: Request) -> Response:
        """Async handler for dashboard counters."""
        with tracer.start_as_current_span("admin_dashboard") as span:
            handler = GetDashboardStatsHandler(
                license_repository=_license_repo,
                ban_list_repository=_ban_list_repo,
                reset_request_repository=_reset_request_repo,
            )
            stats = await handler.handle(GetDashboardStatsQuery())
            span.set_attribute("total_licenses", stats.total_licenses)
            span.set_status(Status(StatusCode.OK))
            return Response(DashboardStatsSerializer(stats).data)


class LicenseListView(APIView):
    """View for listing licenses."""

    @extend_schema(
        operation_id="admin_list_licenses",
        summary="List Licenses",
        description="Every license, newest first, with derived status and history.",
        tags=ADMIN_TAGS,
        responses={200: LicenseSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for listing licenses."""
        with tracer.start_as_current_span("admin_list_licenses") as span:
            handler = ListLicensesHandler(license_repository=_license_repo)
            licenses = await handler.handle(ListLicensesQuery())
            span.set_attribute("count", len(licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"results": LicenseSerializer(licenses, many=True).data, "count": len(licenses)}
            )


class GenerateLicenseView(APIView):
    """View for generating one license."""

    @extend_schema(
        operation_id="admin_generate_license",
        summary="Generate License",
        description=(
            "Create a license with the given key, or a generated LIC-XXXXXXXX-XXXXXXXX "
            "key when none is given."
        ),
        tags=ADMIN_TAGS,
        request=GenerateLicenseRequestSerializer,
        responses={
            201: GenerateLicenseResponseSerializer,
            409: GenerateLicenseResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Generate a license."""
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        """Async handler for license generation."""
        with tracer.start_as_current_span("admin_generate_license") as span:
            serializer = GenerateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            handler = GenerateLicenseHandler(
                license_repository=_license_repo, activity_logger=_activity_logger()
            )
            result = await handler.handle(
                GenerateLicenseCommand(
                    license_key=serializer.validated_data["license"],
                    expiry=serializer.validated_data["expiry"],
                    origin=request_origin(request),
                )
            )
            span.set_attribute("license_key", result.license_key)
            span.set_attribute("outcome", result.outcome.value)

            if result.outcome is LicenseCreationOutcome.DUPLICATE_KEY:
                span.set_status(Status(StatusCode.ERROR, "Duplicate key"))
                return Response(
                    GenerateLicenseResponseSerializer(result).data,
                    status=status.HTTP_409_CONFLICT,
                )
            span.set_status(Status(StatusCode.OK))
            return Response(
                GenerateLicenseResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class BulkGenerateView(APIView):
    """View for generating a batch of licenses."""

    @extend_schema(
        operation_id="admin_bulk_generate",
        summary="Bulk Generate Licenses",
        description="Create 1 to 100 licenses sharing one batch id.",
        tags=ADMIN_TAGS,
        request=BulkGenerateRequestSerializer,
        responses={201: BulkGenerateResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Generate a batch of licenses."""
        return async_to_sync(self._handle_bulk_generate)(request)

    async def _handle_bulk_generate(self, request: Request) -> Response:
        """Async handler for bulk generation."""
        with tracer.start_as_current_span("admin_bulk_generate") as span:
            serializer = BulkGenerateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            handler = BulkGenerateLicensesHandler(
                license_repository=_license_repo, activity_logger=_activity_logger()
            )
            result = await handler.handle(
                BulkGenerateLicensesCommand(
                    count=serializer.validated_data["count"],
                    prefix=serializer.validated_data["prefix"],
                    expiry=serializer.validated_data["expiry"],
                    origin=request_origin(request),
                )
            )
            span.set_attribute("batch_id", result.batch_id)
            span.set_attribute("count", result.count)
            span.set_status(Status(StatusCode.OK))
            return Response(
                BulkGenerateResponseSerializer(result).data, status=status.HTTP_201_CREATED
            )


class DeleteLicenseView(APIView):
    """View for deleting a license."""

    @extend_schema(
        operation_id="admin_delete_license",
        summary="Delete License",
        tags=ADMIN_TAGS,
        request=LicenseKeyRequestSerializer,
        responses={200: {"description": "Deleted"}, 404: {"description": "License not found"}},
    )
    def post(self, request: Request) -> Response:
        """Delete a license."""
        return async_to_sync(self._handle_delete)(request)

    async def _handle_delete(self, request: Request) -> Response:
        """Async handler for license deletion."""
        with tracer.start_as_current_span("admin_delete_license") as span:
            serializer = LicenseKeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            license_key = serializer.validated_data["license"]
            span.set_attribute("license_key", license_key)
            handler = DeleteLicenseHandler(
                license_repository=_license_repo, activity_logger=_activity_logger()
            )
            await handler.handle(
                DeleteLicenseCommand(license_key=license_key, origin=request_origin(request))
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "deleted", "license": license_key})


class ResetHwidView(APIView):
    """View for unbinding a license's HWID."""

    @extend_schema(
        operation_id="admin_reset_hwid",
        summary="Reset HWID",
        tags=ADMIN_TAGS,
        request=LicenseKeyRequestSerializer,
        responses={200: {"description": "Reset"}, 404: {"description": "License not found"}},
    )
    def post(self, request: Request) -> Response:
        """Reset a license's HWID."""
        return async_to_sync(self._handle_reset)(request)

    async def _handle_reset(self, request: Request) -> Response:
        """Async handler for HWID reset."""
        with tracer.start_as_current_span("admin_reset_hwid") as span:
            serializer = LicenseKeyRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            license_key = serializer.validated_data["license"]
            span.set_attribute("license_key", license_key)
            handler = ResetHwidHandler(
                license_repository=_license_repo, activity_logger=_activity_logger()
            )
            await handler.handle(
                ResetHwidCommand(license_key=license_key, origin=request_origin(request))
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "reset", "license": license_key})


class ResetRequestListView(APIView):
    """View for listing pending HWID reset requests."""

    @extend_schema(
        operation_id="admin_list_reset_requests",
        summary="List Reset Requests",
        tags=ADMIN_TAGS,
        responses={200: ResetRequestSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List pending reset requests."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for listing reset requests."""
        with tracer.start_as_current_span("admin_list_reset_requests") as span:
            handler = ListResetRequestsHandler(reset_request_repository=_reset_request_repo)
            requests = await handler.handle()
            span.set_attribute("count", len(requests))
            span.set_status(Status(StatusCode.OK))
            return Response({"results": ResetRequestSerializer(requests, many=True).data})


class ApproveHwidResetView(APIView):
    """View for approving a HWID reset request."""

    @extend_schema(
        operation_id="admin_approve_hwid_reset",
        summary="Approve HWID Reset",
        description="Unbind the requested license and remove the request.",
        tags=ADMIN_TAGS,
        request=ResetRequestIdSerializer,
        responses={200: {"description": "Approved"}, 404: {"description": "Request not found"}},
    )
    def post(self, request: Request) -> Response:
        """Approve a reset request."""
        return async_to_sync(self._handle_approve)(request)

    async def _handle_approve(self, request: Request) -> Response:
        """Async handler for approving a reset request."""
        with tracer.start_as_current_span("admin_approve_hwid_reset") as span:
            serializer = ResetRequestIdSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            request_id = serializer.validated_data["request_id"]
            span.set_attribute("request_id", request_id)
            handler = ApproveHwidResetHandler(
                reset_request_repository=_reset_request_repo,
                license_repository=_license_repo,
                activity_logger=_activity_logger(),
            )
            resolved = await handler.handle(
                ApproveHwidResetCommand(request_id=request_id, origin=request_origin(request))
            )
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"status": "approved", "request_id": request_id, "license": resolved.license}
            )


class DenyHwidResetView(APIView):
    """View for denying a HWID reset request."""

    @extend_schema(
        operation_id="admin_deny_hwid_reset",
        summary="Deny HWID Reset",
        tags=ADMIN_TAGS,
        request=ResetRequestIdSerializer,
        responses={200: {"description": "Denied"}, 404: {"description": "Request not found"}},
    )
    def post(self, request: Request) -> Response:
        """Deny a reset request."""
        return async_to_sync(self._handle_deny)(request)

    async def _handle_deny(self, request: Request) -> Response:
        """Async handler for denying a reset request."""
        with tracer.start_as_current_span("admin_deny_hwid_reset") as span:
            serializer = ResetRequestIdSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            request_id = serializer.validated_data["request_id"]
            span.set_attribute("request_id", request_id)
            handler = DenyHwidResetHandler(
                reset_request_repository=_reset_request_repo,
                activity_logger=_activity_logger(),
            )
            await handler.handle(
                DenyHwidResetCommand(request_id=request_id, origin=request_origin(request))
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "denied", "request_id": request_id})


class BanListView(APIView):
    """View for reading the ban list."""

    @extend_schema(
        operation_id="admin_ban_list",
        summary="Ban List",
        tags=ADMIN_TAGS,
        responses={200: BanListSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get the ban list."""
        return async_to_sync(self._handle_ban_list)(request)

    async def _handle_ban_list(self, request: Request) -> Response:
        """Async handler for the ban list."""
        with tracer.start_as_current_span("admin_ban_list") as span:
            ban_list = await GetBanListHandler(ban_list_repository=_ban_list_repo).handle()
            span.set_attribute("count", len(ban_list))
            span.set_status(Status(StatusCode.OK))
            return Response(BanListSerializer(ban_list).data)


class BanHwidView(APIView):
    """View for banning a HWID."""

    @extend_schema(
        operation_id="admin_ban_hwid",
        summary="Ban HWID",
        description="Add a HWID to the global ban list. Banning a listed HWID is a no-op.",
        tags=ADMIN_TAGS,
        request=BanHwidRequestSerializer,
        responses={200: {"description": "Banned"}, 400: {"description": "Empty HWID"}},
    )
    def post(self, request: Request) -> Response:
        """Ban a HWID."""
        return async_to_sync(self._handle_ban)(request)

    async def _handle_ban(self, request: Request) -> Response:
        """Async handler for banning a HWID."""
        with tracer.start_as_current_span("admin_ban_hwid") as span:
            serializer = BanHwidRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            hwid = serializer.validated_data["hwid"]
            span.set_attribute("hwid", hwid)
            handler = BanHwidHandler(
                ban_list_repository=_ban_list_repo, activity_logger=_activity_logger()
            )
            added = await handler.handle(
                BanHwidCommand(
                    hwid=hwid,
                    reason=serializer.validated_data["reason"],
                    origin=request_origin(request),
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "banned", "hwid": hwid, "added": added})


class UnbanHwidView(APIView):
    """View for unbanning a HWID."""

    @extend_schema(
        operation_id="admin_unban_hwid",
        summary="Unban HWID",
        tags=ADMIN_TAGS,
        request=UnbanHwidRequestSerializer,
        description="Remove a HWID from the global ban list. The HWID is trimmed as in ban.",
        responses={200: {"description": "Unbanned"}, 400: {"description": "Empty HWID"}},
    )
    def post(self, request: Request) -> Response:
        """Unban a HWID."""
        return async_to_sync(self._handle_unban)(request)

    async def _handle_unban(self, request: Request) -> Response:
        """Async handler for unbanning a HWID."""
        with tracer.start_as_current_span("admin_unban_hwid") as span:
            serializer = UnbanHwidRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            hwid = serializer.validated_data["hwid"]
            span.set_attribute("hwid", hwid)
            handler = UnbanHwidHandler(
                ban_list_repository=_ban_list_repo, activity_logger=_activity_logger()
            )
            removed = await handler.handle(
                UnbanHwidCommand(hwid=hwid, origin=request_origin(request))
            )
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "unbanned", "hwid": hwid, "removed": removed})


class ActivityLogView(APIView):
    """View for reading the activity log."""

    @extend_schema(
        operation_id="admin_activity",
        summary="Activity Log",
        description="Most recent activity entries, newest first.",
        tags=ADMIN_TAGS,
        parameters=[ActivityQuerySerializer],
        responses={200: ActivityEntrySerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List recent activity."""
        return async_to_sync(self._handle_activity)(request)

    async def _handle_activity(self, request: Request) -> Response:
        """Async handler for the activity log."""
        with tracer.start_as_current_span("admin_activity") as span:
            serializer = ActivityQuerySerializer(data=request.query_params)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            handler = ListActivityHandler(activity_repository=_activity_repo)
            entries = await handler.handle(
                ListActivityQuery(limit=serializer.validated_data["limit"])
            )
            span.set_attribute("count", len(entries))
            span.set_status(Status(StatusCode.OK))
            return Response({"results": ActivityEntrySerializer(entries, many=True).data})


class SettingsView(APIView):
    """View for reading and updating service settings."""

    @extend_schema(
        operation_id="admin_get_settings",
        summary="Get Settings",
        tags=ADMIN_TAGS,
        responses={200: SettingsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get settings."""
        return async_to_sync(self._handle_get)(request)

    @extend_schema(
        operation_id="admin_update_settings",
        summary="Update Settings",
        description="Partially update settings. Only the given fields change.",
        tags=ADMIN_TAGS,
        request=SettingsSerializer,
        responses={200: SettingsSerializer, 400: {"description": "Invalid settings"}},
    )
    def patch(self, request: Request) -> Response:
        """Update settings."""
        return async_to_sync(self._handle_update)(request)

    async def _handle_get(self, request: Request) -> Response:
        """Async handler for reading settings."""
        with tracer.start_as_current_span("admin_get_settings") as span:
            settings = await GetSettingsHandler(settings_repository=_settings_repo).handle()
            span.set_status(Status(StatusCode.OK))
            return Response(SettingsSerializer(settings).data)

    async def _handle_update(self, request: Request) -> Response:
        """Async handler for updating settings."""
        with tracer.start_as_current_span("admin_update_settings") as span:
            serializer = SettingsSerializer(data=request.data, partial=True)
            if not serializer.is_valid():
                return _validation_error(span, serializer)

            handler = UpdateSettingsHandler(
                settings_repository=_settings_repo, activity_logger=_activity_logger()
            )
            settings = await handler.handle(
                UpdateSettingsCommand(
                    changes=dict(serializer.validated_data), origin=request_origin(request)
                )
            )
            span.set_status(Status(StatusCode.OK))
            return Response(SettingsSerializer(settings).data)
