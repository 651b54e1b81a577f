"""
Admin session authentication middleware.

This middleware guards the admin API with the signed session cookie set
at login. Client and operational endpoints are not authenticated.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.config import get_service_config

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/admin/"
SESSION_ADMIN_KEY = "admin_user"


class AdminSessionMiddleware(MiddlewareMixin):
    """
    Middleware for admin session authentication.

    This middleware:
    1. Lets the login endpoint and every non-admin path through
    2. Checks the session's admin user against the configured username
    3. Returns 403 Forbidden if the session is missing or stale
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin session.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 403 if authentication fails, None otherwise
        """
        request.admin_username = None  # type: ignore
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None
        if self._should_skip_auth(request.path):
            return None

        username = request.session.get(SESSION_ADMIN_KEY)
        if not username or username != get_service_config().admin_username:
            logger.warning(
                "Unauthenticated admin request",
                extra={"path": request.path, "remote_addr": request.META.get("REMOTE_ADDR")},
            )
            return JsonResponse(
                {
                    "error": {
                        "code": "NOT_AUTHENTICATED",
                        "message": "Admin login required",
                    }
                },
                status=403,
            )

        request.admin_username = username  # type: ignore
        return None

    def _should_skip_auth(self, path: str) -> bool:
        """
        Check if authentication should be skipped for this admin path.

        Args:
            path: Request path

        Returns:
            True if auth should be skipped
        """
        return path.rstrip("/") == ADMIN_API_PREFIX + "login"
