"""
Request helpers shared by the client and admin APIs.
"""

from typing import Optional

from django.http import HttpRequest

from core.domain.value_objects import RequestOrigin


def client_ip(request: HttpRequest) -> str:
    """
    Get the caller IP.

    The first X-Forwarded-For hop wins over REMOTE_ADDR.

    Args:
        request: HTTP request

    Returns:
        IP address or "unknown"
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    return request.META.get("REMOTE_ADDR") or "unknown"


def request_origin(request: HttpRequest, actor: Optional[str] = None) -> RequestOrigin:
    """
    Build a RequestOrigin for activity entries and license history.

    Args:
        request: HTTP request
        actor: Admin username, when the caller is an admin

    Returns:
        RequestOrigin
    """
    return RequestOrigin(
        ip=client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT") or "unknown",
        actor=actor if actor is not None else getattr(request, "admin_username", None),
    )
