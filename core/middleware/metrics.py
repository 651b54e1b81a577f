"""
Metrics middleware for Prometheus.

Records HTTP request metrics for monitoring.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse
from django.urls import Resolver404, resolve

from core.metrics import (
    http_request_duration_seconds,
    http_requests_total,
)

UNMATCHED_ENDPOINT = "unmatched"


def endpoint_label(request: HttpRequest) -> str:
    """
    Return the URL route a request maps to, for use as a metric label.

    Paths that match no route share one label so the label set stays
    bounded.

    Args:
        request: Incoming request

    Returns:
        Route pattern such as ``api/validate``, or ``unmatched``
    """
    match = getattr(request, "resolver_match", None)
    if match is None:
        try:
            match = resolve(request.path_info)
        except Resolver404:
            return UNMATCHED_ENDPOINT
    return match.route or UNMATCHED_ENDPOINT


class MetricsMiddleware:
    """
    Middleware to record HTTP metrics for Prometheus.

    Records:
    - Request count by method, endpoint, status
    - Request duration histogram
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and record metrics."""
        start_time = time.time()
        endpoint = endpoint_label(request)
        status_code = 500

        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            http_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
            ).inc()
            http_request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(time.time() - start_time)
