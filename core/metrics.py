"""
Prometheus metrics for the license server.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Client API metrics
license_validations_total = Counter(
    "license_validations_total",
    "Total validate calls by outcome",
    ["outcome"],
)

license_registrations_total = Counter(
    "license_registrations_total",
    "Total register calls by outcome",
    ["outcome"],
)

license_bind_conflicts_total = Counter(
    "license_bind_conflicts_total",
    "Binding writes that lost a compare-and-swap race",
)

# Admin metrics
licenses_generated_total = Counter(
    "licenses_generated_total",
    "Total licenses generated",
    ["mode"],
)

hwid_resets_total = Counter(
    "hwid_resets_total",
    "Total HWID resets",
    ["source"],
)

ban_list_changes_total = Counter(
    "ban_list_changes_total",
    "Total ban list changes",
    ["operation"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
