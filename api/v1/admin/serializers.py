"""
Serializers for admin API endpoints.
"""

from rest_framework import serializers

from activity.application.queries.list_activity import MAX_LIMIT
from activity.ports.activity_repository import DEFAULT_LIMIT
from licenses.application.commands.generate_license import MAX_BULK_COUNT
from licenses.domain.license_key import DEFAULT_PREFIX

# Date-only values mean midnight UTC
EXPIRY_INPUT_FORMATS = ["iso-8601", "%Y-%m-%d"]


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for admin login request."""

    username = serializers.CharField(required=True, trim_whitespace=False)
    password = serializers.CharField(required=True, trim_whitespace=False)


class GenerateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for generate license request."""

    license = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")
    expiry = serializers.DateTimeField(
        required=False, allow_null=True, default=None, input_formats=EXPIRY_INPUT_FORMATS
    )


class BulkGenerateRequestSerializer(serializers.Serializer):
    """Serializer for bulk generate request."""

    count = serializers.IntegerField(
        required=False, default=1, min_value=1, max_value=MAX_BULK_COUNT
    )
    prefix = serializers.RegexField(
        r"^[A-Za-z0-9_]+$", required=False, max_length=20, default=DEFAULT_PREFIX
    )
    expiry = serializers.DateTimeField(
        required=False, allow_null=True, default=None, input_formats=EXPIRY_INPUT_FORMATS
    )


class LicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for requests naming one license (delete, reset HWID)."""

    license = serializers.CharField(required=True, max_length=255)


class ResetRequestIdSerializer(serializers.Serializer):
    """Serializer for approve/deny reset request."""

    request_id = serializers.CharField(required=True, max_length=64)


class BanHwidRequestSerializer(serializers.Serializer):
    """Serializer for ban HWID request."""

    hwid = serializers.CharField(required=True, max_length=500)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class UnbanHwidRequestSerializer(serializers.Serializer):
    """Serializer for unban HWID request."""

    hwid = serializers.CharField(required=True, max_length=500)


class ActivityQuerySerializer(serializers.Serializer):
    """Serializer for activity log query parameters."""

    limit = serializers.IntegerField(
        required=False, default=DEFAULT_LIMIT, min_value=1, max_value=MAX_LIMIT
    )


class SettingsSerializer(serializers.Serializer):
    """Serializer for service settings (read and partial update)."""

    api_enabled = serializers.BooleanField(required=False)
    max_devices_per_license = serializers.IntegerField(required=False, min_value=1)
    allow_hwid_change = serializers.BooleanField(required=False)
    auto_expire_in_days = serializers.IntegerField(required=False, min_value=0)
    maintenance_mode = serializers.BooleanField(required=False)


class HistoryEntrySerializer(serializers.Serializer):
    """Serializer for HistoryEntryDTO."""

    action = serializers.CharField()
    date = serializers.DateTimeField(allow_null=True)
    details = serializers.CharField(allow_null=True)
    ip = serializers.CharField(allow_null=True)
    admin = serializers.CharField(allow_null=True)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    license_key = serializers.CharField()
    hwid = serializers.CharField(allow_blank=True)
    status = serializers.CharField()
    expiry = serializers.DateTimeField(allow_null=True)
    activated_at = serializers.DateTimeField(allow_null=True)
    last_validated = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField(allow_null=True)
    created_by = serializers.CharField(allow_null=True)
    activation_ip = serializers.CharField(allow_null=True)
    device_info = serializers.CharField(allow_null=True)
    batch_id = serializers.IntegerField(allow_null=True)
    history = HistoryEntrySerializer(many=True)


class GenerateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for GenerateLicenseResultDTO."""

    outcome = serializers.CharField(source="outcome.value")
    license_key = serializers.CharField()
    expiry = serializers.DateTimeField(allow_null=True)


class BulkGenerateResponseSerializer(serializers.Serializer):
    """Serializer for BulkGenerateResultDTO."""

    batch_id = serializers.IntegerField()
    count = serializers.IntegerField()
    license_keys = serializers.ListField(child=serializers.CharField())
    expiry = serializers.DateTimeField(allow_null=True)


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStatsDTO."""

    total_licenses = serializers.IntegerField()
    active_licenses = serializers.IntegerField()
    inactive_licenses = serializers.IntegerField()
    expired_licenses = serializers.IntegerField()
    recent_validations = serializers.IntegerField()
    banned_hwids = serializers.IntegerField()
    pending_reset_requests = serializers.IntegerField()


class ActivityEntrySerializer(serializers.Serializer):
    """Serializer for ActivityEntry."""

    id = serializers.CharField()
    action = serializers.CharField()
    details = serializers.CharField()
    timestamp = serializers.DateTimeField(allow_null=True)
    ip = serializers.CharField()
    user_agent = serializers.CharField()


class ResetRequestSerializer(serializers.Serializer):
    """Serializer for HwidResetRequest."""

    id = serializers.CharField()
    license = serializers.CharField()
    hwid = serializers.CharField()
    reason = serializers.CharField()
    request_ip = serializers.CharField()
    user_agent = serializers.CharField()
    status = serializers.CharField(source="status.value")
    timestamp = serializers.DateTimeField(allow_null=True)


class BanListSerializer(serializers.Serializer):
    """Serializer for BanList."""

    hwids = serializers.ListField(child=serializers.CharField())
