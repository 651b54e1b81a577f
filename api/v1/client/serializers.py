"""
Serializers for client API endpoints.

License keys and HWIDs are compared exactly, so whitespace is kept.
"""

from rest_framework import serializers


def _raw_field():
    return serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False, default=""
    )


class LicenseQuerySerializer(serializers.Serializer):
    """Query parameters of validate and register."""

    license = _raw_field()
    hwid = _raw_field()


class LicenseInfoQuerySerializer(serializers.Serializer):
    """Query parameters of license-info."""

    license = _raw_field()


class RequestHwidResetSerializer(serializers.Serializer):
    """Body of a HWID reset request."""

    license = _raw_field()
    hwid = _raw_field()
    reason = serializers.CharField(
        required=False, allow_blank=True, max_length=1000, default=""
    )


class RequestHwidResetResponseSerializer(serializers.Serializer):
    """Response of a HWID reset request."""

    status = serializers.CharField()
    requestId = serializers.CharField(source="request_id")
