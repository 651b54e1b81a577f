"""
App configuration for the License Server project.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class LicenseServerConfig(AppConfig):
    """App configuration for LicenseServer."""

    name = "LicenseServer"
    verbose_name = "License Server"

    def ready(self):
        """Set up tracing export once apps are loaded, when enabled."""
        from core.instrumentation import otel_enabled, setup_opentelemetry

        if otel_enabled():
            logger.info("Setting up observability...")
            setup_opentelemetry()
