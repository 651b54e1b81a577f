"""
Process configuration.

ServiceConfig is built once when the settings module is loaded and is
read through ``settings.SERVICE_CONFIG`` by every component that needs it.
"""
import os
import secrets
from dataclasses import dataclass
from typing import Mapping, Optional

from django.core.exceptions import ImproperlyConfigured

DEFAULT_PORT = 3000


@dataclass(frozen=True)
class ServiceConfig:
    """Immutable runtime configuration for the license server."""

    admin_username: str
    admin_password: str
    session_secret: str
    port: int = DEFAULT_PORT

    def __post_init__(self):
        """Validate configuration."""
        if not self.admin_username or not self.admin_password:
            raise ImproperlyConfigured(
                "ADMIN_USERNAME and ADMIN_PASSWORD must be set"
            )
        if not self.session_secret:
            raise ImproperlyConfigured("Session secret cannot be empty")
        if not 0 < self.port < 65536:
            raise ImproperlyConfigured(f"Invalid port: {self.port}")

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ServiceConfig":
        """
        Build configuration from environment variables.

        Reads ADMIN_USERNAME, ADMIN_PASSWORD, SESSION_SECRET and PORT.
        A random session secret is generated when SESSION_SECRET is unset,
        which invalidates admin sessions on every restart.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ServiceConfig instance

        Raises:
            ImproperlyConfigured: If credentials are missing or PORT is invalid
        """
        environ = os.environ if environ is None else environ
        raw_port = environ.get("PORT") or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ImproperlyConfigured(f"Invalid PORT: {raw_port}") from exc

        return cls(
            admin_username=environ.get("ADMIN_USERNAME", ""),
            admin_password=environ.get("ADMIN_PASSWORD", ""),
            session_secret=environ.get("SESSION_SECRET")
            or "license_server_" + secrets.token_urlsafe(32),
            port=port,
        )

    def credentials_match(self, username: str, password: str) -> bool:
        """
        Compare admin credentials in constant time.

        Args:
            username: Submitted username
            password: Submitted password

        Returns:
            True if both match
        """
        username_ok = secrets.compare_digest(
            (username or "").encode(), self.admin_username.encode()
        )
        password_ok = secrets.compare_digest(
            (password or "").encode(), self.admin_password.encode()
        )
        return username_ok and password_ok


def get_service_config() -> ServiceConfig:
    """Return the ServiceConfig installed in Django settings."""
    from django.conf import settings

    return settings.SERVICE_CONFIG
