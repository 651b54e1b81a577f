"""
Production settings for the License Server.
"""

import os

from core.config import ServiceConfig

from .base import *  # noqa: F403, F401
from .logging import add_file_handler

DEBUG = False

ALLOWED_HOSTS = [host for host in os.environ.get("ALLOWED_HOSTS", "").split(",") if host]

SERVICE_CONFIG = ServiceConfig.from_environ()
SECRET_KEY = SERVICE_CONFIG.session_secret

# Security settings
SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "true").lower() == "true"
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"

# Logging in production
LOG_FILE = os.environ.get("LOG_FILE")
if LOG_FILE:
    add_file_handler(LOGGING, LOG_FILE)  # noqa: F405
