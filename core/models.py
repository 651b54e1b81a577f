"""
Model registry for the core app.
"""
from core.infrastructure.models import Document  # noqa: F401
