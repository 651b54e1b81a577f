"""
Django management command to generate licenses from the shell.

Creates a batch of licenses with the same rules as the admin API and
prints one key per line.
"""

import logging
from datetime import datetime, time, timezone

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date, parse_datetime

from activity.application.services.activity_logger import ActivityLogger
from activity.infrastructure.repositories.document_activity_repository import (
    DocumentActivityRepository,
)
from core.domain.value_objects import RequestOrigin
from core.infrastructure.document_store_adapters import DjangoDocumentStore
from licenses.application.commands.generate_license import (
    MAX_BULK_COUNT,
    BulkGenerateLicensesCommand,
)
from licenses.application.handlers.license_admin_handlers import BulkGenerateLicensesHandler
from licenses.domain.license_key import DEFAULT_PREFIX
from licenses.infrastructure.repositories.document_license_repository import (
    DocumentLicenseRepository,
)

logger = logging.getLogger(__name__)


def parse_expiry(value):
    """
    Parse an --expiry argument.

    Args:
        value: ISO date or datetime string

    Returns:
        Aware UTC datetime, or None when value is empty

    Raises:
        CommandError: If the value cannot be parsed
    """
    if not value:
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        day = parse_date(value)
        if day is None:
            raise CommandError(f"Invalid expiry: {value}")
        return datetime.combine(day, time.min, tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Command(BaseCommand):
    """Command to generate licenses."""

    help = f"Generate 1-{MAX_BULK_COUNT} licenses sharing one batch id"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--count",
            type=int,
            default=1,
            help=f"Number of licenses (1-{MAX_BULK_COUNT}, default: 1)",
        )
        parser.add_argument(
            "--prefix",
            type=str,
            default=DEFAULT_PREFIX,
            help=f"Key prefix (default: {DEFAULT_PREFIX})",
        )
        parser.add_argument(
            "--expiry",
            type=str,
            default=None,
            help="Expiry as ISO date or datetime (default: never)",
        )
        parser.add_argument(
            "--created-by",
            type=str,
            default="cli",
            help="Name recorded as the creator (default: cli)",
        )

    def handle(self, *args, **options):
        """Execute command."""
        try:
            command = BulkGenerateLicensesCommand(
                count=options["count"],
                prefix=options["prefix"],
                expiry=parse_expiry(options["expiry"]),
                origin=RequestOrigin(ip="cli", user_agent="manage.py", actor=options["created_by"]),
            )
        except ValueError as e:
            raise CommandError(str(e)) from e

        store = DjangoDocumentStore()
        handler = BulkGenerateLicensesHandler(
            license_repository=DocumentLicenseRepository(store),
            activity_logger=ActivityLogger(DocumentActivityRepository(store)),
        )
        result = async_to_sync(handler.handle)(command)

        for key in result.license_keys:
            self.stdout.write(key)
        self.stdout.write(
            self.style.SUCCESS(f"Generated {result.count} licenses (batch {result.batch_id})")
        )
        logger.info(
            "Generated licenses from CLI",
            extra={"count": result.count, "batch_id": result.batch_id},
        )
