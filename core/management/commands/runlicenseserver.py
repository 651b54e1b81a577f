"""
Django management command to run the development server on the
configured port.
"""

from django.core.management import call_command
from django.core.management.base import BaseCommand

from core.config import get_service_config


class Command(BaseCommand):
    """Command to run the license server."""

    help = "Run the development server on PORT (default: 3000)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--host",
            type=str,
            default="0.0.0.0",
            help="Interface to bind (default: 0.0.0.0)",
        )

    def handle(self, *args, **options):
        """Execute command."""
        config = get_service_config()
        self.stdout.write(f"License server listening on http://{options['host']}:{config.port}")
        self.stdout.write(f"Admin API: http://localhost:{config.port}/api/admin/")
        call_command("runserver", f"{options['host']}:{config.port}")
