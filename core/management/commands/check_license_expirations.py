"""
Django management command to mark ACTIVE licenses past their expiry as EXPIRED.

Activation paths flip expired licenses lazily; this sweep catches licenses
nobody has used since they lapsed. Run it periodically (e.g., via cron).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from core.domain.clock import utcnow
from licenses.domain.services import LicenseRegistry
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to check and mark expired licenses."""

    help = "Mark ACTIVE licenses past their expiry as EXPIRED"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )
        parser.add_argument(
            "--batch-size",
            type=int,
            default=500,
            help="Licenses fetched per batch (default: 500)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        repository = DjangoLicenseRepository()
        registry = LicenseRegistry(repository)
        dry_run = options["dry_run"]
        batch_size = options["batch_size"]

        if dry_run:
            expired = async_to_sync(repository.find_active_expired)(utcnow(), limit=batch_size)
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            self.stdout.write(f"Found {len(expired)} expired license(s)")
            for license in expired[:10]:
                self.stdout.write(f"  - License {license.id} expired at {license.expires_at}")
            return

        async def sweep() -> int:
            flipped = 0
            while True:
                batch = await repository.find_active_expired(utcnow(), limit=batch_size)
                if not batch:
                    return flipped
                for license in batch:
                    if await registry.expire(license, source="sweep"):
                        flipped += 1
                if len(batch) < batch_size:
                    return flipped

        flipped = async_to_sync(sweep)()
        logger.info("Expiry sweep marked %d license(s) as expired", flipped)
        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully marked {flipped} license(s) as expired")
        )
