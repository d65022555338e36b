"""
Django management command to revoke devices admitted beyond a license's cap.

Concurrent first activations can briefly over-admit devices; this command
revokes the newest surplus devices until every license is within
``max_devices``.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand
from django.db.models import Count, F, Q

from activations.domain.services import DeviceLimitReconciler
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoDeviceActivationRepository,
)
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


class Command(BaseCommand):
    """Command to reconcile device limits."""

    help = "Revoke surplus active devices on licenses over their device cap"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - only report surplus devices",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        license_repository = DjangoLicenseRepository()
        reconciler = DeviceLimitReconciler(DjangoDeviceActivationRepository())

        # pylint: disable=no-member
        over_limit_ids = list(
            LicenseModel.objects.annotate(
                active_devices=Count(
                    "device_activations",
                    filter=Q(device_activations__revoked_at__isnull=True),
                )
            )
            .filter(active_devices__gt=F("max_devices"))
            .values_list("id", flat=True)
        )
        self.stdout.write(f"Found {len(over_limit_ids)} license(s) over their device cap")

        async def reconcile() -> int:
            total = 0
            for license_id in over_limit_ids:
                license = await license_repository.find_by_id(license_id)
                if license is None:
                    continue
                if dry_run:
                    surplus = await reconciler.surplus(license)
                    for activation in surplus:
                        self.stdout.write(
                            f"  - License {license.id}: device {activation.device_id_hash[:12]}"
                        )
                    total += len(surplus)
                else:
                    total += len(await reconciler.reconcile(license))
            return total

        total = async_to_sync(reconcile)()

        # pylint: disable=no-member
        if dry_run:
            self.stdout.write(self.style.WARNING(f"DRY RUN - {total} device(s) would be revoked"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Revoked {total} surplus device(s)"))
