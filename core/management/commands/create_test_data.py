"""
Django management command to create test data for development and testing.

Creates:
- A test product
- A test tenant
- A demo license with offline activation allowed
- Optionally, an unused voucher for the product
"""

import logging
from datetime import timedelta

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from catalog.domain.product import Product
from catalog.domain.tenant import Tenant
from catalog.infrastructure.models import Product as ProductModel
from catalog.infrastructure.repositories.django_product_repository import (
    DjangoProductRepository,
)
from catalog.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository
from core.config import ActivationConfig
from core.domain.clock import utcnow
from core.domain.value_objects import LicenseType, PlanType
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from vouchers.domain.voucher import LicenseTemplate, Voucher, generate_voucher_code
from vouchers.infrastructure.repositories.django_voucher_repository import (
    DjangoVoucherRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (product, tenant, demo license, voucher)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--product-name",
            type=str,
            default="Demo App",
            help="Product name (default: Demo App)",
        )
        parser.add_argument(
            "--tenant-name",
            type=str,
            default="Test Tenant",
            help="Tenant trade name (default: Test Tenant)",
        )
        parser.add_argument(
            "--contact-email",
            type=str,
            default="test@example.com",
            help="Tenant contact email (default: test@example.com)",
        )
        parser.add_argument(
            "--skip-voucher",
            action="store_true",
            help="Skip creating a test voucher",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        product = self.get_or_create_product(options["product_name"])
        tenant, license, voucher = async_to_sync(self.create_async_data)(product, options)
        self.print_summary(product, tenant, license, voucher)

    def get_or_create_product(self, name: str) -> Product:
        """Return the product with the slug derived from ``name``, creating it if needed."""
        slug = name.lower().replace(" ", "-").replace("_", "-")
        # pylint: disable=no-member
        existing = ProductModel.objects.filter(slug=slug).first()
        if existing:
            self.stdout.write(self.style.WARNING(f"Product '{name}' already exists (slug: {slug})"))
            return async_to_sync(DjangoProductRepository().find_by_id)(existing.id)

        product = async_to_sync(DjangoProductRepository().save)(Product.create(name=name, slug=slug))
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created product: {product.name} (slug: {slug})"))
        return product

    async def create_async_data(self, product: Product, options):
        """Create tenant, license and voucher."""
        tenant_repo = DjangoTenantRepository()
        tenant = await tenant_repo.find_by_contact_email(options["contact_email"])
        if tenant is None:
            tenant = await tenant_repo.save(
                Tenant.create(
                    trade_name=options["tenant_name"], contact_email=options["contact_email"]
                )
            )
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS(f"Created tenant: {tenant.trade_name}"))

        license = await DjangoLicenseRepository().save(
            License.create(
                key=generate_license_key(product.slug.value, LicenseType.DEMO.value),
                tenant_id=tenant.id,
                product_id=product.id,
                license_type=LicenseType.DEMO,
                plan_type=PlanType.SUBSCRIPTION,
                expires_at=utcnow() + timedelta(days=365),
                max_devices=2,
                max_activations=5,
                offline_allowed=True,
                modules={"reports": True},
            )
        )
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created license: {license.key}"))

        voucher = None
        if not options["skip_voucher"]:
            prefix = ActivationConfig.from_settings().voucher_prefix
            voucher = await DjangoVoucherRepository().create(
                Voucher.create(
                    code=generate_voucher_code(prefix),
                    product_id=product.id,
                    template=LicenseTemplate(
                        license_type=LicenseType.FULL,
                        plan_type=PlanType.SUBSCRIPTION,
                        license_duration_days=365,
                    ),
                    batch_name="test-data",
                    created_by="create_test_data",
                )
            )
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS(f"Created voucher: {voucher.code}"))

        return tenant, license, voucher

    def print_summary(self, product: Product, tenant: Tenant, license: License, voucher):
        """Print summary of created test data."""
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60))
        self.stdout.write(self.style.SUCCESS("Test Data Summary"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        self.stdout.write("\nProduct:")
        self.stdout.write(f"   Name: {product.name}")
        self.stdout.write(f"   Slug: {product.slug.value}")
        self.stdout.write(f"   ID: {product.id}")

        self.stdout.write("\nTenant:")
        self.stdout.write(f"   Trade name: {tenant.trade_name}")
        self.stdout.write(f"   ID: {tenant.id}")

        self.stdout.write("\nLicense:")
        self.stdout.write(f"   Key: {license.key}")
        self.stdout.write(f"   Expires: {license.expires_at}")

        if voucher:
            self.stdout.write("\nVoucher:")
            self.stdout.write(f"   Code: {voucher.code}")

        self.stdout.write("\nExample API Request:")
        self.stdout.write("   curl -X POST http://localhost:8000/api/v1/activation/online \\")
        self.stdout.write('     -H "Content-Type: application/json" \\')
        self.stdout.write(
            f'     -d \'{{"licenseKey": "{license.key}", "productId": "{product.id}", '
            f'"appVersion": "1.0.0", "deviceFingerprint": "demo-device-0001"}}\''
        )

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60 + "\n"))
