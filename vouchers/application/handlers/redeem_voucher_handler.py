"""
RedeemVoucherHandler.

Handles voucher redemption. Tenant lookup or creation, license creation
and marking the voucher USED happen in one transaction.
"""
import logging

from catalog.domain.tenant import Tenant
from catalog.ports.product_repository import ProductRepository
from catalog.ports.tenant_repository import TenantRepository
from core.domain.clock import Clock, utcnow
from core.domain.events import EventBus
from core.domain.exceptions import (
    InvalidProductError,
    VoucherNotFoundError,
    VoucherUnavailableError,
)
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import vouchers_redeemed_total
from core.ports.unit_of_work import UnitOfWork
from licenses.domain.events import LicenseIssued
from licenses.ports.license_repository import LicenseRepository
from offline.application.dto.offline_dto import ProductSummaryDTO
from vouchers.application.commands.redeem_voucher import RedeemVoucherCommand
from vouchers.application.dto.voucher_dto import (
    LicenseSummaryDTO,
    RedeemVoucherResponseDTO,
    TenantSummaryDTO,
)
from vouchers.domain.events import VoucherRedeemed
from vouchers.domain.voucher import VoucherStatus, normalize_voucher_code
from vouchers.ports.voucher_repository import VoucherRepository

logger = logging.getLogger(__name__)


class RedeemVoucherHandler:
    """Handler for RedeemVoucherCommand."""

    def __init__(
        self,
        voucher_repository: VoucherRepository,
        product_repository: ProductRepository,
        tenant_repository: TenantRepository,
        license_repository: LicenseRepository,
        unit_of_work: UnitOfWork,
        event_bus: EventBus = default_event_bus,
        clock: Clock = utcnow,
    ):
        """Initialize handler with repositories."""
        self.voucher_repository = voucher_repository
        self.product_repository = product_repository
        self.tenant_repository = tenant_repository
        self.license_repository = license_repository
        self.unit_of_work = unit_of_work
        self.event_bus = event_bus
        self.clock = clock

    async def handle(self, command: RedeemVoucherCommand) -> RedeemVoucherResponseDTO:
        """
        Handle redeem voucher command.

        Args:
            command: RedeemVoucherCommand

        Returns:
            RedeemVoucherResponseDTO with product, tenant and license

        Raises:
            VoucherNotFoundError: If no voucher has the code
            VoucherUnavailableError: If the voucher is not UNUSED, including
                when a concurrent redemption wins
        """
        code = normalize_voucher_code(command.code)
        email = Email(command.contact_email).value if command.contact_email else None
        now = self.clock()

        async with self.unit_of_work.atomic():
            voucher = await self.voucher_repository.find_by_code(code)
            if not voucher:
                raise VoucherNotFoundError()
            if not voucher.is_redeemable:
                raise VoucherUnavailableError(voucher.status.value)

            product = await self.product_repository.find_by_id(voucher.product_id)
            if not product:
                raise InvalidProductError()

            tenant = None
            if email:
                tenant = await self.tenant_repository.find_by_contact_email(email)
            if tenant is None:
                tenant = await self.tenant_repository.save(
                    Tenant.create(
                        trade_name=command.trade_name,
                        contact_email=email,
                        contact_phone=command.contact_phone,
                    )
                )

            license = await self.license_repository.save(
                voucher.build_license(tenant.id, str(product.slug), now)
            )

            redeemed = await self.voucher_repository.mark_used(
                voucher.id, tenant.id, license.id, email, now
            )
            if not redeemed:
                # Another redemption won between our read and the update.
                raise VoucherUnavailableError(VoucherStatus.USED.value)

        vouchers_redeemed_total.inc()
        logger.info(
            "Voucher %s redeemed into license %s for tenant %s",
            voucher.code,
            license.id,
            tenant.id,
        )
        await self.event_bus.publish(
            LicenseIssued(
                license_id=license.id,
                tenant_id=tenant.id,
                product_id=product.id,
                source="voucher",
            )
        )
        await self.event_bus.publish(
            VoucherRedeemed(voucher_id=voucher.id, license_id=license.id, tenant_id=tenant.id)
        )

        return RedeemVoucherResponseDTO(
            ok=True,
            product=ProductSummaryDTO.from_entity(product),
            tenant=TenantSummaryDTO.from_entity(tenant),
            license=LicenseSummaryDTO.from_entity(license),
        )
