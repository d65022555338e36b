"""
ActivationStatsHandler.

Handles the operator stats query.
"""
import asyncio

from activations.application.dto.activation_dto import ActivationStatsDTO
from activations.ports.activation_repository import DeviceActivationRepository
from core.domain.value_objects import LicenseStatus
from licenses.ports.license_repository import LicenseRepository
from vouchers.domain.voucher import VoucherStatus
from vouchers.ports.voucher_repository import VoucherRepository


class ActivationStatsHandler:
    """Handler for the stats query. Every count is an independent read."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: DeviceActivationRepository,
        voucher_repository: VoucherRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.voucher_repository = voucher_repository

    async def handle(self) -> ActivationStatsDTO:
        (
            active,
            suspended,
            expired,
            revoked,
            devices,
            unused_vouchers,
            used_vouchers,
        ) = await asyncio.gather(
            self.license_repository.count_by_status(LicenseStatus.ACTIVE),
            self.license_repository.count_by_status(LicenseStatus.SUSPENDED),
            self.license_repository.count_by_status(LicenseStatus.EXPIRED),
            self.license_repository.count_by_status(LicenseStatus.REVOKED),
            self.activation_repository.count_active(),
            self.voucher_repository.count_by_status(VoucherStatus.UNUSED),
            self.voucher_repository.count_by_status(VoucherStatus.USED),
        )
        return ActivationStatsDTO(
            active_licenses=active,
            suspended_licenses=suspended,
            expired_licenses=expired,
            revoked_licenses=revoked,
            active_devices=devices,
            unused_vouchers=unused_vouchers,
            used_vouchers=used_vouchers,
        )
