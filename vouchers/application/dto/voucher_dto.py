"""
Voucher DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from catalog.domain.product import Product
from catalog.domain.tenant import Tenant
from licenses.domain.license import License
from offline.application.dto.offline_dto import ProductSummaryDTO
from vouchers.domain.voucher import Voucher


@dataclass
class TenantSummaryDTO:
    """DTO for the redeeming tenant."""

    id: uuid.UUID
    trade_name: str
    contact_email: Optional[str]

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantSummaryDTO":
        return cls(
            id=tenant.id,
            trade_name=tenant.trade_name,
            contact_email=str(tenant.contact_email) if tenant.contact_email else None,
        )


@dataclass
class LicenseSummaryDTO:
    """DTO for the license a voucher produced."""

    id: uuid.UUID
    key: str
    expires_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseSummaryDTO":
        return cls(id=license.id, key=license.key, expires_at=license.expires_at)


@dataclass
class RedeemVoucherResponseDTO:
    """DTO for voucher redemption response."""

    ok: bool
    product: ProductSummaryDTO
    tenant: TenantSummaryDTO
    license: LicenseSummaryDTO


@dataclass
class VoucherCodeDTO:
    """DTO for one created voucher."""

    id: uuid.UUID
    code: str


@dataclass
class VoucherBatchDTO:
    """DTO for batch creation response."""

    product: ProductSummaryDTO
    count: int
    vouchers: List[VoucherCodeDTO]

    @classmethod
    def build(cls, product: Product, vouchers: List[Voucher]) -> "VoucherBatchDTO":
        return cls(
            product=ProductSummaryDTO.from_entity(product),
            count=len(vouchers),
            vouchers=[VoucherCodeDTO(id=v.id, code=v.code) for v in vouchers],
        )


@dataclass
class VoucherDTO:
    """DTO for voucher state."""

    id: uuid.UUID
    code: str
    status: str
    product_id: uuid.UUID
    batch_name: Optional[str]

    @classmethod
    def from_entity(cls, voucher: Voucher) -> "VoucherDTO":
        return cls(
            id=voucher.id,
            code=voucher.code,
            status=voucher.status.value,
            product_id=voucher.product_id,
            batch_name=voucher.batch_name,
        )
