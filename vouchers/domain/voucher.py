"""
Voucher domain entity.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from core.domain.clock import utcnow
from core.domain.value_objects import LicenseType, PlanType
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key, random_block


class VoucherStatus(Enum):
    """Voucher status. Only UNUSED vouchers can change."""

    UNUSED = "UNUSED"
    USED = "USED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    def __str__(self) -> str:
        return self.value


def normalize_voucher_code(code: str) -> str:
    return code.strip().upper()


def generate_voucher_code(prefix: str = "FT") -> str:
    """
    Generate a voucher code in format: PREFIX-XXXX-XXXX-XXXX.

    Args:
        prefix: Code prefix, upper-cased

    Returns:
        Generated code string
    """
    return f"{prefix.upper()}-{random_block()}-{random_block()}-{random_block()}"


@dataclass(frozen=True)
class LicenseTemplate:
    """Shape of the license a voucher produces."""

    license_type: LicenseType = LicenseType.FULL
    plan_type: PlanType = PlanType.PERPETUAL
    license_duration_days: Optional[int] = None
    max_devices: int = 1
    max_activations: int = 1
    offline_allowed: bool = True
    revalidate_days: Optional[int] = None
    allowed_version_min: Optional[str] = None
    allowed_version_max: Optional[str] = None
    modules: Dict[str, bool] = field(default_factory=dict)
    features: Dict[str, Any] = field(default_factory=dict)
    notes: str = ""

    def __post_init__(self):
        """Validate template limits."""
        if self.max_devices < 1:
            raise ValueError("max_devices must be at least 1")
        if self.max_activations < 1:
            raise ValueError("max_activations must be at least 1")
        if self.license_duration_days is not None and self.license_duration_days < 1:
            raise ValueError("license_duration_days must be positive")


@dataclass(frozen=True)
class Voucher:
    """
    Voucher domain entity.

    A voucher moves from UNUSED to USED exactly once, producing exactly one
    license, or from UNUSED to CANCELLED.
    """

    id: uuid.UUID
    code: str
    product_id: uuid.UUID
    template: LicenseTemplate
    status: VoucherStatus
    batch_name: Optional[str]
    created_at: datetime
    tenant_id: Optional[uuid.UUID] = None
    license_id: Optional[uuid.UUID] = None
    used_at: Optional[datetime] = None
    used_by_email: Optional[str] = None
    created_by: Optional[str] = None

    @classmethod
    def create(
        cls,
        code: str,
        product_id: uuid.UUID,
        template: LicenseTemplate,
        batch_name: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> "Voucher":
        return cls(
            id=uuid.uuid4(),
            code=normalize_voucher_code(code),
            product_id=product_id,
            template=template,
            status=VoucherStatus.UNUSED,
            batch_name=batch_name,
            created_at=utcnow(),
            created_by=created_by,
        )

    @property
    def is_redeemable(self) -> bool:
        return self.status is VoucherStatus.UNUSED

    def build_license(self, tenant_id: uuid.UUID, product_slug: str, now: datetime) -> License:
        """Build the license this voucher redeems into."""
        template = self.template
        expires_at = (
            now + timedelta(days=template.license_duration_days)
            if template.license_duration_days
            else None
        )
        return License.create(
            key=generate_license_key(product_slug, template.license_type.value),
            tenant_id=tenant_id,
            product_id=self.product_id,
            license_type=template.license_type,
            plan_type=template.plan_type,
            expires_at=expires_at,
            max_devices=template.max_devices,
            max_activations=template.max_activations,
            offline_allowed=template.offline_allowed,
            revalidate_days=template.revalidate_days,
            allowed_version_min=template.allowed_version_min,
            allowed_version_max=template.allowed_version_max,
            modules=template.modules,
            features=template.features,
            notes=template.notes,
            starts_at=now,
        )

    def redeemed(
        self,
        tenant_id: uuid.UUID,
        license_id: uuid.UUID,
        email: Optional[str],
        now: datetime,
    ) -> "Voucher":
        return replace(
            self,
            status=VoucherStatus.USED,
            tenant_id=tenant_id,
            license_id=license_id,
            used_by_email=email,
            used_at=now,
        )
