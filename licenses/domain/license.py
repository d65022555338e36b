"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Mapping, Optional

from core.domain.clock import utcnow
from core.domain.exceptions import InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus, LicenseType, PlanType

MAX_RENEWAL_DAYS = 3650

# Status changes an operator or the system may request. Renewal of an
# EXPIRED license back to ACTIVE goes through ``License.renew`` instead.
ALLOWED_TRANSITIONS: Mapping[LicenseStatus, FrozenSet[LicenseStatus]] = {
    LicenseStatus.ACTIVE: frozenset(
        {LicenseStatus.SUSPENDED, LicenseStatus.EXPIRED, LicenseStatus.REVOKED}
    ),
    LicenseStatus.SUSPENDED: frozenset({LicenseStatus.ACTIVE, LicenseStatus.REVOKED}),
    LicenseStatus.EXPIRED: frozenset({LicenseStatus.REVOKED}),
    LicenseStatus.REVOKED: frozenset(),
}


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents the entitlement a client application checks against.
    This is an immutable value object; state changes return new instances.
    """

    id: uuid.UUID
    key: str
    tenant_id: uuid.UUID
    product_id: uuid.UUID
    license_type: LicenseType
    plan_type: PlanType
    status: LicenseStatus
    starts_at: datetime
    expires_at: Optional[datetime]
    max_devices: int
    max_activations: int
    offline_allowed: bool
    revalidate_days: Optional[int]
    allowed_version_min: Optional[str]
    allowed_version_max: Optional[str]
    modules: Dict[str, bool] = field(default_factory=dict)
    features: Dict[str, Any] = field(default_factory=dict)
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.key or not self.key.strip():
            raise ValueError("License key is required")
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not self.tenant_id:
            raise ValueError("Tenant ID is required")
        if self.max_devices < 1:
            raise ValueError("Max devices must be at least 1")
        if self.max_activations < 1:
            raise ValueError("Max activations must be at least 1")
        if self.revalidate_days is not None and self.revalidate_days < 1:
            raise ValueError("Revalidate days must be at least 1")

    @classmethod
    def create(
        cls,
        key: str,
        tenant_id: uuid.UUID,
        product_id: uuid.UUID,
        license_type: LicenseType = LicenseType.FULL,
        plan_type: PlanType = PlanType.PERPETUAL,
        expires_at: Optional[datetime] = None,
        max_devices: int = 1,
        max_activations: int = 1,
        offline_allowed: bool = False,
        revalidate_days: Optional[int] = None,
        allowed_version_min: Optional[str] = None,
        allowed_version_max: Optional[str] = None,
        modules: Optional[Dict[str, bool]] = None,
        features: Optional[Dict[str, Any]] = None,
        notes: str = "",
        starts_at: Optional[datetime] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new ACTIVE License entity.

        Args:
            key: Human-readable license key
            tenant_id: Owning tenant UUID
            product_id: Product UUID
            expires_at: Optional expiry (None means perpetual)
            max_devices: Concurrently active device cap
            max_activations: Lifetime device cap
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        now = utcnow()
        return cls(
            id=license_id or uuid.uuid4(),
            key=key,
            tenant_id=tenant_id,
            product_id=product_id,
            license_type=license_type,
            plan_type=plan_type,
            status=LicenseStatus.ACTIVE,
            starts_at=starts_at or now,
            expires_at=expires_at,
            max_devices=max_devices,
            max_activations=max_activations,
            offline_allowed=offline_allowed,
            revalidate_days=revalidate_days,
            allowed_version_min=allowed_version_min,
            allowed_version_max=allowed_version_max,
            modules=dict(modules or {}),
            features=dict(features or {}),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """True when the license has an expiry and it lies in the past."""
        if self.expires_at is None:
            return False
        return self.expires_at < (current_time or utcnow())

    def is_usable(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if license currently authorizes activation.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if license is ACTIVE and not past its expiry
        """
        return self.status is LicenseStatus.ACTIVE and not self.is_expired(current_time)

    def can_transition_to(self, new_status: LicenseStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: LicenseStatus) -> "License":
        """
        Return a copy of the license in ``new_status``.

        Raises:
            InvalidLicenseStatusError: If the transition is not allowed
        """
        if not self.can_transition_to(new_status):
            raise InvalidLicenseStatusError(
                f"Cannot change license status from {self.status} to {new_status}"
            )
        return replace(self, status=new_status, updated_at=utcnow())

    def suspend(self) -> "License":
        return self.transition_to(LicenseStatus.SUSPENDED)

    def resume(self) -> "License":
        if self.status is not LicenseStatus.SUSPENDED:
            raise InvalidLicenseStatusError("Can only resume a suspended license")
        return self.transition_to(LicenseStatus.ACTIVE)

    def revoke(self) -> "License":
        return self.transition_to(LicenseStatus.REVOKED)

    def renew(self, add_days: int, current_time: Optional[datetime] = None) -> "License":
        """
        Extend the license term by ``add_days``.

        The new term starts at the later of now and the current expiry, so
        renewing an already expired license never loses time. An EXPIRED
        license becomes ACTIVE again; other statuses are kept.

        Args:
            add_days: Days to add (1..3650)
            current_time: Current time (defaults to now)

        Returns:
            New License instance with the extended expiry

        Raises:
            InvalidLicenseStatusError: If the license is REVOKED
            ValueError: If add_days is out of range
        """
        if not 1 <= add_days <= MAX_RENEWAL_DAYS:
            raise ValueError(f"add_days must be between 1 and {MAX_RENEWAL_DAYS}")
        if self.status is LicenseStatus.REVOKED:
            raise InvalidLicenseStatusError("Cannot renew a revoked license")

        now = current_time or utcnow()
        base = max(now, self.expires_at) if self.expires_at else now
        new_status = LicenseStatus.ACTIVE if self.status is LicenseStatus.EXPIRED else self.status
        return replace(
            self,
            status=new_status,
            expires_at=base + timedelta(days=add_days),
            updated_at=now,
        )
