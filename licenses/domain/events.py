"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseStatusChanged(DomainEvent):
    """Base event for status changes. ``actor`` is the operator subject, if any."""

    def __init__(
        self,
        license_id: uuid.UUID,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.actor = actor


class LicenseSuspended(LicenseStatusChanged):
    """Event raised when a license is suspended."""


class LicenseResumed(LicenseStatusChanged):
    """Event raised when a suspended license is resumed."""


class LicenseRevoked(LicenseStatusChanged):
    """Event raised when a license is revoked."""


class LicenseExpired(LicenseStatusChanged):
    """Event raised when the system detects a license past its expiry."""


class LicenseRenewed(DomainEvent):
    """Event raised when a license term is extended."""

    def __init__(
        self,
        license_id: uuid.UUID,
        new_expiration: datetime,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseRenewed event.

        Args:
            license_id: License UUID
            new_expiration: Expiry after renewal
            actor: Operator subject
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.new_expiration = new_expiration
        self.actor = actor


class LicenseIssued(DomainEvent):
    """Event raised when a license is created."""

    def __init__(
        self,
        license_id: uuid.UUID,
        tenant_id: uuid.UUID,
        product_id: uuid.UUID,
        source: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.tenant_id = tenant_id
        self.product_id = product_id
        self.source = source
