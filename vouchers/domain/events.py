"""
Voucher domain events.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class VoucherRedeemed(DomainEvent):
    """Event raised when a voucher is redeemed into a license."""

    def __init__(
        self,
        voucher_id: uuid.UUID,
        license_id: uuid.UUID,
        tenant_id: uuid.UUID,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize VoucherRedeemed event.

        Args:
            voucher_id: Voucher UUID
            license_id: UUID of the license created
            tenant_id: UUID of the redeeming tenant
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=voucher_id, occurred_at=occurred_at)
        self.voucher_id = voucher_id
        self.license_id = license_id
        self.tenant_id = tenant_id


class VoucherBatchCreated(DomainEvent):
    """Event raised when an operator creates a batch of vouchers."""

    def __init__(
        self,
        product_id: uuid.UUID,
        batch_name: Optional[str],
        count: int,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=product_id, occurred_at=occurred_at)
        self.product_id = product_id
        self.batch_name = batch_name
        self.count = count
        self.actor = actor


class VoucherCancelled(DomainEvent):
    """Event raised when an UNUSED voucher is cancelled."""

    def __init__(
        self,
        voucher_id: uuid.UUID,
        code: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=voucher_id, occurred_at=occurred_at)
        self.voucher_id = voucher_id
        self.code = code
        self.actor = actor
