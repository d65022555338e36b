"""
CreateVoucherBatchCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from vouchers.domain.voucher import LicenseTemplate

MAX_BATCH_QUANTITY = 500


@dataclass
class CreateVoucherBatchCommand:
    """Command to create ``quantity`` vouchers sharing one license template."""

    product_id: uuid.UUID
    quantity: int
    template: LicenseTemplate
    batch_name: Optional[str] = None
    actor: Optional[str] = None

    def __post_init__(self):
        """Validate batch size."""
        if not 1 <= self.quantity <= MAX_BATCH_QUANTITY:
            raise ValueError(f"quantity must be between 1 and {MAX_BATCH_QUANTITY}")
