"""
CancelVoucherCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class CancelVoucherCommand:
    """Command to cancel an UNUSED voucher."""

    voucher_id: uuid.UUID
    actor: Optional[str] = None
