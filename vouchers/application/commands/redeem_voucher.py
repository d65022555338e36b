"""
RedeemVoucherCommand.

Command to redeem a voucher code into a license.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RedeemVoucherCommand:
    """Command to redeem ``code`` for the tenant named ``trade_name``."""

    code: str
    trade_name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
