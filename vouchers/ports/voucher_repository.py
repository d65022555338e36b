"""
Voucher repository port (interface).

This defines the contract for voucher persistence operations.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from vouchers.domain.voucher import Voucher, VoucherStatus


class VoucherRepository(ABC):
    """Abstract repository for Voucher entities."""

    @abstractmethod
    async def create(self, voucher: Voucher) -> Voucher:
        """
        Insert a new voucher.

        Args:
            voucher: Voucher entity

        Returns:
            Saved voucher entity

        Raises:
            DuplicateVoucherCodeError: If the code is already taken
        """
        pass

    @abstractmethod
    async def find_by_id(self, voucher_id: uuid.UUID) -> Optional[Voucher]:
        """
        Find a voucher by ID.

        Args:
            voucher_id: Voucher UUID

        Returns:
            Voucher entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Voucher]:
        """
        Find a voucher by its normalized code.

        Args:
            code: Upper-cased voucher code

        Returns:
            Voucher entity or None if not found
        """
        pass

    @abstractmethod
    async def mark_used(
        self,
        voucher_id: uuid.UUID,
        tenant_id: uuid.UUID,
        license_id: uuid.UUID,
        email: Optional[str],
        used_at: datetime,
    ) -> bool:
        """
        Mark a voucher USED if it is still UNUSED, in a single statement.

        Returns:
            True if this call redeemed the voucher
        """
        pass

    @abstractmethod
    async def cancel(self, voucher_id: uuid.UUID) -> bool:
        """
        Mark a voucher CANCELLED if it is still UNUSED, in a single statement.

        Returns:
            True if this call cancelled the voucher
        """
        pass

    @abstractmethod
    async def count_by_status(self, status: VoucherStatus) -> int:
        """
        Count vouchers with ``status``.

        Args:
            status: Voucher status

        Returns:
            Number of vouchers
        """
        pass
