"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
import uuid

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key_and_product(
        self, key: str, product_id: uuid.UUID
    ) -> Optional[License]:
        """
        Find a license by its key, scoped to a product.

        Args:
            key: License key
            product_id: Product UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        license_id: uuid.UUID,
        new_status: LicenseStatus,
        expected_status: Optional[LicenseStatus] = None,
    ) -> bool:
        """
        Set the status of a license, optionally only if it currently has
        ``expected_status``. The check and the write are a single atomic
        statement.

        Args:
            license_id: License UUID
            new_status: Status to set
            expected_status: Required current status, or None for unconditional

        Returns:
            True if a row was updated
        """
        pass

    @abstractmethod
    async def find_active_expired(self, now: datetime, limit: int = 500) -> List[License]:
        """
        Find ACTIVE licenses whose expiry is before ``now``.

        Args:
            now: Reference time
            limit: Maximum number of licenses to return

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def count_by_status(self, status: LicenseStatus) -> int:
        """
        Count licenses with ``status``.

        Args:
            status: License status

        Returns:
            Number of licenses
        """
        pass
