"""
Tenant repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional
import uuid

from catalog.domain.tenant import Tenant


class TenantRepository(ABC):
    """Abstract repository for Tenant entities."""

    @abstractmethod
    async def save(self, tenant: Tenant) -> Tenant:
        """
        Save a tenant entity.

        Args:
            tenant: Tenant entity to save

        Returns:
            Saved tenant entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[Tenant]:
        """Find a tenant by ID."""
        pass

    @abstractmethod
    async def find_by_contact_email(self, email: str) -> Optional[Tenant]:
        """
        Find the oldest tenant whose contact email matches ``email``,
        ignoring case.

        Args:
            email: Contact email

        Returns:
            Tenant entity or None if not found
        """
        pass
