"""
Device activation repository port (interface).

This defines the contract for device activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from activations.domain.activation import DeviceActivation


class DeviceActivationRepository(ABC):
    """
    Abstract repository for DeviceActivation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def upsert(self, activation: DeviceActivation) -> DeviceActivation:
        """
        Create the row for (license, device) or update the existing one.

        The (license_id, device_id_hash) pair is unique; when a row already
        exists its id and ``activated_at`` are kept.

        Args:
            activation: Activation entity to store

        Returns:
            Stored activation entity
        """
        pass

    @abstractmethod
    async def touch(self, activation: DeviceActivation) -> bool:
        """
        Record a sighting of a device that is still active.

        Only ``last_seen_at``, ``app_version``, ``ip`` and ``user_agent``
        are written, and only while the stored row is not revoked.

        Args:
            activation: Activation entity carrying the new sighting

        Returns:
            False if the row is gone or was revoked
        """
        pass

    @abstractmethod
    async def find_by_license_and_device(
        self, license_id: uuid.UUID, device_id_hash: str
    ) -> Optional[DeviceActivation]:
        """
        Find the activation of a device on a license.

        Args:
            license_id: License UUID
            device_id_hash: SHA-256 of the device fingerprint

        Returns:
            DeviceActivation entity or None if not found
        """
        pass

    @abstractmethod
    async def count_active_by_license(self, license_id: uuid.UUID) -> int:
        """
        Count non-revoked activations of a license.

        Args:
            license_id: License UUID

        Returns:
            Number of active devices
        """
        pass

    @abstractmethod
    async def count_by_license(self, license_id: uuid.UUID) -> int:
        """
        Count every activation row ever created for a license.

        Args:
            license_id: License UUID

        Returns:
            Number of devices, revoked included
        """
        pass

    @abstractmethod
    async def find_active_by_license(self, license_id: uuid.UUID) -> List[DeviceActivation]:
        """
        Find active activations of a license, oldest first.

        Args:
            license_id: License UUID

        Returns:
            List of active DeviceActivation entities
        """
        pass

    @abstractmethod
    async def count_active(self) -> int:
        """Count active activations across all licenses."""
        pass
