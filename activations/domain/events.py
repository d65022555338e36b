"""
Activation domain events.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class DeviceActivated(DomainEvent):
    """Event raised when a device is activated (or re-activated) online."""

    def __init__(
        self,
        license_id: uuid.UUID,
        activation_id: uuid.UUID,
        device_id_hash: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DeviceActivated event.

        Args:
            license_id: License UUID
            activation_id: DeviceActivation UUID
            device_id_hash: Hashed device fingerprint
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.activation_id = activation_id
        self.device_id_hash = device_id_hash


class DeviceRevalidated(DomainEvent):
    """Event raised when an active device refreshes its token."""

    def __init__(
        self,
        license_id: uuid.UUID,
        device_id_hash: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.device_id_hash = device_id_hash


class DeviceRevoked(DomainEvent):
    """Event raised when an operator revokes a device."""

    def __init__(
        self,
        license_id: uuid.UUID,
        device_id_hash: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.device_id_hash = device_id_hash
        self.actor = actor
