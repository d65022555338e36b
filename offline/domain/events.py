"""
Offline domain events.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class OfflineLicenseIssued(DomainEvent):
    """Event raised when a signed offline license file is issued."""

    def __init__(
        self,
        license_id: uuid.UUID,
        file_id: uuid.UUID,
        nonce: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize OfflineLicenseIssued event.

        Args:
            license_id: License UUID
            file_id: OfflineLicenseFile UUID
            nonce: Request nonce the file was issued for
            actor: Operator subject
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.file_id = file_id
        self.nonce = nonce
        self.actor = actor
