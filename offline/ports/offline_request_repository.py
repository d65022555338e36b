"""
OfflineRequest repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional

from offline.domain.request_file import OfflineRequest


class OfflineRequestRepository(ABC):
    """Abstract repository for OfflineRequest entities, keyed by nonce."""

    @abstractmethod
    async def find_by_nonce(self, nonce: str) -> Optional[OfflineRequest]:
        """
        Find a request by nonce.

        Args:
            nonce: Client supplied nonce

        Returns:
            OfflineRequest entity or None if not found
        """
        pass

    @abstractmethod
    async def record_received(self, request: OfflineRequest) -> OfflineRequest:
        """
        Store ``request`` as RECEIVED unless its nonce is already known.

        Args:
            request: OfflineRequest entity

        Returns:
            The stored request, which may be a previously recorded one
        """
        pass

    @abstractmethod
    async def claim(self, request: OfflineRequest) -> Optional[OfflineRequest]:
        """
        Move the nonce of ``request`` to USED, creating it if unknown.

        The status check and the write are atomic, so exactly one caller
        wins a given nonce.

        Args:
            request: OfflineRequest carrying the license and tenant it is used for

        Returns:
            The claimed request, or None if the nonce was already USED
        """
        pass

    @abstractmethod
    async def mark_rejected(self, request: OfflineRequest) -> bool:
        """
        Move the nonce of ``request`` to REJECTED unless it is already USED.

        Args:
            request: OfflineRequest entity

        Returns:
            True if the nonce is now REJECTED
        """
        pass
