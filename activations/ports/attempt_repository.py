"""
Activation attempt repository port (interface).
"""
from abc import ABC, abstractmethod

from activations.domain.attempt import ActivationAttempt


class ActivationAttemptRepository(ABC):
    """Append-only store for activation attempts."""

    @abstractmethod
    async def add(self, attempt: ActivationAttempt) -> None:
        """
        Append an attempt record.

        Args:
            attempt: ActivationAttempt entity
        """
        pass
