"""
Unit of work port.

Groups repository writes into one all-or-nothing transaction.
"""
from abc import ABC, abstractmethod
from typing import AsyncContextManager


class UnitOfWork(ABC):
    """Abstract transaction boundary."""

    @abstractmethod
    def atomic(self) -> AsyncContextManager[None]:
        """
        Open a transaction.

        Usage:
            async with unit_of_work.atomic():
                ...

        Every write inside the block commits together, or none does when
        the block raises.
        """
        pass
