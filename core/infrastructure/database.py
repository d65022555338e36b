"""
Database utilities and transaction management.
"""

import contextlib
from typing import AsyncGenerator

from asgiref.sync import sync_to_async
from django.db import transaction

from core.ports.unit_of_work import UnitOfWork


@contextlib.asynccontextmanager
async def async_transaction(using: str = None) -> AsyncGenerator[None, None]:
    """
    Async context manager for database transactions.

    ``transaction.atomic`` is entered and exited through thread-sensitive
    ``sync_to_async`` so it runs on the same thread (and connection) as the
    repositories' ORM calls made inside the block.

    Usage:
        async with async_transaction():
            # Database operations
            pass
    """
    atomic = transaction.atomic(using=using)
    await sync_to_async(atomic.__enter__)()
    try:
        yield
    except BaseException as exc:
        await sync_to_async(atomic.__exit__)(type(exc), exc, exc.__traceback__)
        raise
    else:
        await sync_to_async(atomic.__exit__)(None, None, None)


class DjangoUnitOfWork(UnitOfWork):
    """Unit of work backed by a Django database transaction."""

    def __init__(self, using: str = None):
        self.using = using

    def atomic(self):
        return async_transaction(using=self.using)
