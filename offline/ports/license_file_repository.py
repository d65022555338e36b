"""
OfflineLicenseFile repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from offline.domain.license_file import OfflineLicenseFile


class OfflineLicenseFileRepository(ABC):
    """Abstract repository for issued offline license files."""

    @abstractmethod
    async def save(self, license_file: OfflineLicenseFile) -> OfflineLicenseFile:
        """
        Persist a new license file.

        Args:
            license_file: OfflineLicenseFile entity

        Returns:
            Saved entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, file_id: uuid.UUID) -> Optional[OfflineLicenseFile]:
        """
        Find a license file by ID.

        Args:
            file_id: OfflineLicenseFile UUID

        Returns:
            OfflineLicenseFile entity or None if not found
        """
        pass
