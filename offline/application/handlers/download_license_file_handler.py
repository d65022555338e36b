"""
DownloadLicenseFileHandler.
"""
import uuid

from core.domain.exceptions import OfflineLicenseFileNotFoundError
from offline.domain.license_file import OfflineLicenseFile
from offline.ports.license_file_repository import OfflineLicenseFileRepository


class DownloadLicenseFileHandler:
    """Handler for downloading a previously issued license file."""

    def __init__(self, license_file_repository: OfflineLicenseFileRepository):
        """Initialize handler with repositories."""
        self.license_file_repository = license_file_repository

    async def handle(self, file_id: uuid.UUID) -> OfflineLicenseFile:
        """
        Raises:
            OfflineLicenseFileNotFoundError: If no file has ``file_id``
        """
        license_file = await self.license_file_repository.find_by_id(file_id)
        if not license_file:
            raise OfflineLicenseFileNotFoundError()
        return license_file
