"""
ValidateRequestHandler.

Handles validation of offline request files. Validation is public so
client tooling can check a file before sending it to an operator.
"""
import logging

from catalog.ports.product_repository import ProductRepository
from core.domain.exceptions import NonceAlreadyUsedError
from offline.application.commands.validate_request import ValidateRequestCommand
from offline.application.dto.offline_dto import ProductSummaryDTO, RequestValidationDTO
from offline.domain.request_file import OfflineRequest, RequestFile
from offline.domain.services import RequestFileVerifier
from offline.ports.offline_request_repository import OfflineRequestRepository

logger = logging.getLogger(__name__)


class ValidateRequestHandler:
    """Handler for ValidateRequestCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        offline_request_repository: OfflineRequestRepository,
    ):
        """Initialize handler with repositories."""
        self.verifier = RequestFileVerifier(product_repository)
        self.offline_request_repository = offline_request_repository

    async def handle(self, command: ValidateRequestCommand) -> RequestValidationDTO:
        """
        Handle validate request command.

        Args:
            command: ValidateRequestCommand

        Returns:
            RequestValidationDTO with the targeted product

        Raises:
            InvalidRequestFileError: If the payload is malformed or the checksum does not match
            InvalidProductError: If the product does not exist
            InvalidSignatureError: If the signature does not verify
            NonceAlreadyUsedError: If a license file was already issued for the nonce
        """
        request_file = RequestFile.from_dict(command.to_request_file())
        product = await self.verifier.verify(request_file)

        existing = await self.offline_request_repository.find_by_nonce(request_file.payload.nonce)
        if existing and existing.is_used:
            raise NonceAlreadyUsedError()
        if existing is None:
            await self.offline_request_repository.record_received(OfflineRequest.create(request_file))
            logger.info(
                "Offline request %s received for product %s",
                request_file.payload.nonce,
                product.id,
            )

        return RequestValidationDTO(ok=True, product=ProductSummaryDTO.from_entity(product))
