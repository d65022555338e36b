"""
CreateVoucherBatchHandler.
"""
import logging
from typing import Callable

from catalog.ports.product_repository import ProductRepository
from core.config import ActivationConfig
from core.domain.events import EventBus
from core.domain.exceptions import DuplicateVoucherCodeError, InvalidProductError
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import vouchers_created_total
from vouchers.application.commands.create_voucher_batch import CreateVoucherBatchCommand
from vouchers.application.dto.voucher_dto import VoucherBatchDTO
from vouchers.domain.events import VoucherBatchCreated
from vouchers.domain.voucher import Voucher, generate_voucher_code
from vouchers.ports.voucher_repository import VoucherRepository

logger = logging.getLogger(__name__)

# Attempts per voucher before a code collision is treated as an error.
MAX_CODE_ATTEMPTS = 6


class CreateVoucherBatchHandler:
    """Handler for CreateVoucherBatchCommand."""

    def __init__(
        self,
        voucher_repository: VoucherRepository,
        product_repository: ProductRepository,
        config: ActivationConfig,
        event_bus: EventBus = default_event_bus,
        code_generator: Callable[[str], str] = generate_voucher_code,
    ):
        """Initialize handler with repositories."""
        self.voucher_repository = voucher_repository
        self.product_repository = product_repository
        self.prefix = config.voucher_prefix
        self.event_bus = event_bus
        self.code_generator = code_generator

    async def _create_one(self, command: CreateVoucherBatchCommand) -> Voucher:
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            voucher = Voucher.create(
                code=self.code_generator(self.prefix),
                product_id=command.product_id,
                template=command.template,
                batch_name=command.batch_name,
                created_by=command.actor,
            )
            try:
                return await self.voucher_repository.create(voucher)
            except DuplicateVoucherCodeError:
                logger.debug("Voucher code collision on attempt %d", attempt)
        raise DuplicateVoucherCodeError(
            f"Could not generate a unique voucher code after {MAX_CODE_ATTEMPTS} attempts"
        )

    async def handle(self, command: CreateVoucherBatchCommand) -> VoucherBatchDTO:
        """
        Handle create voucher batch command.

        Raises:
            InvalidProductError: If the product does not exist
            DuplicateVoucherCodeError: If a unique code could not be generated
        """
        product = await self.product_repository.find_by_id(command.product_id)
        if not product:
            raise InvalidProductError()

        created = []
        for _ in range(command.quantity):
            created.append(await self._create_one(command))

        vouchers_created_total.inc(len(created))
        logger.info(
            "Created %d voucher(s) for product %s in batch %r",
            len(created),
            product.id,
            command.batch_name,
        )
        await self.event_bus.publish(
            VoucherBatchCreated(
                product_id=product.id,
                batch_name=command.batch_name,
                count=len(created),
                actor=command.actor,
            )
        )
        return VoucherBatchDTO.build(product, created)
