"""
CancelVoucherHandler.
"""
import logging

from core.domain.events import EventBus
from core.domain.exceptions import VoucherNotFoundError, VoucherUnavailableError
from core.infrastructure.events import event_bus as default_event_bus
from vouchers.application.commands.cancel_voucher import CancelVoucherCommand
from vouchers.application.dto.voucher_dto import VoucherDTO
from vouchers.domain.events import VoucherCancelled
from vouchers.ports.voucher_repository import VoucherRepository

logger = logging.getLogger(__name__)


class CancelVoucherHandler:
    """Handler for CancelVoucherCommand."""

    def __init__(self, voucher_repository: VoucherRepository, event_bus: EventBus = default_event_bus):
        """Initialize handler with repositories."""
        self.voucher_repository = voucher_repository
        self.event_bus = event_bus

    async def handle(self, command: CancelVoucherCommand) -> VoucherDTO:
        """
        Handle cancel voucher command.

        Raises:
            VoucherNotFoundError: If the voucher does not exist
            VoucherUnavailableError: If the voucher is not UNUSED
        """
        voucher = await self.voucher_repository.find_by_id(command.voucher_id)
        if not voucher:
            raise VoucherNotFoundError()
        if not voucher.is_redeemable or not await self.voucher_repository.cancel(voucher.id):
            current = await self.voucher_repository.find_by_id(voucher.id)
            raise VoucherUnavailableError(current.status.value)

        cancelled = await self.voucher_repository.find_by_id(voucher.id)
        logger.info("Voucher %s cancelled by %s", voucher.code, command.actor)
        await self.event_bus.publish(
            VoucherCancelled(voucher_id=voucher.id, code=voucher.code, actor=command.actor)
        )
        return VoucherDTO.from_entity(cancelled)
