"""
Event handlers for domain events.

Audit persistence is out of scope for this service; every domain event
becomes one structured ``audit`` log line instead.
"""

import logging

from activations.domain.events import DeviceActivated, DeviceRevalidated, DeviceRevoked
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import (
    LicenseExpired,
    LicenseIssued,
    LicenseRenewed,
    LicenseResumed,
    LicenseRevoked,
    LicenseSuspended,
)
from offline.domain.events import OfflineLicenseIssued
from vouchers.domain.events import VoucherBatchCreated, VoucherCancelled, VoucherRedeemed

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

AUDITED_EVENTS = (
    LicenseIssued,
    LicenseSuspended,
    LicenseResumed,
    LicenseRevoked,
    LicenseExpired,
    LicenseRenewed,
    DeviceActivated,
    DeviceRevalidated,
    DeviceRevoked,
    OfflineLicenseIssued,
    VoucherRedeemed,
    VoucherBatchCreated,
    VoucherCancelled,
)


class AuditLogEventHandler(EventHandler):
    """Event handler for audit logging."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"audit": event.to_dict()},
        )


audit_handler = AuditLogEventHandler()


def register_event_handlers(bus=None) -> None:
    """Register all event handlers with the event bus. Safe to call twice."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered for %d event type(s)", len(AUDITED_EVENTS))
