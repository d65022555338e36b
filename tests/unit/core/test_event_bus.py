"""
Unit tests for the in-memory event bus and audit handler.
"""
import logging
import uuid

import pytest

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import (
    AUDITED_EVENTS,
    AuditLogEventHandler,
    audit_handler,
    register_event_handlers,
)
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.events import LicenseSuspended


class CollectingHandler(EventHandler):
    def __init__(self):
        self.seen = []

    async def handle(self, event):
        self.seen.append(event)


class ExplodingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("boom")


@pytest.mark.asyncio
class TestInMemoryEventBus:
    async def test_delivers_to_subscribers_of_type(self):
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(LicenseSuspended, handler)

        event = LicenseSuspended(license_id=uuid.uuid4(), actor="ops")
        await bus.publish(event)

        assert handler.seen == [event]

    async def test_handler_failure_does_not_reach_publisher(self):
        bus = InMemoryEventBus()
        survivor = CollectingHandler()
        bus.subscribe(LicenseSuspended, ExplodingHandler())
        bus.subscribe(LicenseSuspended, survivor)

        await bus.publish(LicenseSuspended(license_id=uuid.uuid4(), actor="ops"))

        assert len(survivor.seen) == 1

    async def test_duplicate_subscription_ignored(self):
        bus = InMemoryEventBus()
        handler = CollectingHandler()
        bus.subscribe(LicenseSuspended, handler)
        bus.subscribe(LicenseSuspended, handler)

        await bus.publish(LicenseSuspended(license_id=uuid.uuid4(), actor="ops"))

        assert len(handler.seen) == 1


@pytest.mark.asyncio
class TestAuditLogEventHandler:
    async def test_writes_structured_audit_line(self, caplog):
        event = LicenseSuspended(license_id=uuid.uuid4(), actor="ops")
        with caplog.at_level(logging.INFO, logger="audit"):
            await AuditLogEventHandler().handle(event)

        record = next(r for r in caplog.records if r.name == "audit")
        assert record.audit["event_type"] == "LicenseSuspended"
        assert record.audit["aggregate_id"] == str(event.license_id)

    async def test_register_is_idempotent(self):
        bus = InMemoryEventBus()
        register_event_handlers(bus)
        register_event_handlers(bus)

        for event_type in AUDITED_EVENTS:
            assert bus._handlers[event_type] == [audit_handler]  # pylint: disable=protected-access
