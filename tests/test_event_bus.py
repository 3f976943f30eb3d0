"""Tests for the in-process event bus and the plant activity audit handlers."""

import logging

from plant_health.modules.plant_diagnosis.domain.events.handlers import (
    AUDITED_EVENT_TYPES,
    PlantActivityAuditHandler,
    audit_handlers,
)
from plant_health.modules.plant_diagnosis.domain.events.plant_events import (
    PlantCreatedEvent,
    PlantDeletedEvent,
    TreatmentCompletionChangedEvent,
)
from plant_health.shared.core.event_bus import EventBus, EventHandler


class ExplodingHandler(EventHandler):
    @property
    def event_type(self) -> str:
        return PlantDeletedEvent.event_type

    async def handle(self, event):
        raise RuntimeError("listener bug")


def _bus_with_audit():
    bus = EventBus()
    handlers = audit_handlers()
    for handler in handlers:
        bus.subscribe(handler)
    return bus, {handler.event_type: handler for handler in handlers}


def test_one_audit_handler_per_event_type():
    handlers = audit_handlers()

    assert [h.event_type for h in handlers] == list(AUDITED_EVENT_TYPES)
    assert set(AUDITED_EVENT_TYPES) == {"plant.created", "plant.deleted", "treatment.completion_changed"}


async def test_published_events_reach_their_handler():
    bus, handlers = _bus_with_audit()

    await bus.publish(PlantCreatedEvent(aggregate_id="p1", user_id="u1", plant_name="Fern", treatment_count=3))
    await bus.publish(
        TreatmentCompletionChangedEvent(aggregate_id="t1", user_id="u1", plant_id="p1", step=1, completed=True)
    )

    assert handlers["plant.created"].handled_count == 1
    assert handlers["treatment.completion_changed"].handled_count == 1
    assert handlers["plant.deleted"].handled_count == 0
    assert bus.get_stats()["published"] == 2
    assert bus.get_stats()["processed"] == 2


async def test_audit_handler_logs_business_event(caplog):
    handler = PlantActivityAuditHandler("plant.deleted")

    with caplog.at_level(logging.INFO, logger="plant_health"):
        await handler.handle(PlantDeletedEvent(aggregate_id="p9", user_id="u1"))

    record = next(r for r in caplog.records if "p9" in r.getMessage())
    assert record.extra_fields["business_event_type"] == "plant.deleted"
    assert record.extra_fields["entity_id"] == "p9"
    assert record.extra_fields["user_id"] == "u1"


async def test_failing_handler_does_not_stop_others():
    bus, handlers = _bus_with_audit()
    bus.subscribe(ExplodingHandler())

    await bus.publish(PlantDeletedEvent(aggregate_id="p1", user_id="u1"))

    assert handlers["plant.deleted"].handled_count == 1
    assert bus.get_stats()["failed"] == 1


async def test_unsubscribe():
    bus, handlers = _bus_with_audit()
    bus.unsubscribe(handlers["plant.deleted"])

    await bus.publish(PlantDeletedEvent(aggregate_id="p1"))

    assert handlers["plant.deleted"].handled_count == 0
    assert "plant.deleted" not in bus.get_stats()["event_types"]


def test_event_serialization():
    event = PlantCreatedEvent(aggregate_id="p1", user_id="u1", plant_name="Fern", used_fallback=True)

    data = event.to_dict()

    assert data["event_type"] == "plant.created"
    assert data["aggregate_type"] == "plant"
    assert data["used_fallback"] is True
    assert isinstance(data["timestamp"], str)
