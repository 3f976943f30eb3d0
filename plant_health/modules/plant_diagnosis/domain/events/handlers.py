# 📄 File: plant_health/modules/plant_diagnosis/domain/events/handlers.py
# 🧭 Purpose (Layman Explanation):
# Writes a line in the activity log whenever a plant is saved or deleted or a treatment step
# is ticked, so there is a clear record of what happened.
# 🧪 Purpose (Technical Summary):
# EventHandler implementation that records plant diagnosis domain events as structured
# business events. One instance is subscribed per event type at application startup.
# 🔗 Dependencies:
# plant_health.shared.core.event_bus, plant_health.shared.utils.logging, plant_events
# 🔄 Connected Modules / Calls From:
# plant_health.main (subscription), EventBus.publish

from typing import Tuple

from plant_health.shared.core.event_bus import DomainEvent, EventHandler
from plant_health.shared.utils.logging import get_logger

from .plant_events import PlantCreatedEvent, PlantDeletedEvent, TreatmentCompletionChangedEvent

logger = get_logger(__name__)

AUDITED_EVENT_TYPES: Tuple[str, ...] = (
    PlantCreatedEvent.event_type,
    PlantDeletedEvent.event_type,
    TreatmentCompletionChangedEvent.event_type,
)


class PlantActivityAuditHandler(EventHandler):
    """
    Logs plant activity events as business events.

    Args:
        event_type: The event type this instance is subscribed to
    """

    def __init__(self, event_type: str):
        self._event_type = event_type
        self.handled_count = 0

    @property
    def event_type(self) -> str:
        return self._event_type

    async def handle(self, event: DomainEvent) -> None:
        payload = event.to_dict()
        details = {
            key: value
            for key, value in payload.items()
            if key not in ("aggregate_id", "aggregate_type", "event_type", "metadata")
        }

        logger.log_business_event(
            event.event_type,
            f"{event.aggregate_type} {event.aggregate_id}: {event.event_type}",
            entity_id=event.aggregate_id,
            entity_type=event.aggregate_type,
            extra=details,
        )
        self.handled_count += 1


def audit_handlers() -> list:
    """One audit handler per audited event type, ready for ``EventBus.subscribe``."""
    return [PlantActivityAuditHandler(event_type) for event_type in AUDITED_EVENT_TYPES]
