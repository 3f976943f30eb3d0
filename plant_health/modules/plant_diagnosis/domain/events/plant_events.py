"""
Domain events for the plant diagnosis module.
Published after record-store mutations so read-side listeners can react.
"""

from dataclasses import dataclass
from typing import Optional

from plant_health.shared.core.event_bus import DomainEvent


@dataclass
class PlantCreatedEvent(DomainEvent):
    """A plant was diagnosed and saved together with its treatment plan."""
    event_type = "plant.created"
    aggregate_type = "plant"

    plant_name: Optional[str] = None
    treatment_count: int = 0
    used_fallback: bool = False


@dataclass
class PlantDeletedEvent(DomainEvent):
    """A plant and its treatments were deleted."""
    event_type = "plant.deleted"
    aggregate_type = "plant"


@dataclass
class TreatmentCompletionChangedEvent(DomainEvent):
    """A treatment step was marked done or not done."""
    event_type = "treatment.completion_changed"
    aggregate_type = "treatment"

    plant_id: Optional[str] = None
    step: Optional[int] = None
    completed: bool = False
