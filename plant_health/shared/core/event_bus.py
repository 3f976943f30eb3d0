"""
Event bus system for the Plant Health application.
Lets record-store mutations notify interested read-side listeners (audit log,
caches) through domain events instead of callers polling for changes.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """
    Base class for all domain events.
    Events represent something that happened in the domain.
    """
    event_type: ClassVar[str] = "domain.event"
    aggregate_type: ClassVar[str] = "aggregate"

    aggregate_id: str
    user_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        data = asdict(self)
        data['event_type'] = self.event_type
        data['aggregate_type'] = self.aggregate_type
        data['timestamp'] = self.timestamp.isoformat()
        return data


class EventHandler(ABC):
    """
    Abstract base class for event handlers.
    Each handler processes one type of domain event.
    """

    @property
    @abstractmethod
    def event_type(self) -> str:
        """Event type this handler processes."""
        pass

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle the domain event.

        Args:
            event: Domain event to handle
        """
        pass

    async def on_error(self, event: DomainEvent, error: Exception):
        """Handle errors during event processing."""
        logger.error(
            f"Handler {self.__class__.__name__} failed for event {event.event_id}: {error}",
            exc_info=True
        )


class EventBus:
    """
    In-process event bus for publishing and subscribing to domain events.

    Handlers run inline, in subscription order, when an event is published.
    A failing handler is reported through its ``on_error`` hook and does not
    affect the publisher or the other handlers.
    """

    def __init__(self):
        self.subscriptions: Dict[str, List[EventHandler]] = {}
        self._stats = {
            "published": 0,
            "processed": 0,
            "failed": 0,
        }

    def subscribe(self, handler: EventHandler, event_type: Optional[str] = None):
        """
        Subscribe handler to event type.

        Args:
            handler: Event handler instance
            event_type: Event type to subscribe to (uses handler.event_type if None)
        """
        if event_type is None:
            event_type = handler.event_type

        self.subscriptions.setdefault(event_type, []).append(handler)
        logger.info(f"Handler {handler.__class__.__name__} subscribed to {event_type}")

    def unsubscribe(self, handler: EventHandler, event_type: Optional[str] = None):
        """
        Unsubscribe handler from event type.

        Args:
            handler: Event handler instance
            event_type: Event type to unsubscribe from
        """
        if event_type is None:
            event_type = handler.event_type

        if event_type in self.subscriptions:
            self.subscriptions[event_type] = [
                h for h in self.subscriptions[event_type] if h is not handler
            ]
            if not self.subscriptions[event_type]:
                del self.subscriptions[event_type]

        logger.info(f"Handler {handler.__class__.__name__} unsubscribed from {event_type}")

    async def publish(self, event: DomainEvent):
        """
        Publish event to every handler subscribed to its type.

        Args:
            event: Domain event to publish
        """
        self._stats["published"] += 1
        handlers = list(self.subscriptions.get(event.event_type, []))

        if not handlers:
            logger.debug(f"No handlers for event type: {event.event_type}")
            return

        for handler in handlers:
            try:
                await handler.handle(event)
                self._stats["processed"] += 1
            except Exception as e:
                self._stats["failed"] += 1
                await handler.on_error(event, e)

        logger.debug(f"Event published: {event.event_type} - {event.event_id}")

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {
            **self._stats,
            "subscription_count": sum(len(h) for h in self.subscriptions.values()),
            "event_types": list(self.subscriptions.keys()),
        }
