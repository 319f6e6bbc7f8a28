# File: parkir/infrastructure/messaging.py
"""
In-process messaging for Parkir

Domain events drained from the ParkingArea aggregate are published here so
that presentation and logging can react to arrivals and departures without
the domain ever doing I/O.

Components:
1. EventType - the kinds of events the facility produces
2. EventHandler - subscriber interface
3. EventBus - synchronous publish/subscribe within the process
4. LoggingEventHandler / EventRecorder - stock subscribers
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from enum import Enum
import logging

from ..domain.models import DomainEvent, VehicleParkedEvent, VehicleLeftEvent


# ============================================================================
# EVENT TYPES
# ============================================================================

class EventType(str, Enum):
    """Domain event types"""
    VEHICLE_PARKED = "vehicle_parked"
    VEHICLE_LEFT = "vehicle_left"

    @classmethod
    def of(cls, event: DomainEvent) -> 'EventType':
        """Map a domain event instance to its type"""
        if isinstance(event, VehicleParkedEvent):
            return cls.VEHICLE_PARKED
        if isinstance(event, VehicleLeftEvent):
            return cls.VEHICLE_LEFT
        raise ValueError(f"Unsupported event: {event.__class__.__name__}")


# ============================================================================
# EVENT HANDLERS
# ============================================================================

class EventHandler(ABC):
    """Base class for event handlers"""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """Handle a domain event"""
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if handler can handle this event"""
        return True


class LoggingEventHandler(EventHandler):
    """Writes every event to the log"""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self._logger = logging.getLogger(self.__class__.__name__)

    def handle(self, event: DomainEvent) -> None:
        self._logger.log(self.level, f"{EventType.of(event).value}: {event.to_dict()['data']}")


class EventRecorder(EventHandler):
    """Keeps published events in memory, newest last"""

    def __init__(self, max_events: Optional[int] = None):
        self.max_events = max_events
        self.events: List[DomainEvent] = []

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[:len(self.events) - self.max_events]

    def clear(self) -> None:
        self.events.clear()


# ============================================================================
# EVENT BUS (In-memory)
# ============================================================================

class EventBus:
    """
    In-memory event bus for intra-process event publishing

    Handlers run synchronously in subscription order. A failing handler is
    logged and skipped; it never breaks the operation that raised the event.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to events of a specific type"""
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            self._logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to every event type"""
        for event_type in EventType:
            self.subscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe handler from events"""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            self._logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type.value}")

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers"""
        event_type = EventType.of(event)
        self._logger.debug(f"Publishing event: {event_type.value} (ID: {event.event_id})")

        for handler in list(self._subscribers.get(event_type, [])):
            if not handler.can_handle(event):
                continue
            try:
                handler.handle(event)
            except Exception as e:
                self._logger.error(
                    f"Error handling event {event_type.value} with {handler.__class__.__name__}: {e}",
                    exc_info=True
                )

    def publish_all(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def clear_subscribers(self) -> None:
        """Clear all subscribers (for testing)"""
        self._subscribers.clear()
