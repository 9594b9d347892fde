"""
Base classes for domain events and event handling.
Events raised by aggregates are dispatched in-process to registered handlers.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Dict, Any, List, Iterable, Optional
from datetime import datetime
from dataclasses import dataclass, field, fields
import uuid


logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class DomainEvent(ABC):
    """Base class for all domain events."""
    
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=datetime.utcnow)
    
    @property
    def event_type(self) -> str:
        return self.__class__.__name__
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self._get_event_data()
        }
    
    def _get_event_data(self) -> Dict[str, Any]:
        """Event payload: every field that is not part of the envelope."""
        data = {}
        for f in fields(self):
            if f.name in ("event_id", "occurred_at"):
                continue
            value = getattr(self, f.name)
            data[f.name] = value.isoformat() if isinstance(value, datetime) else value
        return data


class EventHandler(ABC):
    """Base class for event handlers."""
    
    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle a domain event."""
        pass
    
    @abstractmethod
    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the given event."""
        pass


class EventDispatcher:
    """Dispatches domain events to registered handlers."""
    
    def __init__(self, log_size: int = 500):
        """Initialize event dispatcher."""
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._event_log: deque = deque(maxlen=log_size)
    
    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Register an event handler for specific event type."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.info(f"Registered handler {handler.__class__.__name__} for {event_type}")
    
    def register_global_handler(self, handler: EventHandler) -> None:
        """Register a handler that receives all events."""
        self._global_handlers.append(handler)
        logger.info(f"Registered global handler {handler.__class__.__name__}")
    
    def clear_handlers(self) -> None:
        """Remove every registered handler."""
        self._handlers.clear()
        self._global_handlers.clear()
    
    def clear_event_log(self) -> None:
        """Forget the events dispatched so far."""
        self._event_log.clear()
    
    async def dispatch(self, event: DomainEvent) -> None:
        """Dispatch event to all registered handlers."""
        self._event_log.append(event.to_dict())
        logger.info(f"Dispatching event: {event.event_type} (ID: {event.event_id})")
        
        all_handlers = [
            h for h in self._handlers.get(event.event_type, [])
            if h.can_handle(event)
        ] + [
            h for h in self._global_handlers
            if h.can_handle(event)
        ]
        
        if not all_handlers:
            logger.debug(f"No handlers registered for event: {event.event_type}")
            return
        
        await asyncio.gather(*(self._safe_handle(handler, event) for handler in all_handlers))
    
    async def _safe_handle(self, handler: EventHandler, event: DomainEvent) -> None:
        """Execute a handler so that one failure does not affect the others."""
        try:
            await handler.handle(event)
            logger.debug(f"Handler {handler.__class__.__name__} processed {event.event_type}")
        except Exception:
            logger.exception(
                f"Handler {handler.__class__.__name__} failed to process {event.event_type}"
            )
    
    def get_event_log(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get recent events, newest first."""
        events = list(reversed(self._event_log))
        return events[:limit] if limit else events
    
    def get_registered_handlers(self) -> Dict[str, List[str]]:
        """Get information about registered handlers."""
        result = {
            event_type: [h.__class__.__name__ for h in handlers]
            for event_type, handlers in self._handlers.items()
        }
        if self._global_handlers:
            result["global"] = [h.__class__.__name__ for h in self._global_handlers]
        return result


# Singleton instance
_event_dispatcher = None


def get_event_dispatcher() -> EventDispatcher:
    """Get singleton event dispatcher instance."""
    global _event_dispatcher
    if _event_dispatcher is None:
        _event_dispatcher = EventDispatcher()
    return _event_dispatcher


async def publish_event(event: DomainEvent) -> None:
    """Publish a domain event."""
    await get_event_dispatcher().dispatch(event)


async def publish_events(events: Iterable[DomainEvent]) -> None:
    """Publish several events in order."""
    for event in events:
        await publish_event(event)


class EventOutbox:
    """
    Holds the events of a unit of work until it has been committed.
    Command use cases hand their events here instead of publishing them right away.
    """

    def __init__(self):
        self._pending: List[DomainEvent] = []

    @property
    def pending(self) -> List[DomainEvent]:
        return list(self._pending)

    def add(self, events: Iterable[DomainEvent]) -> None:
        self._pending.extend(events)

    def discard(self) -> None:
        self._pending.clear()

    async def flush(self) -> None:
        """Publish the held events in order and empty the outbox."""
        events, self._pending = self._pending, []
        await publish_events(events)
