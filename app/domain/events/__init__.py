"""
Domain events.
"""

from .base import (
    DomainEvent, EventHandler, EventDispatcher,
    get_event_dispatcher, publish_event, publish_events
)
from .marketplace_events import (
    AccountStatusChanged, ApplicationSubmitted, ApplicationReviewed,
    PostPublished, ReviewSubmitted, ConversationStarted, MessageSent, MessagesRead
)

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "publish_event",
    "publish_events",
    "AccountStatusChanged",
    "ApplicationSubmitted",
    "ApplicationReviewed",
    "PostPublished",
    "ReviewSubmitted",
    "ConversationStarted",
    "MessageSent",
    "MessagesRead",
]
