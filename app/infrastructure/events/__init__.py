"""
Infrastructure event handlers.
Handles domain events and triggers notifications and realtime updates.
"""

from .notification_handlers import LoggingEventHandler, EmailNotificationHandler
from .realtime import ConnectionManager, RealtimeMessageHandler, get_connection_manager
from .event_setup import setup_event_handlers, initialize_event_system

__all__ = [
    "LoggingEventHandler",
    "EmailNotificationHandler",
    "ConnectionManager",
    "RealtimeMessageHandler",
    "get_connection_manager",
    "setup_event_handlers",
    "initialize_event_system"
]
