"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from app.domain.events.base import get_event_dispatcher
from .notification_handlers import LoggingEventHandler, EmailNotificationHandler
from .realtime import RealtimeMessageHandler, get_connection_manager

logger = logging.getLogger(__name__)


def setup_event_handlers():
    """Set up and register all event handlers."""
    
    dispatcher = get_event_dispatcher()
    dispatcher.clear_handlers()
    
    # Register global handler for logging
    dispatcher.register_global_handler(LoggingEventHandler())
    
    # Register realtime handler for messaging events
    realtime_handler = RealtimeMessageHandler(get_connection_manager())
    dispatcher.register_handler("MessageSent", realtime_handler)
    dispatcher.register_handler("MessagesRead", realtime_handler)
    dispatcher.register_handler("ConversationStarted", realtime_handler)
    
    # Register email handler for review and account events
    email_handler = EmailNotificationHandler()
    dispatcher.register_handler("ApplicationReviewed", email_handler)
    dispatcher.register_handler("AccountStatusChanged", email_handler)
    
    logger.info("Event handlers registered successfully")
    
    # Log registered handlers
    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")


def initialize_event_system():
    """Initialize the complete event system."""
    try:
        setup_event_handlers()
        logger.info("Event system initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
