"""
Event handlers for notifications.
Logs every domain event and converts review and account events into emails.
"""

import logging
from typing import Optional, Tuple

from app.config import settings
from app.domain.events.base import EventHandler, DomainEvent
from app.domain.events.marketplace_events import ApplicationReviewed, AccountStatusChanged
from app.infrastructure.auth.supabase_auth import SupabaseAuthService
from app.infrastructure.email import get_email_service
from app.infrastructure.db.database import SessionLocal
from app.infrastructure.repositories.profile_repository import SQLAlchemyProfileRepository


logger = logging.getLogger(__name__)


class LoggingEventHandler(EventHandler):
    """Logs all events for auditing and debugging."""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Event {event.event_type} (ID: {event.event_id}): {event.to_dict()['data']}")


class EmailNotificationHandler(EventHandler):
    """
    Emails users about their application review and account status changes.
    Recipient emails live in Supabase Auth, so the service role key is required.
    """

    def __init__(self, email_service=None, auth_service=None, session_factory=SessionLocal):
        """Initialize email notification handler."""
        self.email_service = email_service or get_email_service()
        self.auth_service = auth_service
        self.session_factory = session_factory

    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the given event."""
        return isinstance(event, (ApplicationReviewed, AccountStatusChanged))

    async def handle(self, event: DomainEvent) -> None:
        """Handle review and status events and send the matching email."""
        recipient = self._recipient(event.user_id)
        if recipient is None:
            logger.info(f"No email address for user {event.user_id}, skipping {event.event_type} email")
            return
        email, name = recipient

        if isinstance(event, ApplicationReviewed):
            result = await self.email_service.send_application_reviewed(
                recipient_email=email,
                recipient_name=name,
                approved=event.status == "approved",
                reviewed_at=event.occurred_at
            )
        else:
            result = await self.email_service.send_account_status_changed(
                recipient_email=email,
                recipient_name=name,
                previous_status=event.previous_status,
                new_status=event.new_status
            )

        if result.get("success"):
            logger.info(f"{event.event_type} notification sent to {email}")
        else:
            logger.error(f"Failed to send {event.event_type} notification: {result.get('error')}")

    def _recipient(self, user_id: str) -> Optional[Tuple[str, str]]:
        """Email and display name of a user, None when the email is unavailable."""
        if self.auth_service is None:
            if not settings.has_service_role:
                return None
            self.auth_service = SupabaseAuthService()

        email = self.auth_service.get_user_email(user_id)
        if not email:
            return None

        session = self.session_factory()
        try:
            profile = SQLAlchemyProfileRepository(session).find_by_user_id(user_id)
        finally:
            session.close()
        return email, profile.public_name if profile else "there"
