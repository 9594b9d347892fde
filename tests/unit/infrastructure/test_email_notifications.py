"""
Unit tests for the email service and the email notification handler.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config import settings
from app.domain.events.marketplace_events import (
    ApplicationReviewed, AccountStatusChanged, PostPublished
)
from app.domain.models.profile import UserRole
from app.infrastructure.email.email_service import EmailService, EmailMessage
from app.infrastructure.email.template_loader import EmailTemplateLoader
from app.infrastructure.events.notification_handlers import EmailNotificationHandler


@pytest.fixture
def no_smtp(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", None)
    monkeypatch.setattr(settings, "smtp_user", None)
    monkeypatch.setattr(settings, "smtp_password", None)


class TestEmailTemplateLoader:
    """Test cases for template rendering."""

    def test_render_pair(self):
        """Test both versions of a template are rendered."""
        html, text = EmailTemplateLoader().render_pair("account_status", {
            "recipient_name": "Jane",
            "previous_status": "pending_approval",
            "new_status": "active",
            "subject": "Status"
        })

        assert "Jane" in html
        assert "Pending approval" in text
        assert "Active" in text

    def test_date_filter(self):
        """Test review dates are formatted by the date filter."""
        html, text = EmailTemplateLoader().render_pair("application_reviewed", {
            "recipient_name": "Jane",
            "approved": True,
            "reviewed_at": "2024-03-01T10:00:00Z",
            "subject": "Application approved"
        })

        assert "Mar 01, 2024" in html
        assert "Mar 01, 2024" in text

    def test_list_templates(self):
        """Test the bundled templates are discovered."""
        templates = EmailTemplateLoader().list_templates()

        assert "application_reviewed.html" in templates
        assert "account_status.html" in templates


class TestEmailService:
    """Test cases for EmailService."""

    @pytest.mark.asyncio
    async def test_logs_without_smtp(self, no_smtp):
        """Test messages are logged when SMTP is not configured."""
        service = EmailService()

        result = await service.send_application_reviewed("jane@example.com", "Jane", approved=True,
                                                          reviewed_at=datetime(2024, 3, 1))

        assert result["success"] is True
        assert result["logged"] is True
        sent = service.get_sent_emails()
        assert sent[0]["to"] == "jane@example.com"
        assert sent[0]["subject"] == "Your freelancer application was approved"
        assert sent[0]["template"] == "application_reviewed"

    @pytest.mark.asyncio
    async def test_suspension_subject(self, no_smtp):
        """Test suspensions get their own subject line."""
        service = EmailService()

        await service.send_account_status_changed("jane@example.com", "Jane", "active", "suspended")

        assert service.get_sent_emails()[0]["subject"] == "Your account has been suspended"
        service.clear_sent_emails()
        assert service.get_sent_emails() == []

    @pytest.mark.asyncio
    async def test_unknown_template_fails(self, no_smtp):
        """Test rendering errors are reported instead of raised."""
        result = await EmailService().send_email(
            EmailMessage(to="jane@example.com", subject="Hi", template="missing", context={})
        )

        assert result["success"] is False
        assert "error" in result

    @pytest.mark.asyncio
    async def test_sends_via_smtp(self, monkeypatch):
        """Test configured SMTP is used with TLS and login."""
        monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
        monkeypatch.setattr(settings, "smtp_user", "mailer")
        monkeypatch.setattr(settings, "smtp_password", "secret")
        service = EmailService()

        with patch("app.infrastructure.email.email_service.smtplib.SMTP") as smtp:
            result = await service.send_account_status_changed("jane@example.com", "Jane", "suspended", "active")

        server = smtp.return_value.__enter__.return_value
        assert result["success"] is True
        assert result["recipients"] == ["jane@example.com"]
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        server.send_message.assert_called_once()


class TestEmailNotificationHandler:
    """Test cases for EmailNotificationHandler."""

    def setup_method(self):
        """Set up test fixtures."""
        self.email_service = MagicMock()
        self.email_service.send_application_reviewed = AsyncMock(return_value={"success": True})
        self.email_service.send_account_status_changed = AsyncMock(return_value={"success": True})
        self.auth_service = MagicMock()
        self.auth_service.get_user_email.return_value = "jane@example.com"

    def test_handles_only_review_and_status_events(self, session_factory):
        """Test unrelated events are ignored."""
        handler = EmailNotificationHandler(self.email_service, self.auth_service, session_factory)

        assert handler.can_handle(ApplicationReviewed(
            application_id="a-1", user_id="user-1", status="approved", reviewed_by="admin-1"
        ))
        assert not handler.can_handle(PostPublished(post_id="p-1", user_id="user-1", title="Logo"))

    @pytest.mark.asyncio
    async def test_application_reviewed_email(self, session_factory, seed):
        """Test applicants are emailed with their display name."""
        seed.profile("user-1", UserRole.FREELANCER, display_name="Jane Doe")
        handler = EmailNotificationHandler(self.email_service, self.auth_service, session_factory)

        await handler.handle(ApplicationReviewed(
            application_id="a-1", user_id="user-1", status="approved", reviewed_by="admin-1"
        ))

        kwargs = self.email_service.send_application_reviewed.await_args.kwargs
        assert kwargs["recipient_email"] == "jane@example.com"
        assert kwargs["recipient_name"] == "Jane Doe"
        assert kwargs["approved"] is True

    @pytest.mark.asyncio
    async def test_status_email(self, session_factory):
        """Test status changes are emailed even without a profile."""
        handler = EmailNotificationHandler(self.email_service, self.auth_service, session_factory)

        await handler.handle(AccountStatusChanged(
            user_id="user-9", previous_status="active", new_status="suspended", changed_by="admin-1"
        ))

        self.email_service.send_account_status_changed.assert_awaited_once_with(
            recipient_email="jane@example.com",
            recipient_name="there",
            previous_status="active",
            new_status="suspended"
        )

    @pytest.mark.asyncio
    async def test_skips_users_without_email(self, session_factory):
        """Test nothing is sent when Auth has no email."""
        self.auth_service.get_user_email.return_value = None
        handler = EmailNotificationHandler(self.email_service, self.auth_service, session_factory)

        await handler.handle(AccountStatusChanged(
            user_id="user-1", previous_status="active", new_status="suspended"
        ))

        self.email_service.send_account_status_changed.assert_not_called()

    @pytest.mark.asyncio
    async def test_skips_without_service_role(self, session_factory, monkeypatch):
        """Test emails need the service role key when no auth service is given."""
        monkeypatch.setattr(settings, "supabase_service_key", "")
        handler = EmailNotificationHandler(self.email_service, None, session_factory)

        await handler.handle(AccountStatusChanged(
            user_id="user-1", previous_status="active", new_status="suspended"
        ))

        self.email_service.send_account_status_changed.assert_not_called()
