"""
Email service for marketplace notifications.
Handles SMTP connections, template rendering, and delivery.
"""

import asyncio
import smtplib
import logging
from typing import List, Dict, Any, Optional, Union
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from app.config import settings
from .template_loader import EmailTemplateLoader


logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    """Email message data."""
    to: Union[str, List[str]]
    subject: str
    template: str
    context: Dict[str, Any]
    from_name: Optional[str] = None
    from_address: Optional[str] = None


class EmailService:
    """Service for sending email notifications."""

    def __init__(self, template_loader: Optional[EmailTemplateLoader] = None):
        """Initialize email service with SMTP configuration."""
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_name = settings.email_from_name
        self.from_address = settings.email_from_address
        self.template_loader = template_loader or EmailTemplateLoader()
        self.sent_emails = []  # For tracking in development

    async def send_email(self, message: EmailMessage) -> Dict[str, Any]:
        """
        Send an email message.
        Without SMTP settings the message is rendered and logged instead.

        Returns:
            Result dictionary with success status and details
        """
        try:
            html_content, text_content = self.template_loader.render_pair(
                message.template,
                {**message.context, "subject": message.subject}
            )

            if not self._is_smtp_configured():
                return self._log_email(message, html_content)

            mime_message = self._create_mime_message(message, html_content, text_content)
            # smtplib blocks; keep it off the event loop
            result = await asyncio.to_thread(self._send_via_smtp, mime_message, message)
            logger.info(f"Email sent successfully to {message.to}: {message.subject}")
            return result

        except Exception as e:
            logger.error(f"Failed to send email: {str(e)}")
            return {
                "success": False,
                "error": str(e),
                "timestamp": datetime.now().isoformat()
            }

    async def send_application_reviewed(
        self,
        recipient_email: str,
        recipient_name: str,
        approved: bool,
        reviewed_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Tell an applicant the outcome of their freelancer application."""

        message = EmailMessage(
            to=recipient_email,
            subject="Your freelancer application was approved" if approved
            else "Update on your freelancer application",
            template="application_reviewed",
            context={
                "recipient_name": recipient_name,
                "approved": approved,
                "reviewed_at": reviewed_at or datetime.utcnow()
            }
        )

        return await self.send_email(message)

    async def send_account_status_changed(
        self,
        recipient_email: str,
        recipient_name: str,
        previous_status: str,
        new_status: str
    ) -> Dict[str, Any]:
        """Tell a user their account status changed."""

        message = EmailMessage(
            to=recipient_email,
            subject="Your account has been suspended" if new_status == "suspended"
            else "Your account status changed",
            template="account_status",
            context={
                "recipient_name": recipient_name,
                "previous_status": previous_status,
                "new_status": new_status
            }
        )

        return await self.send_email(message)

    def _create_mime_message(
        self,
        message: EmailMessage,
        html_content: str,
        text_content: str
    ) -> MIMEMultipart:
        """Create MIME message from email data."""

        mime_msg = MIMEMultipart("alternative")

        # Headers
        mime_msg["Subject"] = message.subject
        mime_msg["From"] = f"{message.from_name or self.from_name} <{message.from_address or self.from_address}>"
        mime_msg["To"] = ", ".join(self._recipients(message))

        # Content
        mime_msg.attach(MIMEText(text_content, "plain", "utf-8"))
        mime_msg.attach(MIMEText(html_content, "html", "utf-8"))

        return mime_msg

    @staticmethod
    def _recipients(message: EmailMessage) -> List[str]:
        return list(message.to) if isinstance(message.to, list) else [message.to]

    def _send_via_smtp(
        self,
        mime_message: MIMEMultipart,
        original_message: EmailMessage
    ) -> Dict[str, Any]:
        """Send email via SMTP server."""
        recipients = self._recipients(original_message)

        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(mime_message, to_addrs=recipients)

        return {
            "success": True,
            "recipients": recipients,
            "timestamp": datetime.now().isoformat()
        }

    def _log_email(self, message: EmailMessage, html_content: str) -> Dict[str, Any]:
        """Log email instead of sending (for development)."""

        email_log = {
            "timestamp": datetime.now().isoformat(),
            "to": message.to,
            "subject": message.subject,
            "template": message.template,
            "html_preview": html_content[:200] + "..." if len(html_content) > 200 else html_content
        }

        self.sent_emails.append(email_log)

        logger.info(f"Email logged (SMTP not configured): {message.subject} to {message.to}")

        return {
            "success": True,
            "logged": True,
            "message": "Email logged successfully (SMTP not configured)",
            "timestamp": datetime.now().isoformat()
        }

    def _is_smtp_configured(self) -> bool:
        """Check if SMTP is properly configured."""
        return all([
            self.smtp_host,
            self.smtp_user,
            self.smtp_password
        ])

    def get_sent_emails(self) -> List[Dict[str, Any]]:
        """Get list of sent emails (for development/testing)."""
        return self.sent_emails.copy()

    def clear_sent_emails(self) -> None:
        """Clear sent emails log."""
        self.sent_emails.clear()


@lru_cache()
def get_email_service() -> EmailService:
    """Get the shared email service instance."""
    return EmailService()
