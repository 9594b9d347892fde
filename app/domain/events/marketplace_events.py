"""
Domain events raised by the marketplace aggregates.
"""

from dataclasses import dataclass
from typing import Optional

from .base import DomainEvent


@dataclass(kw_only=True)
class AccountStatusChanged(DomainEvent):
    """A user's account status was changed."""
    user_id: str
    previous_status: str
    new_status: str
    changed_by: Optional[str] = None


@dataclass(kw_only=True)
class ApplicationSubmitted(DomainEvent):
    """A freelancer application was submitted or resubmitted."""
    application_id: str
    user_id: str
    resubmission: bool = False


@dataclass(kw_only=True)
class ApplicationReviewed(DomainEvent):
    """An admin approved or rejected a freelancer application."""
    application_id: str
    user_id: str
    status: str
    reviewed_by: str


@dataclass(kw_only=True)
class PostPublished(DomainEvent):
    """A service post became visible in the marketplace."""
    post_id: str
    user_id: str
    title: str


@dataclass(kw_only=True)
class ReviewSubmitted(DomainEvent):
    """A buyer reviewed a post."""
    review_id: str
    post_id: str
    user_id: str
    rating: int
    updated: bool = False


@dataclass(kw_only=True)
class ConversationStarted(DomainEvent):
    """A buyer opened a conversation with a freelancer."""
    conversation_id: str
    post_id: str
    buyer_id: str
    freelancer_id: str


@dataclass(kw_only=True)
class MessageSent(DomainEvent):
    """A message was added to a conversation."""
    message_id: str
    conversation_id: str
    sender_id: str
    recipient_id: str
    content: str
    created_at: str


@dataclass(kw_only=True)
class MessagesRead(DomainEvent):
    """A participant read the counterpart's messages."""
    conversation_id: str
    reader_id: str
    count: int
