"""
Messaging domain models.
A conversation links one buyer and one freelancer around a post.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from app.domain.events.marketplace_events import ConversationStarted, MessageSent
from .base import BaseEntity, AggregateRoot, ValidationError, BusinessRuleViolation, PermissionDeniedError, new_id


MAX_MESSAGE_LENGTH = 5000


@dataclass(kw_only=True, eq=False)
class Message(BaseEntity):
    """A single chat message."""
    
    conversation_id: str
    sender_id: str
    content: str
    read: bool = False
    
    def __post_init__(self):
        super().__post_init__()
        self.validate()
    
    def validate(self) -> None:
        if not self.content or not self.content.strip():
            raise ValidationError("Message cannot be empty", "content")
        if len(self.content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Message too long (max {MAX_MESSAGE_LENGTH} characters)", "content")


@dataclass(kw_only=True, eq=False)
class Conversation(AggregateRoot):
    """
    Conversation aggregate root.
    (post_id, buyer_id, freelancer_id) identifies a conversation uniquely.
    """
    
    post_id: str
    buyer_id: str
    freelancer_id: str
    last_message_at: Optional[datetime] = None
    
    def __post_init__(self):
        super().__post_init__()
        self.validate()
    
    @classmethod
    def start(cls, post_id: str, buyer_id: str, freelancer_id: str) -> "Conversation":
        conversation = cls(
            id=new_id(),
            post_id=post_id,
            buyer_id=buyer_id,
            freelancer_id=freelancer_id
        )
        conversation.add_event(ConversationStarted(
            conversation_id=conversation.id,
            post_id=post_id,
            buyer_id=buyer_id,
            freelancer_id=freelancer_id
        ))
        return conversation
    
    def validate(self) -> None:
        if not self.post_id:
            raise ValidationError("Post is required", "post_id")
        if not self.buyer_id or not self.freelancer_id:
            raise ValidationError("Both participants are required")
        if self.buyer_id == self.freelancer_id:
            raise BusinessRuleViolation("You cannot start a conversation with yourself")
    
    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.post_id, self.buyer_id, self.freelancer_id)
    
    @property
    def participants(self) -> Tuple[str, str]:
        return (self.buyer_id, self.freelancer_id)
    
    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants
    
    def ensure_participant(self, user_id: str) -> None:
        if not self.has_participant(user_id):
            raise PermissionDeniedError("You are not part of this conversation")
    
    def counterpart_of(self, user_id: str) -> str:
        self.ensure_participant(user_id)
        return self.freelancer_id if user_id == self.buyer_id else self.buyer_id
    
    def role_of(self, user_id: str) -> str:
        self.ensure_participant(user_id)
        return "buyer" if user_id == self.buyer_id else "freelancer"
    
    def record_message(self, sender_id: str, content: str) -> Message:
        """Create a message from a participant and bump the activity timestamp."""
        recipient_id = self.counterpart_of(sender_id)
        message = Message(
            id=new_id(),
            conversation_id=self.id,
            sender_id=sender_id,
            content=(content or "").strip()
        )
        self.last_message_at = message.created_at
        self.mark_as_updated()
        self.add_event(MessageSent(
            message_id=message.id,
            conversation_id=self.id,
            sender_id=sender_id,
            recipient_id=recipient_id,
            content=message.content,
            created_at=message.created_at.isoformat()
        ))
        return message
