"""
Messaging DTOs for the application layer.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import Field, validator

from .base_dto import BaseDTO, RequestDTO, ResponseDTO
from .profile_dto import ProfileSummaryResponseDTO
from app.domain.models.conversation import Conversation, Message


# Request DTOs
class OpenConversationRequestDTO(RequestDTO):
    """DTO for opening (or reusing) a conversation with a post's freelancer."""
    
    post_id: str = Field(min_length=1, description="Post the conversation is about")
    freelancer_id: str = Field(min_length=1, description="Owner of the post")


class StartConversationRequestDTO(OpenConversationRequestDTO):
    """DTO for opening a conversation and sending its first message."""
    
    content: str = Field(min_length=1, max_length=5000, description="Message text")
    
    @validator('content')
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class SendMessageRequestDTO(RequestDTO):
    """DTO for sending a message in a conversation."""
    
    conversation_id: Optional[str] = Field(default=None, description="Set from the URL path")
    content: str = Field(min_length=1, max_length=5000, description="Message text")
    
    @validator('content')
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class ListConversationsRequestDTO(RequestDTO):
    """DTO for listing the caller's conversations."""
    
    role: Optional[str] = Field(default=None, pattern="^(buyer|freelancer)$", description="Only conversations where the caller has this role")


# Response DTOs
class ChatMessageResponseDTO(ResponseDTO):
    """DTO for a chat message."""
    
    conversation_id: str = Field(description="Conversation ID")
    sender_id: str = Field(description="Sender ID")
    content: str = Field(description="Message text")
    read: bool = Field(description="Whether the recipient has read it")
    
    @classmethod
    def from_domain(cls, message: Message) -> "ChatMessageResponseDTO":
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            read=message.read,
            created_at=message.created_at,
            updated_at=message.updated_at
        )


class ConversationResponseDTO(ResponseDTO):
    """DTO for a conversation as seen by one participant."""
    
    post_id: str = Field(description="Post the conversation is about")
    post_title: Optional[str] = Field(default=None, description="Title of the post")
    buyer_id: str = Field(description="Buyer ID")
    freelancer_id: str = Field(description="Freelancer ID")
    role: str = Field(description="The caller's side: buyer or freelancer")
    counterpart: ProfileSummaryResponseDTO = Field(description="The other participant")
    last_message: Optional[ChatMessageResponseDTO] = Field(default=None, description="Latest message")
    last_message_at: Optional[datetime] = Field(default=None, description="Latest activity")
    unread_count: int = Field(default=0, description="Unread messages from the counterpart")
    
    @classmethod
    def from_domain(
        cls,
        conversation: Conversation,
        viewer_id: str,
        counterpart: ProfileSummaryResponseDTO,
        post_title: Optional[str] = None,
        last_message: Optional[Message] = None,
        unread_count: int = 0
    ) -> "ConversationResponseDTO":
        return cls(
            id=conversation.id,
            post_id=conversation.post_id,
            post_title=post_title,
            buyer_id=conversation.buyer_id,
            freelancer_id=conversation.freelancer_id,
            role=conversation.role_of(viewer_id),
            counterpart=counterpart,
            last_message=ChatMessageResponseDTO.from_domain(last_message) if last_message else None,
            last_message_at=conversation.last_message_at,
            unread_count=unread_count,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at
        )


class ConversationMessagesResponseDTO(BaseDTO):
    """DTO for a conversation thread."""
    
    conversation: ConversationResponseDTO = Field(description="The conversation")
    messages: List[ChatMessageResponseDTO] = Field(default_factory=list, description="Messages, oldest first")
    marked_read: int = Field(default=0, description="Messages marked read by this request")


class StartConversationResponseDTO(BaseDTO):
    """DTO for an opened conversation."""
    
    conversation: ConversationResponseDTO = Field(description="The conversation")
    created: bool = Field(description="Whether the conversation was created by this request")
    message: Optional[ChatMessageResponseDTO] = Field(default=None, description="First message, when sent")


class MarkReadResponseDTO(BaseDTO):
    """DTO for a mark-as-read result."""
    
    conversation_id: str = Field(description="Conversation ID")
    marked_read: int = Field(description="Messages marked read")
