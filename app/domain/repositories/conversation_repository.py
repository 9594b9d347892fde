"""
Conversation and message repository interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from app.domain.models.conversation import Conversation, Message


class ConversationRepository(ABC):
    """Repository interface for conversations and their messages."""
    
    @abstractmethod
    def find_by_id(self, conversation_id: str) -> Optional[Conversation]:
        pass
    
    @abstractmethod
    def find_by_participants(self, post_id: str, buyer_id: str, freelancer_id: str) -> Optional[Conversation]:
        pass
    
    @abstractmethod
    def get_or_create(self, conversation: Conversation) -> tuple[Conversation, bool]:
        """
        Return the stored conversation with the same key, inserting the given one if none exists.
        The boolean tells whether a row was inserted. A concurrent insert of the
        same key is resolved by reading the row that won.
        """
        pass
    
    @abstractmethod
    def save(self, conversation: Conversation) -> Conversation:
        pass
    
    @abstractmethod
    def list_for_user(self, user_id: str, role: Optional[str] = None) -> List[Conversation]:
        """Conversations of a user, most recent activity first."""
        pass
    
    @abstractmethod
    def add_message(self, message: Message) -> Message:
        pass
    
    @abstractmethod
    def list_messages(self, conversation_id: str) -> List[Message]:
        """Messages of a conversation, oldest first."""
        pass
    
    @abstractmethod
    def latest_messages(self, conversation_ids: List[str]) -> Dict[str, Message]:
        pass
    
    @abstractmethod
    def unread_counts(self, conversation_ids: List[str], user_id: str) -> Dict[str, int]:
        """Unread messages per conversation that were not sent by the user."""
        pass
    
    @abstractmethod
    def mark_messages_as_read(self, conversation_id: str, user_id: str) -> int:
        """Mark the counterpart's messages as read; returns how many changed."""
        pass
    
    @abstractmethod
    def delete_for_user(self, user_id: str) -> int:
        """Delete the conversations a user takes part in, with their messages."""
        pass
