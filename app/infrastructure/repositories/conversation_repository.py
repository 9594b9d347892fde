"""
Conversation repository implementation using SQLAlchemy.
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.models.conversation import Conversation, Message
from app.domain.repositories.conversation_repository import (
    ConversationRepository as ConversationRepositoryInterface
)
from app.infrastructure.db.models import ConversationModel, MessageModel
from app.infrastructure.mappers.conversation_mapper import ConversationMapper, MessageMapper


logger = logging.getLogger(__name__)


class SQLAlchemyConversationRepository(ConversationRepositoryInterface):
    """SQLAlchemy implementation of conversation repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = ConversationMapper()
        self.message_mapper = MessageMapper()
        self.model = ConversationModel
    
    def find_by_id(self, conversation_id: str) -> Optional[Conversation]:
        model = self.session.get(ConversationModel, conversation_id)
        return self.mapper.model_to_domain(model) if model else None
    
    def find_by_participants(self, post_id: str, buyer_id: str, freelancer_id: str) -> Optional[Conversation]:
        model = self.session.query(ConversationModel).filter_by(
            post_id=post_id,
            buyer_id=buyer_id,
            freelancer_id=freelancer_id
        ).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def get_or_create(self, conversation: Conversation) -> tuple[Conversation, bool]:
        """
        Select the conversation by its key, insert it when missing.
        A unique violation means another request inserted the same key first;
        only the savepoint of the insert is rolled back and the stored row is read once more.
        """
        existing = self.find_by_participants(*conversation.key)
        if existing:
            return existing, False
        
        try:
            with self.session.begin_nested():
                self.session.add(self.mapper.domain_to_model(conversation))
        except IntegrityError:
            logger.info(f"Conversation {conversation.key} was created concurrently, reusing it")
            existing = self.find_by_participants(*conversation.key)
            if existing is None:
                raise
            return existing, False
        
        return conversation, True
    
    def save(self, conversation: Conversation) -> Conversation:
        model = self.session.get(ConversationModel, conversation.id)
        if model is None:
            self.session.add(self.mapper.domain_to_model(conversation))
        else:
            self.mapper.update_model(model, conversation)
        self.session.flush()
        return conversation
    
    def list_for_user(self, user_id: str, role: Optional[str] = None) -> List[Conversation]:
        """Conversations of a user, most recent activity first, never-used ones last."""
        query = self.session.query(ConversationModel)
        if role == "buyer":
            query = query.filter(ConversationModel.buyer_id == user_id)
        elif role == "freelancer":
            query = query.filter(ConversationModel.freelancer_id == user_id)
        else:
            query = query.filter(or_(
                ConversationModel.buyer_id == user_id,
                ConversationModel.freelancer_id == user_id
            ))
        models = query.order_by(
            ConversationModel.last_message_at.is_(None),
            ConversationModel.last_message_at.desc(),
            ConversationModel.created_at.desc()
        ).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def add_message(self, message: Message) -> Message:
        self.session.add(self.message_mapper.domain_to_model(message))
        self.session.flush()
        return message
    
    def list_messages(self, conversation_id: str) -> List[Message]:
        models = self.session.query(MessageModel).filter_by(
            conversation_id=conversation_id
        ).order_by(MessageModel.created_at.asc()).all()
        return [self.message_mapper.model_to_domain(model) for model in models]
    
    def latest_messages(self, conversation_ids: List[str]) -> Dict[str, Message]:
        if not conversation_ids:
            return {}
        latest = self.session.query(
            MessageModel.conversation_id,
            func.max(MessageModel.created_at).label("latest_at")
        ).filter(
            MessageModel.conversation_id.in_(set(conversation_ids))
        ).group_by(MessageModel.conversation_id).subquery()
        
        models = self.session.query(MessageModel).join(
            latest,
            and_(
                MessageModel.conversation_id == latest.c.conversation_id,
                MessageModel.created_at == latest.c.latest_at
            )
        ).all()
        return {model.conversation_id: self.message_mapper.model_to_domain(model) for model in models}
    
    def unread_counts(self, conversation_ids: List[str], user_id: str) -> Dict[str, int]:
        if not conversation_ids:
            return {}
        rows = self.session.query(
            MessageModel.conversation_id,
            func.count(MessageModel.id)
        ).filter(
            MessageModel.conversation_id.in_(set(conversation_ids)),
            MessageModel.read.is_(False),
            MessageModel.sender_id != user_id
        ).group_by(MessageModel.conversation_id).all()
        return {conversation_id: int(count) for conversation_id, count in rows}
    
    def mark_messages_as_read(self, conversation_id: str, user_id: str) -> int:
        """Mark the counterpart's messages as read; returns how many changed."""
        updated = self.session.query(MessageModel).filter(
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_id != user_id,
            MessageModel.read.is_(False)
        ).update({MessageModel.read: True}, synchronize_session="fetch")
        self.session.flush()
        return updated
    
    def delete_for_user(self, user_id: str) -> int:
        models = self.session.query(ConversationModel).filter(or_(
            ConversationModel.buyer_id == user_id,
            ConversationModel.freelancer_id == user_id
        )).all()
        for model in models:
            # ORM delete so the messages cascade
            self.session.delete(model)
        self.session.flush()
        return len(models)
