"""
Conversation and message mappers.
"""

from app.domain.models.conversation import Conversation, Message
from app.infrastructure.db.models import ConversationModel, MessageModel


class ConversationMapper:
    """Maps between Conversation and ConversationModel."""
    
    def domain_to_model(self, conversation: Conversation) -> ConversationModel:
        model = ConversationModel(id=conversation.id)
        self.update_model(model, conversation)
        return model
    
    def update_model(self, model: ConversationModel, conversation: Conversation) -> None:
        model.post_id = conversation.post_id
        model.buyer_id = conversation.buyer_id
        model.freelancer_id = conversation.freelancer_id
        model.last_message_at = conversation.last_message_at
        model.version = conversation.version
        model.created_at = conversation.created_at
        model.updated_at = conversation.updated_at
    
    def model_to_domain(self, model: ConversationModel) -> Conversation:
        return Conversation(
            id=model.id,
            post_id=model.post_id,
            buyer_id=model.buyer_id,
            freelancer_id=model.freelancer_id,
            last_message_at=model.last_message_at,
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )


class MessageMapper:
    """Maps between Message and MessageModel."""
    
    def domain_to_model(self, message: Message) -> MessageModel:
        return MessageModel(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            read=message.read,
            created_at=message.created_at
        )
    
    def model_to_domain(self, model: MessageModel) -> Message:
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            sender_id=model.sender_id,
            content=model.content,
            read=bool(model.read),
            created_at=model.created_at,
            updated_at=model.created_at
        )
