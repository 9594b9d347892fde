"""
Mappers between domain entities and SQLAlchemy models.
"""

from .profile_mapper import ProfileMapper
from .application_mapper import QuestionMapper, ApplicationMapper
from .post_mapper import PostMapper
from .review_mapper import ReviewMapper
from .conversation_mapper import ConversationMapper, MessageMapper

__all__ = [
    "ProfileMapper",
    "QuestionMapper",
    "ApplicationMapper",
    "PostMapper",
    "ReviewMapper",
    "ConversationMapper",
    "MessageMapper",
]
