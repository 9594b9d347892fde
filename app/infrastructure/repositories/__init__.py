"""
SQLAlchemy repository implementations.
"""

from .profile_repository import SQLAlchemyProfileRepository
from .application_repository import SQLAlchemyQuestionRepository, SQLAlchemyApplicationRepository
from .post_repository import SQLAlchemyPostRepository
from .review_repository import SQLAlchemyReviewRepository
from .conversation_repository import SQLAlchemyConversationRepository

__all__ = [
    "SQLAlchemyProfileRepository",
    "SQLAlchemyQuestionRepository",
    "SQLAlchemyApplicationRepository",
    "SQLAlchemyPostRepository",
    "SQLAlchemyReviewRepository",
    "SQLAlchemyConversationRepository",
]
