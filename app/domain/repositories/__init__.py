"""
Repository interfaces for the domain layer.
"""

from .profile_repository import ProfileRepository
from .application_repository import QuestionRepository, ApplicationRepository
from .post_repository import PostRepository, MarketplaceFilter
from .review_repository import ReviewRepository
from .conversation_repository import ConversationRepository

__all__ = [
    "ProfileRepository",
    "QuestionRepository",
    "ApplicationRepository",
    "PostRepository",
    "MarketplaceFilter",
    "ReviewRepository",
    "ConversationRepository",
]
