"""
Review repository interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from app.domain.models.review import Review


class ReviewRepository(ABC):
    """Repository interface for reviews."""
    
    @abstractmethod
    def save(self, review: Review) -> Review:
        pass
    
    @abstractmethod
    def find_by_id(self, review_id: str) -> Optional[Review]:
        pass
    
    @abstractmethod
    def find_by_post_and_user(self, post_id: str, user_id: str) -> Optional[Review]:
        pass
    
    @abstractmethod
    def list_for_post(self, post_id: str) -> List[Review]:
        """Reviews of a post, newest first."""
        pass
    
    @abstractmethod
    def rating_stats(self, post_ids: List[str]) -> Dict[str, Tuple[float, int]]:
        """Map post id to (average rating, review count) for reviewed posts."""
        pass
    
    @abstractmethod
    def delete(self, review_id: str) -> bool:
        pass
    
    @abstractmethod
    def delete_by_user(self, user_id: str) -> int:
        """Delete the reviews written by a user; returns how many were removed."""
        pass
