"""
Service post repository interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from app.domain.models.post import ServicePost, PostStatus


@dataclass
class MarketplaceFilter:
    """Criteria for browsing published posts."""
    category: Optional[str] = None
    search: Optional[str] = None
    user_id: Optional[str] = None


class PostRepository(ABC):
    """Repository interface for the ServicePost aggregate."""
    
    @abstractmethod
    def save(self, post: ServicePost) -> ServicePost:
        pass
    
    @abstractmethod
    def find_by_id(self, post_id: str) -> Optional[ServicePost]:
        pass
    
    @abstractmethod
    def list_by_owner(self, user_id: str, status: Optional[PostStatus] = None) -> List[ServicePost]:
        """Posts of an owner, most recently updated first."""
        pass
    
    @abstractmethod
    def list_published(self, criteria: MarketplaceFilter) -> List[ServicePost]:
        """Published posts matching the criteria, newest first."""
        pass
    
    @abstractmethod
    def delete(self, post_id: str) -> bool:
        """Delete a post with its reviews and conversations."""
        pass
    
    @abstractmethod
    def delete_by_owner(self, user_id: str) -> int:
        """Delete every post of an owner; returns how many were removed."""
        pass
