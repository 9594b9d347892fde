"""
Profile repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.models.profile import Profile, UserRole


class ProfileRepository(ABC):
    """Repository interface for the Profile aggregate."""
    
    @abstractmethod
    def save(self, profile: Profile) -> Profile:
        """Insert or update a profile."""
        pass
    
    @abstractmethod
    def find_by_user_id(self, user_id: str) -> Optional[Profile]:
        """Find the profile of an auth user."""
        pass
    
    @abstractmethod
    def find_by_username(self, username: str) -> Optional[Profile]:
        """Find a profile by username (case insensitive)."""
        pass
    
    @abstractmethod
    def find_many(self, user_ids: List[str]) -> List[Profile]:
        """Find the profiles of several users."""
        pass
    
    @abstractmethod
    def list_profiles(self, role: Optional[UserRole] = None) -> List[Profile]:
        """List profiles, optionally restricted to one role, newest first."""
        pass
    
    @abstractmethod
    def delete_by_user_id(self, user_id: str) -> bool:
        """Delete the profile of a user."""
        pass
