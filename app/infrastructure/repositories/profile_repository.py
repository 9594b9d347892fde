"""
Profile repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.models.profile import Profile, UserRole
from app.domain.models.base import DuplicateEntityError
from app.domain.repositories.profile_repository import ProfileRepository as ProfileRepositoryInterface
from app.infrastructure.db.models import ProfileModel
from app.infrastructure.mappers.profile_mapper import ProfileMapper


class SQLAlchemyProfileRepository(ProfileRepositoryInterface):
    """SQLAlchemy implementation of profile repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = ProfileMapper()
        self.model = ProfileModel
    
    def save(self, profile: Profile) -> Profile:
        """Insert or update a profile."""
        if profile.username:
            clash = self.session.query(ProfileModel).filter(
                func.lower(ProfileModel.username) == profile.username.lower(),
                ProfileModel.user_id != profile.user_id
            ).first()
            if clash:
                raise DuplicateEntityError("Profile", "username", profile.username)
        
        try:
            # a failed write only undoes its own savepoint
            with self.session.begin_nested():
                model = self.session.get(ProfileModel, profile.id)
                if model is None:
                    self.session.add(self.mapper.domain_to_model(profile))
                else:
                    self.mapper.update_model(model, profile)
        except IntegrityError:
            raise DuplicateEntityError("Profile", "user_id", profile.user_id)
        return profile
    
    def find_by_user_id(self, user_id: str) -> Optional[Profile]:
        """Find the profile of an auth user."""
        model = self.session.query(ProfileModel).filter_by(user_id=user_id).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def find_by_username(self, username: str) -> Optional[Profile]:
        """Find a profile by username (case insensitive)."""
        model = self.session.query(ProfileModel).filter(
            func.lower(ProfileModel.username) == username.lower()
        ).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def find_many(self, user_ids: List[str]) -> List[Profile]:
        """Find the profiles of several users."""
        if not user_ids:
            return []
        models = self.session.query(ProfileModel).filter(
            ProfileModel.user_id.in_(set(user_ids))
        ).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def list_profiles(self, role: Optional[UserRole] = None) -> List[Profile]:
        """List profiles, optionally restricted to one role, newest first."""
        query = self.session.query(ProfileModel)
        if role is not None:
            query = query.filter(ProfileModel.role == UserRole(role).value)
        models = query.order_by(ProfileModel.created_at.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def delete_by_user_id(self, user_id: str) -> bool:
        """Delete the profile of a user."""
        model = self.session.query(ProfileModel).filter_by(user_id=user_id).first()
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True
