"""
Service post repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from app.domain.models.post import ServicePost, PostStatus
from app.domain.repositories.post_repository import (
    PostRepository as PostRepositoryInterface, MarketplaceFilter
)
from app.infrastructure.db.models import FreelancerPostModel
from app.infrastructure.mappers.post_mapper import PostMapper


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyPostRepository(PostRepositoryInterface):
    """SQLAlchemy implementation of post repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = PostMapper()
        self.model = FreelancerPostModel
    
    def get_base_query(self) -> Query:
        return self.session.query(FreelancerPostModel)
    
    def save(self, post: ServicePost) -> ServicePost:
        model = self.session.get(FreelancerPostModel, post.id)
        if model is None:
            self.session.add(self.mapper.domain_to_model(post))
        else:
            self.mapper.update_model(model, post)
        self.session.flush()
        return post
    
    def find_by_id(self, post_id: str) -> Optional[ServicePost]:
        model = self.session.get(FreelancerPostModel, post_id)
        return self.mapper.model_to_domain(model) if model else None
    
    def list_by_owner(self, user_id: str, status: Optional[PostStatus] = None) -> List[ServicePost]:
        """Posts of an owner, most recently updated first."""
        query = self.get_base_query().filter(FreelancerPostModel.user_id == user_id)
        if status is not None:
            query = query.filter(FreelancerPostModel.status == PostStatus(status).value)
        models = query.order_by(FreelancerPostModel.updated_at.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def published_query(self, criteria: MarketplaceFilter) -> Query:
        """Query of published posts matching the criteria."""
        query = self.get_base_query().filter(
            FreelancerPostModel.status == PostStatus.PUBLISHED.value
        )
        if criteria.category:
            query = query.filter(FreelancerPostModel.category == criteria.category)
        if criteria.user_id:
            query = query.filter(FreelancerPostModel.user_id == criteria.user_id)
        if criteria.search and criteria.search.strip():
            pattern = f"%{escape_like(criteria.search.strip())}%"
            query = query.filter(or_(
                FreelancerPostModel.title.ilike(pattern, escape="\\"),
                FreelancerPostModel.content.ilike(pattern, escape="\\")
            ))
        return query.order_by(FreelancerPostModel.created_at.desc())
    
    def list_published(self, criteria: MarketplaceFilter) -> List[ServicePost]:
        """Published posts matching the criteria, newest first."""
        return [self.mapper.model_to_domain(model) for model in self.published_query(criteria).all()]
    
    def delete(self, post_id: str) -> bool:
        """Delete a post; reviews and conversations cascade."""
        model = self.session.get(FreelancerPostModel, post_id)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True
    
    def delete_by_owner(self, user_id: str) -> int:
        models = self.get_base_query().filter(FreelancerPostModel.user_id == user_id).all()
        for model in models:
            self.session.delete(model)
        self.session.flush()
        return len(models)
