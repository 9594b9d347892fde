"""
Review repository implementation using SQLAlchemy.
"""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.models.review import Review
from app.domain.models.base import DuplicateEntityError
from app.domain.repositories.review_repository import ReviewRepository as ReviewRepositoryInterface
from app.infrastructure.db.models import FreelancerPostReviewModel
from app.infrastructure.mappers.review_mapper import ReviewMapper


class SQLAlchemyReviewRepository(ReviewRepositoryInterface):
    """SQLAlchemy implementation of review repository."""
    
    def __init__(self, session: Session):
        self.session = session
        self.mapper = ReviewMapper()
        self.model = FreelancerPostReviewModel
    
    def save(self, review: Review) -> Review:
        try:
            with self.session.begin_nested():
                model = self.session.get(FreelancerPostReviewModel, review.id)
                if model is None:
                    self.session.add(self.mapper.domain_to_model(review))
                else:
                    self.mapper.update_model(model, review)
        except IntegrityError:
            raise DuplicateEntityError("Review", "post_id", review.post_id)
        return review
    
    def find_by_id(self, review_id: str) -> Optional[Review]:
        model = self.session.get(FreelancerPostReviewModel, review_id)
        return self.mapper.model_to_domain(model) if model else None
    
    def find_by_post_and_user(self, post_id: str, user_id: str) -> Optional[Review]:
        model = self.session.query(FreelancerPostReviewModel).filter_by(
            post_id=post_id,
            user_id=user_id
        ).first()
        return self.mapper.model_to_domain(model) if model else None
    
    def list_for_post(self, post_id: str) -> List[Review]:
        models = self.session.query(FreelancerPostReviewModel).filter_by(
            post_id=post_id
        ).order_by(FreelancerPostReviewModel.created_at.desc()).all()
        return [self.mapper.model_to_domain(model) for model in models]
    
    def rating_stats(self, post_ids: List[str]) -> Dict[str, Tuple[float, int]]:
        """Map post id to (average rating, review count) for reviewed posts."""
        if not post_ids:
            return {}
        rows = self.session.query(
            FreelancerPostReviewModel.post_id,
            func.avg(FreelancerPostReviewModel.rating),
            func.count(FreelancerPostReviewModel.id)
        ).filter(
            FreelancerPostReviewModel.post_id.in_(set(post_ids))
        ).group_by(FreelancerPostReviewModel.post_id).all()
        return {post_id: (float(average), int(count)) for post_id, average, count in rows}
    
    def delete(self, review_id: str) -> bool:
        model = self.session.get(FreelancerPostReviewModel, review_id)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True
    
    def delete_by_user(self, user_id: str) -> int:
        deleted = self.session.query(FreelancerPostReviewModel).filter_by(
            user_id=user_id
        ).delete(synchronize_session="fetch")
        self.session.flush()
        return deleted
