"""
Review domain model.
"""

from dataclasses import dataclass
from typing import Optional

from app.domain.events.marketplace_events import ReviewSubmitted
from .base import BaseEntity, ValidationError, new_id


MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 1000


@dataclass(kw_only=True, eq=False)
class Review(BaseEntity):
    """A buyer's rating of a post. One review per buyer and post."""
    
    post_id: str
    user_id: str
    rating: int
    comment: Optional[str] = None
    
    def __post_init__(self):
        super().__post_init__()
        self.validate()
    
    @classmethod
    def create(cls, post_id: str, user_id: str, rating: int, comment: Optional[str] = None) -> "Review":
        review = cls(id=new_id(), post_id=post_id, user_id=user_id, rating=rating, comment=comment or None)
        review.add_event(ReviewSubmitted(
            review_id=review.id, post_id=post_id, user_id=user_id, rating=rating
        ))
        return review
    
    def validate(self) -> None:
        if not self.post_id:
            raise ValidationError("Post is required", "post_id")
        if not self.user_id:
            raise ValidationError("Reviewer is required", "user_id")
        if not isinstance(self.rating, int) or not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}", "rating")
        if self.comment and len(self.comment) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment too long (max {MAX_COMMENT_LENGTH} characters)", "comment")
    
    def revise(self, rating: int, comment: Optional[str] = None) -> None:
        """Replace rating and comment of an existing review."""
        self.rating = rating
        self.comment = comment or None
        self.validate()
        self.mark_as_updated()
        self.add_event(ReviewSubmitted(
            review_id=self.id, post_id=self.post_id, user_id=self.user_id,
            rating=rating, updated=True
        ))
