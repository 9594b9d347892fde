"""
Review DTOs for the application layer.
"""

from typing import Optional
from pydantic import Field, validator

from .base_dto import RequestDTO, ResponseDTO
from .profile_dto import ProfileSummaryResponseDTO
from app.domain.models.review import Review
from app.infrastructure.validation.validators import SecurityValidator


class SubmitReviewRequestDTO(RequestDTO):
    """DTO for rating a post. Submitting again replaces the previous review."""
    
    post_id: Optional[str] = Field(default=None, description="Set from the URL path")
    rating: int = Field(ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(default=None, max_length=1000, description="Optional comment")
    
    @validator('comment')
    def validate_comment(cls, v):
        if v is not None:
            return SecurityValidator.sanitize_html(v.strip()) or None
        return v


class ReviewResponseDTO(ResponseDTO):
    """DTO for a review with its author card."""
    
    post_id: str = Field(description="Reviewed post")
    user_id: str = Field(description="Reviewer ID")
    rating: int = Field(description="Rating from 1 to 5")
    comment: Optional[str] = Field(default=None, description="Comment")
    reviewer: Optional[ProfileSummaryResponseDTO] = Field(default=None, description="Reviewer card")
    
    @classmethod
    def from_domain(
        cls,
        review: Review,
        reviewer: Optional[ProfileSummaryResponseDTO] = None
    ) -> "ReviewResponseDTO":
        return cls(
            id=review.id,
            post_id=review.post_id,
            user_id=review.user_id,
            rating=review.rating,
            comment=review.comment,
            reviewer=reviewer,
            created_at=review.created_at,
            updated_at=review.updated_at
        )
