"""
Marketplace browsing DTOs for the application layer.
"""

from typing import Optional, List
from pydantic import Field, validator

from .base_dto import BaseDTO, ListRequestDTO, ListResponseDTO
from .post_dto import PostResponseDTO, PostSummaryResponseDTO
from .profile_dto import ProfileSummaryResponseDTO
from .review_dto import ReviewResponseDTO
from app.infrastructure.validation.validators import SecurityValidator


class BrowsePostsRequestDTO(ListRequestDTO):
    """DTO for browsing published posts."""
    
    category: Optional[str] = Field(default=None, description="Category filter")
    sort: str = Field(default="recommended", description="recommended, newest, price-low, price-high or rating")
    
    @validator('search')
    def validate_search(cls, v):
        if v is not None:
            v = SecurityValidator.sanitize_html(v.strip())
            return v or None
        return v
    
    @validator('category')
    def validate_category(cls, v):
        # "All" in the category picker means no filter
        if v is None or not v.strip() or v.strip().lower() == "all":
            return None
        return v.strip()


class BrowsePostsResponseDTO(ListResponseDTO[PostSummaryResponseDTO]):
    """A page of marketplace posts."""
    
    sort: str = Field(default="recommended", description="Applied sort order")
    category: Optional[str] = Field(default=None, description="Applied category filter")


class PostDetailsResponseDTO(BaseDTO):
    """DTO for the post detail page."""
    
    post: PostResponseDTO = Field(description="The post")
    freelancer: ProfileSummaryResponseDTO = Field(description="Post owner card")
    reviews: List[ReviewResponseDTO] = Field(default_factory=list, description="Reviews, newest first")
    average_rating: float = Field(default=0.0, description="Average rating, 0 when unreviewed")
    review_count: int = Field(default=0, description="Number of reviews")
    is_owner: bool = Field(default=False, description="Whether the caller owns the post")
    my_review_id: Optional[str] = Field(default=None, description="The caller's review, if any")


class CategoriesResponseDTO(BaseDTO):
    """Available marketplace categories."""
    
    categories: List[str] = Field(description="Category names")


class TrendingFreelancerResponseDTO(BaseDTO):
    """A freelancer ranked by the ratings of their published posts."""
    
    freelancer: ProfileSummaryResponseDTO = Field(description="Freelancer card")
    average_rating: float = Field(description="Review-weighted average rating")
    review_count: int = Field(description="Reviews across published posts")
    post_count: int = Field(description="Published posts")
