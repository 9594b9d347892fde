"""
Profile DTOs for the application layer.
Data Transfer Objects for profile-related operations.
"""

from typing import Optional, List
from pydantic import Field, validator

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, UpdateRequestDTO
from .post_dto import PostSummaryResponseDTO
from app.domain.models.profile import Profile
from app.infrastructure.validation.validators import (
    SecurityValidator, DataValidator, BusinessValidator
)


# Request DTOs
class ProfileClaimsDTO(RequestDTO):
    """Identity claims used to create a profile on first access."""
    
    user_id: str = Field(min_length=1, description="Auth user ID (token subject)")
    email: Optional[str] = Field(default=None, description="Email from the token")
    role: Optional[str] = Field(default=None, description="Role chosen at signup")
    username: Optional[str] = Field(default=None, description="Username chosen at signup")
    display_name: Optional[str] = Field(default=None, description="Name chosen at signup")


class UpdateProfileRequestDTO(UpdateRequestDTO):
    """DTO for profile update requests. Empty strings clear display name and bio."""
    
    username: Optional[str] = Field(default=None, description="3-30 letters, digits or underscores")
    display_name: Optional[str] = Field(default=None, max_length=50, description="Public display name")
    bio: Optional[str] = Field(default=None, max_length=160, description="Short bio")
    
    @validator('username', pre=True)
    def validate_username(cls, v):
        if v is not None:
            return DataValidator.validate_username(v)
        return v
    
    @validator('display_name', pre=True)
    def validate_display_name(cls, v):
        if v is not None:
            return BusinessValidator.validate_display_name(v)
        return v
    
    @validator('bio', pre=True)
    def validate_bio(cls, v):
        if v is not None:
            v = SecurityValidator.sanitize_html(v.strip())
            SecurityValidator.check_xss(v)
        return v


# Response DTOs
class ProfileResponseDTO(ResponseDTO):
    """DTO for a user's own profile."""
    
    user_id: str = Field(description="Auth user ID")
    username: Optional[str] = Field(default=None, description="Username")
    display_name: Optional[str] = Field(default=None, description="Display name")
    avatar_url: Optional[str] = Field(default=None, description="Avatar URL")
    bio: Optional[str] = Field(default=None, description="Short bio")
    role: str = Field(description="admin, buyer or freelancer")
    account_status: str = Field(description="active, pending_approval, rejected or suspended")
    
    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileResponseDTO":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            bio=profile.bio,
            role=profile.role.value,
            account_status=profile.account_status.value,
            created_at=profile.created_at,
            updated_at=profile.updated_at
        )


class ProfileSummaryResponseDTO(BaseDTO):
    """Public card of a user shown next to posts, reviews and conversations."""
    
    user_id: str = Field(description="Auth user ID")
    username: Optional[str] = Field(default=None, description="Username")
    display_name: str = Field(description="Name shown to other users")
    avatar_url: Optional[str] = Field(default=None, description="Avatar URL")
    
    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileSummaryResponseDTO":
        return cls(
            user_id=profile.user_id,
            username=profile.username,
            display_name=profile.public_name,
            avatar_url=profile.avatar_url
        )
    
    @classmethod
    def unknown(cls, user_id: str) -> "ProfileSummaryResponseDTO":
        """Placeholder for users whose profile no longer exists."""
        return cls(user_id=user_id, display_name="Deleted user")


class PublicProfileResponseDTO(BaseDTO):
    """Public freelancer page: profile, published posts and rating."""
    
    profile: ProfileSummaryResponseDTO = Field(description="Public profile card")
    bio: Optional[str] = Field(default=None, description="Short bio")
    role: str = Field(description="User role")
    posts: List[PostSummaryResponseDTO] = Field(default_factory=list, description="Published posts")
    average_rating: float = Field(default=0.0, description="Review-weighted rating across posts")
    review_count: int = Field(default=0, description="Reviews across posts")
