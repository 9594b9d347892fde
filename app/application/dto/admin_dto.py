"""
Admin DTOs for the application layer.
"""

from typing import Optional, List
from pydantic import Field

from .base_dto import BaseDTO, RequestDTO
from .profile_dto import ProfileResponseDTO
from app.domain.models.profile import Profile


class ListUsersRequestDTO(RequestDTO):
    """DTO for the admin user list."""
    
    role: Optional[str] = Field(default=None, pattern="^(admin|buyer|freelancer)$", description="Role filter")


class SetAccountStatusRequestDTO(RequestDTO):
    """DTO for suspending or reactivating an account."""
    
    user_id: Optional[str] = Field(default=None, description="Set from the URL path")
    status: str = Field(pattern="^(active|suspended)$", description="active or suspended")


class AdminUserResponseDTO(ProfileResponseDTO):
    """Profile with the auth email, for admins."""
    
    email: Optional[str] = Field(default=None, description="Auth email, when the service key is configured")
    
    @classmethod
    def from_profile(cls, profile: Profile, email: Optional[str] = None) -> "AdminUserResponseDTO":
        data = ProfileResponseDTO.from_domain(profile).model_dump()
        return cls(**data, email=email)


class DatabaseCheckResponseDTO(BaseDTO):
    """Result of the required-tables check."""
    
    connected: bool = Field(description="Whether the database answered")
    healthy: bool = Field(description="Connected and no table missing")
    present: List[str] = Field(default_factory=list, description="Required tables found")
    missing: List[str] = Field(default_factory=list, description="Required tables missing")
    error: Optional[str] = Field(default=None, description="Connection error, if any")
