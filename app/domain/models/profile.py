"""
Profile domain model.
A profile holds the marketplace identity of an authenticated user.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.domain.events.marketplace_events import AccountStatusChanged
from .base import AggregateRoot, ValidationError, BusinessRuleViolation, new_id


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,30}$")


class UserRole(str, Enum):
    """Marketplace roles."""
    ADMIN = "admin"
    BUYER = "buyer"
    FREELANCER = "freelancer"


class AccountStatus(str, Enum):
    """Account lifecycle status."""
    ACTIVE = "active"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


@dataclass(kw_only=True, eq=False)
class Profile(AggregateRoot):
    """
    Profile aggregate root.
    One profile exists per auth user; `user_id` is the Supabase auth id.
    """
    
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    role: UserRole = UserRole.BUYER
    account_status: AccountStatus = AccountStatus.ACTIVE
    
    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.role, str):
            self.role = UserRole(self.role)
        if isinstance(self.account_status, str):
            self.account_status = AccountStatus(self.account_status)
        self.validate()
    
    @classmethod
    def create(
        cls,
        user_id: str,
        role: UserRole = UserRole.BUYER,
        username: Optional[str] = None,
        display_name: Optional[str] = None
    ) -> "Profile":
        """Create a profile for a freshly authenticated user."""
        if role == UserRole.ADMIN:
            raise BusinessRuleViolation("Admin role cannot be self-assigned")
        return cls(
            id=new_id(),
            user_id=user_id,
            role=role,
            username=username,
            display_name=display_name
        )
    
    def validate(self) -> None:
        """Validate profile state."""
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        
        if self.username is not None and not USERNAME_PATTERN.match(self.username):
            raise ValidationError(
                "Username must be 3-30 characters of letters, numbers or underscores",
                "username"
            )
        
        if self.display_name and not 2 <= len(self.display_name) <= 50:
            raise ValidationError("Display name must be between 2 and 50 characters", "display_name")
        
        if self.bio and len(self.bio) > 160:
            raise ValidationError("Bio must be 160 characters or fewer", "bio")
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
    
    @property
    def is_buyer(self) -> bool:
        return self.role == UserRole.BUYER
    
    @property
    def is_freelancer(self) -> bool:
        return self.role == UserRole.FREELANCER
    
    @property
    def is_suspended(self) -> bool:
        return self.account_status == AccountStatus.SUSPENDED
    
    @property
    def public_name(self) -> str:
        """Name shown to other users."""
        return self.display_name or self.username or "Anonymous"
    
    def update_details(
        self,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> None:
        """
        Update editable profile fields.
        An empty string clears display name and bio; None leaves them untouched.
        """
        if username is not None:
            self.username = username
        if display_name is not None:
            self.display_name = display_name or None
        if bio is not None:
            self.bio = bio or None
        if avatar_url is not None:
            self.avatar_url = avatar_url or None
        
        self.validate()
        self.increment_version()
    
    def change_status(self, status: AccountStatus, changed_by: Optional[str] = None) -> AccountStatus:
        """Change account status and return the previous one."""
        previous = self.account_status
        if previous == status:
            return previous
        self.account_status = status
        self.increment_version()
        self.add_event(AccountStatusChanged(
            user_id=self.user_id,
            previous_status=previous.value,
            new_status=status.value,
            changed_by=changed_by
        ))
        return previous
    
    def promote_to(self, role: UserRole) -> None:
        """Assign a new role."""
        self.role = role
        self.increment_version()
    
    def ensure_can_act(self) -> None:
        """Suspended accounts cannot create content or contact other users."""
        if self.is_suspended:
            raise BusinessRuleViolation("Your account is suspended")
