"""
Domain models for the freelance marketplace.
This module exports all domain entities and shared exceptions.
"""

from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    PermissionDeniedError,
    EntityNotFoundError,
    DuplicateEntityError,
    new_id
)
from .profile import Profile, UserRole, AccountStatus
from .application import (
    ApplicationQuestion, ApplicationAnswer, FreelancerApplication,
    ApplicationStatus, QuestionType
)
from .post import ServicePost, PostStatus, PostSection, SectionType, PackageTier, PackageInfo
from .review import Review
from .conversation import Conversation, Message

__all__ = [
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "PermissionDeniedError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "new_id",
    "Profile",
    "UserRole",
    "AccountStatus",
    "ApplicationQuestion",
    "ApplicationAnswer",
    "FreelancerApplication",
    "ApplicationStatus",
    "QuestionType",
    "ServicePost",
    "PostStatus",
    "PostSection",
    "SectionType",
    "PackageTier",
    "PackageInfo",
    "Review",
    "Conversation",
    "Message",
]
