"""
Service post domain model.
A post is a freelancer's service offer shown in the marketplace.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from app.domain.events.marketplace_events import PostPublished
from .base import AggregateRoot, ValidationError, BusinessRuleViolation, new_id


class PostStatus(str, Enum):
    """Post visibility status."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class SectionType(str, Enum):
    """Kinds of content blocks in a post body."""
    MARKDOWN = "markdown"
    IMAGE = "image"


class PackageTier(str, Enum):
    """Pricing tiers offered by a post."""
    BASIC = "basic"
    GOLD = "gold"
    PLATINUM = "platinum"


MAX_TITLE_LENGTH = 120
MAX_CONTENT_LENGTH = 20000
MAX_SECTIONS = 30
MAX_PRICE = 1_000_000


@dataclass
class PostSection:
    """A markdown or image block of a post."""
    
    type: SectionType
    content: str = ""
    id: str = field(default_factory=new_id)
    
    def __post_init__(self):
        if isinstance(self.type, str):
            self.type = SectionType(self.type)
    
    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "content": self.content}


@dataclass
class PackageInfo:
    """Details of one pricing tier."""
    
    title: str = ""
    description: str = ""
    price: float = 0
    delivery_days: int = 1
    
    def validate(self, tier: str) -> None:
        if self.price < 0 or self.price > MAX_PRICE:
            raise ValidationError(f"Invalid price for the {tier} package", "packages")
        if self.delivery_days < 1:
            raise ValidationError(f"Delivery time for the {tier} package must be at least 1 day", "packages")
        if len(self.title) > 100:
            raise ValidationError(f"Title of the {tier} package is too long", "packages")
        if len(self.description) > 1000:
            raise ValidationError(f"Description of the {tier} package is too long", "packages")
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "delivery_days": self.delivery_days
        }


@dataclass(kw_only=True, eq=False)
class ServicePost(AggregateRoot):
    """
    Service post aggregate root.
    Drafts may be incomplete; publishing enforces the full content rules.
    """
    
    user_id: str
    title: str = ""
    content: str = ""
    price: Optional[float] = None
    category: Optional[str] = None
    cover_image_url: Optional[str] = None
    image_url: Optional[str] = None
    status: PostStatus = PostStatus.DRAFT
    sections: List[PostSection] = field(default_factory=list)
    packages: Dict[PackageTier, PackageInfo] = field(default_factory=dict)
    
    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.status, str):
            self.status = PostStatus(self.status)
        self.packages = {PackageTier(tier): info for tier, info in self.packages.items()}
        self.validate()
    
    @classmethod
    def create(cls, user_id: str, title: str, **attrs: Any) -> "ServicePost":
        """Create a draft post."""
        return cls(id=new_id(), user_id=user_id, title=(title or "").strip(), **attrs)
    
    def validate(self) -> None:
        """Validate the invariants that hold for drafts too."""
        if not self.user_id:
            raise ValidationError("Owner is required", "user_id")
        if len(self.title) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title too long (max {MAX_TITLE_LENGTH} characters)", "title")
        if len(self.content) > MAX_CONTENT_LENGTH:
            raise ValidationError(f"Content too long (max {MAX_CONTENT_LENGTH} characters)", "content")
        if self.price is not None and (self.price < 0 or self.price > MAX_PRICE):
            raise ValidationError("Price must be a valid non-negative amount", "price")
        if len(self.sections) > MAX_SECTIONS:
            raise ValidationError(f"Too many sections (max {MAX_SECTIONS})", "sections")
        for tier, info in self.packages.items():
            info.validate(tier.value)
        if self.status == PostStatus.PUBLISHED:
            self._validate_publishable()
    
    def _validate_publishable(self) -> None:
        if not self.title.strip():
            raise ValidationError("Title is required to publish", "title")
        if not self.content.strip():
            raise ValidationError("Content is required to publish", "content")
        if self.price is None:
            raise ValidationError("A valid price is required to publish", "price")
    
    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED
    
    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
    
    def update_content(self, **changes: Any) -> None:
        """Update editable fields; keys with None values are ignored."""
        editable = {"title", "content", "price", "category", "cover_image_url", "image_url"}
        for key, value in changes.items():
            if key not in editable:
                raise ValidationError(f"Field '{key}' cannot be edited", key)
            if value is None:
                continue
            setattr(self, key, value.strip() if key == "title" else value)
        self.validate()
        self.increment_version()
    
    def set_sections(self, sections: List[PostSection]) -> None:
        self.sections = list(sections)
        self.validate()
        self.increment_version()
    
    def reorder_sections(self, section_ids: List[str]) -> None:
        """Reorder sections; the new order must contain every section exactly once."""
        current = {section.id: section for section in self.sections}
        if len(section_ids) != len(current) or set(section_ids) != set(current):
            raise ValidationError("Section order must list every section exactly once", "sections")
        self.sections = [current[section_id] for section_id in section_ids]
        self.increment_version()
    
    def set_packages(self, packages: Dict[PackageTier, PackageInfo]) -> None:
        self.packages = {PackageTier(tier): info for tier, info in packages.items()}
        self.validate()
        self.increment_version()
    
    def publish(self, allowed_categories: Optional[List[str]] = None) -> None:
        """Make the post visible in the marketplace."""
        if self.category and allowed_categories is not None and self.category not in allowed_categories:
            raise ValidationError(f"Unknown category: {self.category}", "category")
        self._validate_publishable()
        was_published = self.is_published
        self.status = PostStatus.PUBLISHED
        self.increment_version()
        if not was_published:
            self.add_event(PostPublished(post_id=self.id, user_id=self.user_id, title=self.title))
    
    def unpublish(self) -> None:
        """Move the post back to draft."""
        if self.status == PostStatus.DRAFT:
            raise BusinessRuleViolation("Post is already a draft")
        self.status = PostStatus.DRAFT
        self.increment_version()
    
    def archive(self) -> None:
        if self.status == PostStatus.ARCHIVED:
            raise BusinessRuleViolation("Post is already archived")
        self.status = PostStatus.ARCHIVED
        self.increment_version()
    
    @property
    def starting_price(self) -> Optional[float]:
        """Lowest price among the base price and the packages."""
        prices = [info.price for info in self.packages.values()]
        if self.price is not None:
            prices.append(self.price)
        return min(prices) if prices else None
