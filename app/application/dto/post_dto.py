"""
Service post DTOs for the application layer.
Data Transfer Objects for post-related operations.
"""

from typing import Optional, List, Dict
from datetime import datetime
from pydantic import Field, validator

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, CreateRequestDTO, UpdateRequestDTO, UploadRequestDTO
from app.domain.models.post import ServicePost, PostSection, PackageInfo, PackageTier, SectionType
from app.domain.services.marketplace_ranking import RatedPost
from app.infrastructure.validation.validators import SecurityValidator, BusinessValidator


EXCERPT_LENGTH = 160


# Nested DTOs
class PostSectionDTO(BaseDTO):
    """A markdown or image block of a post."""
    
    id: Optional[str] = Field(default=None, description="Section ID; generated when missing")
    type: SectionType = Field(description="markdown or image")
    content: str = Field(default="", max_length=20000, description="Markdown text or image URL")
    
    @validator('content')
    def validate_content(cls, v, values):
        if values.get('type') == SectionType.IMAGE.value:
            return SecurityValidator.check_xss(v.strip())
        return SecurityValidator.sanitize_markdown(v)
    
    def to_domain(self) -> PostSection:
        if self.id:
            return PostSection(id=self.id, type=self.type, content=self.content)
        return PostSection(type=self.type, content=self.content)
    
    @classmethod
    def from_domain(cls, section: PostSection) -> "PostSectionDTO":
        return cls(id=section.id, type=section.type.value, content=section.content)


class PackageDTO(BaseDTO):
    """Details of one pricing tier."""
    
    title: str = Field(default="", max_length=100, description="Package name")
    description: str = Field(default="", max_length=1000, description="What the package includes")
    price: float = Field(ge=0, description="Package price")
    delivery_days: int = Field(default=1, ge=1, le=365, description="Delivery time in days")
    
    @validator('title', 'description')
    def validate_text(cls, v):
        return SecurityValidator.sanitize_html(v.strip())
    
    def to_domain(self) -> PackageInfo:
        return PackageInfo(
            title=self.title,
            description=self.description,
            price=self.price,
            delivery_days=self.delivery_days
        )


def _validate_package_tiers(packages):
    if packages is None:
        return packages
    allowed = {tier.value for tier in PackageTier}
    unknown = [key for key in packages if key not in allowed]
    if unknown:
        raise ValueError(f"Unknown package tier '{unknown[0]}'. Use basic, gold or platinum")
    return packages


# Request DTOs
class CreatePostRequestDTO(CreateRequestDTO):
    """DTO for post creation requests."""
    
    title: str = Field(default="", max_length=120, description="Post title (required to publish)")
    content: str = Field(default="", max_length=20000, description="Markdown description (required to publish)")
    price: Optional[float] = Field(default=None, ge=0, le=1_000_000, description="Base price")
    category: Optional[str] = Field(default=None, description="Marketplace category")
    cover_image_url: Optional[str] = Field(default=None, max_length=1000, description="Cover image URL")
    image_url: Optional[str] = Field(default=None, max_length=1000, description="Main image URL")
    sections: List[PostSectionDTO] = Field(default_factory=list, max_length=30, description="Ordered sections")
    packages: Dict[str, PackageDTO] = Field(default_factory=dict, description="Pricing packages by tier")
    publish: bool = Field(default=False, description="Publish right away instead of saving a draft")
    
    @validator('title')
    def validate_title(cls, v):
        return BusinessValidator.validate_post_title(v)
    
    @validator('content')
    def validate_content(cls, v):
        return SecurityValidator.sanitize_markdown(v)
    
    @validator('category')
    def validate_category(cls, v):
        if v:
            return BusinessValidator.validate_category(v)
        return None
    
    @validator('cover_image_url', 'image_url')
    def validate_urls(cls, v):
        if v:
            return SecurityValidator.check_xss(v.strip())
        return v
    
    @validator('packages')
    def validate_packages(cls, v):
        return _validate_package_tiers(v)


class UpdatePostRequestDTO(UpdateRequestDTO):
    """DTO for post update requests. Omitted fields stay unchanged."""
    
    post_id: Optional[str] = Field(default=None, description="Set from the URL path")
    title: Optional[str] = Field(default=None, max_length=120, description="Post title")
    content: Optional[str] = Field(default=None, max_length=20000, description="Markdown description")
    price: Optional[float] = Field(default=None, ge=0, le=1_000_000, description="Base price")
    category: Optional[str] = Field(default=None, description="Marketplace category")
    cover_image_url: Optional[str] = Field(default=None, max_length=1000, description="Cover image URL")
    image_url: Optional[str] = Field(default=None, max_length=1000, description="Main image URL")
    sections: Optional[List[PostSectionDTO]] = Field(default=None, max_length=30, description="Replaces all sections")
    packages: Optional[Dict[str, PackageDTO]] = Field(default=None, description="Replaces all packages")
    
    @validator('title')
    def validate_title(cls, v):
        if v is not None:
            return BusinessValidator.validate_post_title(v)
        return v
    
    @validator('content')
    def validate_content(cls, v):
        if v is not None:
            return SecurityValidator.sanitize_markdown(v)
        return v
    
    @validator('category')
    def validate_category(cls, v):
        if v:
            return BusinessValidator.validate_category(v)
        return v
    
    @validator('cover_image_url', 'image_url')
    def validate_urls(cls, v):
        if v:
            return SecurityValidator.check_xss(v.strip())
        return v
    
    @validator('packages')
    def validate_packages(cls, v):
        return _validate_package_tiers(v)


class ListMyPostsRequestDTO(RequestDTO):
    """DTO for listing the current user's posts."""
    
    status: Optional[str] = Field(default=None, pattern="^(draft|published|archived)$", description="Status filter")


class ReorderSectionsRequestDTO(RequestDTO):
    """DTO for reordering the sections of a post."""
    
    post_id: Optional[str] = Field(default=None, description="Set from the URL path")
    section_ids: List[str] = Field(description="Every section ID in the new order")


class UploadPostImageRequestDTO(UploadRequestDTO):
    """DTO for post image uploads."""
    
    post_id: str = Field(description="Post receiving the image")
    kind: str = Field(default="cover", pattern="^(cover|image)$", description="cover or image")


# Response DTOs
class PostResponseDTO(ResponseDTO):
    """DTO for a complete post."""
    
    user_id: str = Field(description="Owner ID")
    title: str = Field(description="Post title")
    content: str = Field(description="Markdown description")
    price: Optional[float] = Field(default=None, description="Base price")
    starting_price: Optional[float] = Field(default=None, description="Lowest price among base price and packages")
    category: Optional[str] = Field(default=None, description="Marketplace category")
    cover_image_url: Optional[str] = Field(default=None, description="Cover image URL")
    image_url: Optional[str] = Field(default=None, description="Main image URL")
    status: str = Field(description="draft, published or archived")
    sections: List[PostSectionDTO] = Field(default_factory=list, description="Ordered sections")
    packages: Dict[str, PackageDTO] = Field(default_factory=dict, description="Pricing packages by tier")
    
    @classmethod
    def from_domain(cls, post: ServicePost) -> "PostResponseDTO":
        return cls(
            id=post.id,
            user_id=post.user_id,
            title=post.title,
            content=post.content,
            price=post.price,
            starting_price=post.starting_price,
            category=post.category,
            cover_image_url=post.cover_image_url,
            image_url=post.image_url,
            status=post.status.value,
            sections=[PostSectionDTO.from_domain(section) for section in post.sections],
            packages={
                tier.value: PackageDTO(**info.to_dict())
                for tier, info in post.packages.items()
            },
            created_at=post.created_at,
            updated_at=post.updated_at
        )


class PostSummaryResponseDTO(BaseDTO):
    """DTO for a post card in listings."""
    
    id: str = Field(description="Post ID")
    user_id: str = Field(description="Owner ID")
    title: str = Field(description="Post title")
    excerpt: str = Field(default="", description="Start of the description")
    price: Optional[float] = Field(default=None, description="Base price")
    starting_price: Optional[float] = Field(default=None, description="Lowest available price")
    category: Optional[str] = Field(default=None, description="Marketplace category")
    cover_image_url: Optional[str] = Field(default=None, description="Cover image URL")
    status: str = Field(description="draft, published or archived")
    average_rating: float = Field(default=0.0, description="Average review rating, 0 when unreviewed")
    review_count: int = Field(default=0, description="Number of reviews")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    @classmethod
    def from_domain(cls, post: ServicePost, average_rating: float = 0.0, review_count: int = 0) -> "PostSummaryResponseDTO":
        content = post.content.strip()
        excerpt = content if len(content) <= EXCERPT_LENGTH else content[:EXCERPT_LENGTH].rstrip() + "..."
        return cls(
            id=post.id,
            user_id=post.user_id,
            title=post.title,
            excerpt=excerpt,
            price=post.price,
            starting_price=post.starting_price,
            category=post.category,
            cover_image_url=post.cover_image_url or post.image_url,
            status=post.status.value,
            average_rating=average_rating,
            review_count=review_count,
            created_at=post.created_at,
            updated_at=post.updated_at
        )
    
    @classmethod
    def from_rated(cls, item: RatedPost) -> "PostSummaryResponseDTO":
        return cls.from_domain(item.post, item.average_rating, item.review_count)
