"""
Service post mapper.
Sections and packages are stored as JSON columns.
"""

from typing import Any, Dict, List

from app.domain.models.post import (
    ServicePost, PostStatus, PostSection, PackageTier, PackageInfo
)
from app.infrastructure.db.models import FreelancerPostModel


class PostMapper:
    """Maps between ServicePost domain entity and FreelancerPostModel."""
    
    def domain_to_model(self, post: ServicePost) -> FreelancerPostModel:
        model = FreelancerPostModel(id=post.id)
        self.update_model(model, post)
        return model
    
    def update_model(self, model: FreelancerPostModel, post: ServicePost) -> None:
        model.user_id = post.user_id
        model.title = post.title
        model.content = post.content
        model.price = post.price
        model.category = post.category
        model.cover_image_url = post.cover_image_url
        model.image_url = post.image_url
        model.status = post.status.value
        model.sections = [section.to_dict() for section in post.sections]
        model.packages = {tier.value: info.to_dict() for tier, info in post.packages.items()}
        model.version = post.version
        model.created_at = post.created_at
        model.updated_at = post.updated_at
    
    def model_to_domain(self, model: FreelancerPostModel) -> ServicePost:
        return ServicePost(
            id=model.id,
            user_id=model.user_id,
            title=model.title or "",
            content=model.content or "",
            price=float(model.price) if model.price is not None else None,
            category=model.category,
            cover_image_url=model.cover_image_url,
            image_url=model.image_url,
            status=PostStatus(model.status) if model.status else PostStatus.DRAFT,
            sections=self._parse_sections(model.sections),
            packages=self._parse_packages(model.packages),
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
    
    @staticmethod
    def _parse_sections(data: List[Dict[str, Any]]) -> List[PostSection]:
        sections = []
        for item in data or []:
            sections.append(PostSection(
                id=item.get("id"),
                type=item.get("type", "markdown"),
                content=item.get("content", "")
            ))
        return sections
    
    @staticmethod
    def _parse_packages(data: Dict[str, Dict[str, Any]]) -> Dict[PackageTier, PackageInfo]:
        packages = {}
        for tier, info in (data or {}).items():
            packages[PackageTier(tier)] = PackageInfo(
                title=info.get("title", ""),
                description=info.get("description", ""),
                price=float(info.get("price", 0)),
                delivery_days=int(info.get("delivery_days", 1))
            )
        return packages
