"""
Service post use cases for the application layer.
Implements creation and editing of a freelancer's posts.
"""

import logging
from typing import List

from app.config import settings
from app.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.use_cases.profile_use_cases import load_profile
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.post_dto import (
    CreatePostRequestDTO, UpdatePostRequestDTO, ListMyPostsRequestDTO,
    ReorderSectionsRequestDTO, UploadPostImageRequestDTO,
    PostResponseDTO, PostSummaryResponseDTO
)
from app.domain.models.base import EntityNotFoundError, PermissionDeniedError
from app.domain.models.post import ServicePost, PostStatus, PackageTier
from app.domain.models.profile import Profile
from app.domain.repositories.application_repository import ApplicationRepository
from app.domain.repositories.post_repository import PostRepository
from app.domain.repositories.profile_repository import ProfileRepository
from app.domain.repositories.review_repository import ReviewRepository
from app.domain.services.marketplace_ranking import MarketplaceRankingService
from app.infrastructure.storage.storage_service import (
    StorageService, POST_COVERS_FOLDER, POST_IMAGES_FOLDER
)


logger = logging.getLogger(__name__)


def ensure_can_post(profile: Profile, application_repository: ApplicationRepository) -> None:
    """Only active freelancers with an approved application, or admins, may post."""
    profile.ensure_can_act()
    if profile.is_admin:
        return
    if not profile.is_freelancer:
        raise PermissionDeniedError("Only freelancers can create posts")
    application = application_repository.find_by_user(profile.user_id)
    if application is None or not application.is_approved:
        raise PermissionDeniedError("Your freelancer application must be approved before you can post")


class PostOwnerMixin:
    """Loads a post for its owner; admins may act on any post when allowed."""
    
    post_repository: PostRepository
    
    def _load_own_post(self, post_id: str, allow_admin: bool = False) -> ServicePost:
        post = self.post_repository.find_by_id(post_id)
        if post is None:
            raise EntityNotFoundError("Post", post_id)
        if allow_admin:
            self._require_owner_or_role(post.user_id, "admin")
        elif not post.is_owned_by(self.current_user_id):
            raise PermissionDeniedError("You can only modify your own posts")
        return post


class CreatePostUseCase(AuthorizedUseCase, CreateUseCase[CreatePostRequestDTO, PostResponseDTO]):
    """Use case for creating a post as a draft or published right away."""
    
    def __init__(
        self,
        post_repository: PostRepository,
        profile_repository: ProfileRepository,
        application_repository: ApplicationRepository
    ):
        super().__init__()
        self.post_repository = post_repository
        self.profile_repository = profile_repository
        self.application_repository = application_repository
    
    async def _execute_command_logic(self, request: CreatePostRequestDTO) -> PostResponseDTO:
        profile = load_profile(self.profile_repository, self.current_user_id)
        ensure_can_post(profile, self.application_repository)
        
        post = ServicePost.create(
            user_id=self.current_user_id,
            title=request.title,
            content=request.content,
            price=request.price,
            category=request.category,
            cover_image_url=request.cover_image_url,
            image_url=request.image_url,
            sections=[section.to_domain() for section in request.sections],
            packages={PackageTier(tier): package.to_domain() for tier, package in request.packages.items()}
        )
        if request.publish:
            post.publish(settings.marketplace_categories)
        
        self.post_repository.save(post)
        self._collect_events(post)
        logger.info(f"Post {post.id} created by {self.current_user_id} ({post.status.value})")
        return PostResponseDTO.from_domain(post)


class UpdatePostUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[UpdatePostRequestDTO, PostResponseDTO]):
    """Use case for editing a post. Published posts must stay publishable."""
    
    def __init__(self, post_repository: PostRepository, profile_repository: ProfileRepository):
        super().__init__()
        self.post_repository = post_repository
        self.profile_repository = profile_repository
    
    async def _execute_command_logic(self, request: UpdatePostRequestDTO) -> PostResponseDTO:
        post = self._load_own_post(request.post_id)
        load_profile(self.profile_repository, self.current_user_id).ensure_can_act()
        
        post.update_content(
            title=request.title,
            content=request.content,
            price=request.price,
            category=request.category,
            cover_image_url=request.cover_image_url,
            image_url=request.image_url
        )
        if request.sections is not None:
            post.set_sections([section.to_domain() for section in request.sections])
        if request.packages is not None:
            post.set_packages({
                PackageTier(tier): package.to_domain() for tier, package in request.packages.items()
            })
        
        self.post_repository.save(post)
        return PostResponseDTO.from_domain(post)


class GetMyPostUseCase(PostOwnerMixin, AuthorizedUseCase, QueryUseCase[str, PostResponseDTO]):
    """Use case for loading a post into the editor, whatever its status."""
    
    def __init__(self, post_repository: PostRepository):
        super().__init__()
        self.post_repository = post_repository
    
    async def _execute_business_logic(self, post_id: str) -> PostResponseDTO:
        return PostResponseDTO.from_domain(self._load_own_post(post_id, allow_admin=True))


class PublishPostUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[str, PostResponseDTO]):
    """Use case for publishing a post to the marketplace."""
    
    def __init__(
        self,
        post_repository: PostRepository,
        profile_repository: ProfileRepository,
        application_repository: ApplicationRepository
    ):
        super().__init__()
        self.post_repository = post_repository
        self.profile_repository = profile_repository
        self.application_repository = application_repository
    
    async def _execute_command_logic(self, post_id: str) -> PostResponseDTO:
        post = self._load_own_post(post_id)
        ensure_can_post(load_profile(self.profile_repository, self.current_user_id), self.application_repository)
        
        post.publish(settings.marketplace_categories)
        self.post_repository.save(post)
        self._collect_events(post)
        return PostResponseDTO.from_domain(post)


class UnpublishPostUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[str, PostResponseDTO]):
    """Use case for moving a post back to draft."""
    
    def __init__(self, post_repository: PostRepository):
        super().__init__()
        self.post_repository = post_repository
    
    async def _execute_command_logic(self, post_id: str) -> PostResponseDTO:
        post = self._load_own_post(post_id)
        post.unpublish()
        self.post_repository.save(post)
        return PostResponseDTO.from_domain(post)


class ArchivePostUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[str, PostResponseDTO]):
    """Use case for archiving a post."""
    
    def __init__(self, post_repository: PostRepository):
        super().__init__()
        self.post_repository = post_repository
    
    async def _execute_command_logic(self, post_id: str) -> PostResponseDTO:
        post = self._load_own_post(post_id)
        post.archive()
        self.post_repository.save(post)
        return PostResponseDTO.from_domain(post)


class DeletePostUseCase(PostOwnerMixin, AuthorizedUseCase, DeleteUseCase[str, StatusResponseDTO]):
    """Use case for deleting a post with its reviews and conversations."""
    
    def __init__(self, post_repository: PostRepository):
        super().__init__()
        self.post_repository = post_repository
    
    async def _execute_command_logic(self, post_id: str) -> StatusResponseDTO:
        post = self._load_own_post(post_id, allow_admin=True)
        self.post_repository.delete(post.id)
        logger.info(f"Post {post.id} deleted by {self.current_user_id}")
        return StatusResponseDTO(message="Post deleted")


class ListMyPostsUseCase(AuthorizedUseCase, QueryUseCase[ListMyPostsRequestDTO, List[PostSummaryResponseDTO]]):
    """Use case for the caller's posts, most recently edited first."""
    
    def __init__(self, post_repository: PostRepository, review_repository: ReviewRepository):
        super().__init__()
        self.post_repository = post_repository
        self.review_repository = review_repository
    
    async def _execute_business_logic(self, request: ListMyPostsRequestDTO) -> List[PostSummaryResponseDTO]:
        status = PostStatus(request.status) if request.status else None
        posts = self.post_repository.list_by_owner(self.current_user_id, status)
        stats = self.review_repository.rating_stats([post.id for post in posts])
        return [
            PostSummaryResponseDTO.from_rated(item)
            for item in MarketplaceRankingService.attach_ratings(posts, stats)
        ]


class ReorderSectionsUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[ReorderSectionsRequestDTO, PostResponseDTO]):
    """Use case for reordering post sections (drag and drop in the editor)."""
    
    def __init__(self, post_repository: PostRepository):
        super().__init__()
        self.post_repository = post_repository
    
    async def _execute_command_logic(self, request: ReorderSectionsRequestDTO) -> PostResponseDTO:
        post = self._load_own_post(request.post_id)
        post.reorder_sections(request.section_ids)
        self.post_repository.save(post)
        return PostResponseDTO.from_domain(post)


class UploadPostImageUseCase(PostOwnerMixin, AuthorizedUseCase, UpdateUseCase[UploadPostImageRequestDTO, PostResponseDTO]):
    """Use case for uploading the cover or main image of a post."""
    
    def __init__(self, post_repository: PostRepository, storage_service: StorageService):
        super().__init__()
        self.post_repository = post_repository
        self.storage_service = storage_service
    
    async def _execute_command_logic(self, request: UploadPostImageRequestDTO) -> PostResponseDTO:
        post = self._load_own_post(request.post_id)
        field_name = "cover_image_url" if request.kind == "cover" else "image_url"
        previous_url = getattr(post, field_name)
        
        upload = await self.storage_service.upload_image(
            file_content=request.content,
            filename=request.filename,
            folder=POST_COVERS_FOLDER if request.kind == "cover" else POST_IMAGES_FOLDER,
            user_id=self.current_user_id,
            content_type=request.content_type
        )
        post.update_content(**{field_name: upload["public_url"]})
        self.post_repository.save(post)
        
        if previous_url and previous_url != upload["public_url"]:
            await self.storage_service.delete_by_url(previous_url)
        return PostResponseDTO.from_domain(post)
