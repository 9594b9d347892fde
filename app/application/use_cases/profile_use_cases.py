"""
Profile use cases for the application layer.
Implements business logic for profile operations.
"""

import logging
from typing import Dict, Iterable, Optional

from app.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.dto.base_dto import StatusResponseDTO, UploadRequestDTO
from app.application.dto.post_dto import PostSummaryResponseDTO
from app.application.dto.profile_dto import (
    ProfileClaimsDTO, UpdateProfileRequestDTO, ProfileResponseDTO,
    ProfileSummaryResponseDTO, PublicProfileResponseDTO
)
from app.domain.models.base import EntityNotFoundError, DuplicateEntityError, ValidationError
from app.domain.models.post import PostStatus
from app.domain.models.profile import Profile, UserRole, USERNAME_PATTERN
from app.domain.repositories.application_repository import ApplicationRepository
from app.domain.repositories.conversation_repository import ConversationRepository
from app.domain.repositories.post_repository import PostRepository
from app.domain.repositories.profile_repository import ProfileRepository
from app.domain.repositories.review_repository import ReviewRepository
from app.domain.services.marketplace_ranking import MarketplaceRankingService
from app.infrastructure.storage.storage_service import StorageService, AVATARS_FOLDER


logger = logging.getLogger(__name__)


def load_profile(profile_repository: ProfileRepository, user_id: str) -> Profile:
    """Profile of a user or EntityNotFoundError."""
    profile = profile_repository.find_by_user_id(user_id)
    if profile is None:
        raise EntityNotFoundError("Profile", user_id)
    return profile


def profile_cards(
    profile_repository: ProfileRepository,
    user_ids: Iterable[str]
) -> Dict[str, ProfileSummaryResponseDTO]:
    """Public cards for a set of users; users without a profile get a placeholder."""
    wanted = set(user_ids)
    cards = {
        profile.user_id: ProfileSummaryResponseDTO.from_domain(profile)
        for profile in profile_repository.find_many(list(wanted))
    }
    for user_id in wanted - set(cards):
        cards[user_id] = ProfileSummaryResponseDTO.unknown(user_id)
    return cards


class EnsureProfileUseCase(CreateUseCase[ProfileClaimsDTO, ProfileResponseDTO]):
    """
    Return the profile of an authenticated user, creating it on first access.
    The role comes from the signup metadata; anything but buyer or freelancer falls back to buyer.
    """
    
    def __init__(self, profile_repository: ProfileRepository):
        super().__init__()
        self.profile_repository = profile_repository
    
    async def _execute_command_logic(self, request: ProfileClaimsDTO) -> ProfileResponseDTO:
        profile = self.profile_repository.find_by_user_id(request.user_id)
        if profile:
            return ProfileResponseDTO.from_domain(profile)
        
        role = UserRole.FREELANCER if request.role == UserRole.FREELANCER.value else UserRole.BUYER
        profile = Profile.create(
            user_id=request.user_id,
            role=role,
            username=self._available_username(request.username),
            display_name=self._usable_display_name(request.display_name)
        )
        self.profile_repository.save(profile)
        logger.info(f"Created {role.value} profile for user {request.user_id}")
        return ProfileResponseDTO.from_domain(profile)
    
    def _available_username(self, username: Optional[str]) -> Optional[str]:
        if not username or not USERNAME_PATTERN.match(username):
            return None
        if self.profile_repository.find_by_username(username):
            return None
        return username
    
    @staticmethod
    def _usable_display_name(display_name: Optional[str]) -> Optional[str]:
        if display_name and 2 <= len(display_name.strip()) <= 50:
            return display_name.strip()
        return None


class GetMyProfileUseCase(AuthorizedUseCase, QueryUseCase[None, ProfileResponseDTO]):
    """Use case for reading the caller's profile."""
    
    def __init__(self, profile_repository: ProfileRepository):
        super().__init__()
        self.profile_repository = profile_repository
    
    async def _execute_business_logic(self, request: None) -> ProfileResponseDTO:
        return ProfileResponseDTO.from_domain(load_profile(self.profile_repository, self.current_user_id))


class UpdateMyProfileUseCase(AuthorizedUseCase, UpdateUseCase[UpdateProfileRequestDTO, ProfileResponseDTO]):
    """Use case for editing username, display name and bio."""
    
    def __init__(self, profile_repository: ProfileRepository):
        super().__init__()
        self.profile_repository = profile_repository
    
    async def _execute_command_logic(self, request: UpdateProfileRequestDTO) -> ProfileResponseDTO:
        profile = load_profile(self.profile_repository, self.current_user_id)
        
        if request.username is not None and request.username.lower() != (profile.username or "").lower():
            existing = self.profile_repository.find_by_username(request.username)
            if existing and existing.user_id != profile.user_id:
                raise DuplicateEntityError("Profile", "username", request.username)
        
        profile.update_details(
            username=request.username,
            display_name=request.display_name,
            bio=request.bio
        )
        self.profile_repository.save(profile)
        return ProfileResponseDTO.from_domain(profile)


class UploadAvatarUseCase(AuthorizedUseCase, UpdateUseCase[UploadRequestDTO, ProfileResponseDTO]):
    """Use case for replacing the caller's avatar."""
    
    def __init__(self, profile_repository: ProfileRepository, storage_service: StorageService):
        super().__init__()
        self.profile_repository = profile_repository
        self.storage_service = storage_service
    
    async def _execute_command_logic(self, request: UploadRequestDTO) -> ProfileResponseDTO:
        profile = load_profile(self.profile_repository, self.current_user_id)
        previous_url = profile.avatar_url
        
        upload = await self.storage_service.upload_image(
            file_content=request.content,
            filename=request.filename,
            folder=AVATARS_FOLDER,
            user_id=profile.user_id,
            content_type=request.content_type
        )
        profile.update_details(avatar_url=upload["public_url"])
        self.profile_repository.save(profile)
        
        if previous_url and previous_url != profile.avatar_url:
            await self.storage_service.delete_by_url(previous_url)
        return ProfileResponseDTO.from_domain(profile)


class GetPublicProfileUseCase(QueryUseCase[str, PublicProfileResponseDTO]):
    """Use case for the public profile page of a user."""
    
    def __init__(
        self,
        profile_repository: ProfileRepository,
        post_repository: PostRepository,
        review_repository: ReviewRepository
    ):
        super().__init__()
        self.profile_repository = profile_repository
        self.post_repository = post_repository
        self.review_repository = review_repository
        self.ranking_service = MarketplaceRankingService()
    
    async def _execute_business_logic(self, user_id: str) -> PublicProfileResponseDTO:
        profile = load_profile(self.profile_repository, user_id)
        
        posts = self.post_repository.list_by_owner(user_id, PostStatus.PUBLISHED)
        stats = self.review_repository.rating_stats([post.id for post in posts])
        rated = self.ranking_service.attach_ratings(posts, stats)
        scores = self.ranking_service.trending_freelancers(rated, limit=1)
        
        return PublicProfileResponseDTO(
            profile=ProfileSummaryResponseDTO.from_domain(profile),
            bio=profile.bio,
            role=profile.role.value,
            posts=[PostSummaryResponseDTO.from_rated(item) for item in rated],
            average_rating=scores[0].average_rating if scores else 0.0,
            review_count=scores[0].review_count if scores else 0
        )


class DeleteMyAccountUseCase(AuthorizedUseCase, DeleteUseCase[None, StatusResponseDTO]):
    """
    Use case for deleting the caller's account.
    The marketplace rows go first (posts, application, written reviews, conversations, profile)
    and the auth user last, so a failed auth call rolls the whole deletion back.
    """
    
    def __init__(
        self,
        profile_repository: ProfileRepository,
        auth_service,
        post_repository: PostRepository,
        application_repository: ApplicationRepository,
        review_repository: ReviewRepository,
        conversation_repository: ConversationRepository
    ):
        super().__init__()
        self.profile_repository = profile_repository
        self.auth_service = auth_service
        self.post_repository = post_repository
        self.application_repository = application_repository
        self.review_repository = review_repository
        self.conversation_repository = conversation_repository
    
    async def _execute_command_logic(self, request: None) -> StatusResponseDTO:
        if self.is_admin:
            raise ValidationError("Admin accounts cannot be deleted from the app")
        
        user_id = self.current_user_id
        conversations = self.conversation_repository.delete_for_user(user_id)
        reviews = self.review_repository.delete_by_user(user_id)
        posts = self.post_repository.delete_by_owner(user_id)
        application = self.application_repository.find_by_user(user_id)
        if application:
            self.application_repository.delete(application.id)
        self.profile_repository.delete_by_user_id(user_id)
        
        self.auth_service.delete_user(user_id)
        logger.info(
            f"Deleted account {user_id} with {posts} posts, {reviews} reviews and {conversations} conversations"
        )
        return StatusResponseDTO(message="Your account has been deleted")
