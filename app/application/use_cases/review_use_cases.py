"""
Review use cases for the application layer.
"""

import logging
from typing import List

from app.application.use_cases.base_use_case import (
    CreateUseCase, DeleteUseCase, QueryUseCase, AuthorizedUseCase
)
from app.application.use_cases.profile_use_cases import load_profile, profile_cards
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.review_dto import SubmitReviewRequestDTO, ReviewResponseDTO
from app.domain.models.base import EntityNotFoundError, PermissionDeniedError, BusinessRuleViolation
from app.domain.models.review import Review
from app.domain.repositories.post_repository import PostRepository
from app.domain.repositories.profile_repository import ProfileRepository
from app.domain.repositories.review_repository import ReviewRepository


logger = logging.getLogger(__name__)


class SubmitReviewUseCase(AuthorizedUseCase, CreateUseCase[SubmitReviewRequestDTO, ReviewResponseDTO]):
    """
    Use case for rating a published post.
    A buyer has at most one review per post; submitting again revises it.
    """

    def __init__(
        self,
        review_repository: ReviewRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.review_repository = review_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_command_logic(self, request: SubmitReviewRequestDTO) -> ReviewResponseDTO:
        profile = load_profile(self.profile_repository, self.current_user_id)
        profile.ensure_can_act()
        if not profile.is_buyer:
            raise PermissionDeniedError("Only buyers can review posts")

        post = self.post_repository.find_by_id(request.post_id)
        if post is None or not post.is_published:
            raise EntityNotFoundError("Post", request.post_id)
        if post.is_owned_by(self.current_user_id):
            raise BusinessRuleViolation("You cannot review your own post")

        review = self.review_repository.find_by_post_and_user(post.id, self.current_user_id)
        if review:
            review.revise(request.rating, request.comment)
        else:
            review = Review.create(
                post_id=post.id,
                user_id=self.current_user_id,
                rating=request.rating,
                comment=request.comment
            )

        self.review_repository.save(review)
        self._collect_events(review)
        return ReviewResponseDTO.from_domain(review, profile_cards(self.profile_repository, [review.user_id])[review.user_id])


class DeleteMyReviewUseCase(AuthorizedUseCase, DeleteUseCase[str, StatusResponseDTO]):
    """Use case for removing the caller's review. Admins may remove any review."""

    def __init__(self, review_repository: ReviewRepository):
        super().__init__()
        self.review_repository = review_repository

    async def _execute_command_logic(self, review_id: str) -> StatusResponseDTO:
        review = self.review_repository.find_by_id(review_id)
        if review is None:
            raise EntityNotFoundError("Review", review_id)
        self._require_owner_or_role(review.user_id, "admin")

        self.review_repository.delete(review.id)
        logger.info(f"Review {review.id} deleted by {self.current_user_id}")
        return StatusResponseDTO(message="Review deleted")


class ListReviewsUseCase(QueryUseCase[str, List[ReviewResponseDTO]]):
    """Use case for the reviews of a published post, newest first."""

    def __init__(
        self,
        review_repository: ReviewRepository,
        post_repository: PostRepository,
        profile_repository: ProfileRepository
    ):
        super().__init__()
        self.review_repository = review_repository
        self.post_repository = post_repository
        self.profile_repository = profile_repository

    async def _execute_business_logic(self, post_id: str) -> List[ReviewResponseDTO]:
        post = self.post_repository.find_by_id(post_id)
        if post is None or not post.is_published:
            raise EntityNotFoundError("Post", post_id)

        reviews = self.review_repository.list_for_post(post.id)
        cards = profile_cards(self.profile_repository, [review.user_id for review in reviews])
        return [ReviewResponseDTO.from_domain(review, cards[review.user_id]) for review in reviews]
