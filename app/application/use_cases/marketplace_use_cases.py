"""
Marketplace use cases for the application layer.
Browsing published posts, post details and freelancer rankings.
"""

import logging
from typing import List, Optional

from app.config import settings
from app.application.use_cases.base_use_case import QueryUseCase, PaginatedQueryUseCase
from app.application.use_cases.profile_use_cases import profile_cards
from app.application.dto.marketplace_dto import (
    BrowsePostsRequestDTO, BrowsePostsResponseDTO, PostDetailsResponseDTO,
    CategoriesResponseDTO, TrendingFreelancerResponseDTO
)
from app.application.dto.post_dto import PostResponseDTO, PostSummaryResponseDTO
from app.application.dto.review_dto import ReviewResponseDTO
from app.domain.models.base import EntityNotFoundError
from app.domain.repositories.post_repository import PostRepository, MarketplaceFilter
from app.domain.repositories.profile_repository import ProfileRepository
from app.domain.repositories.review_repository import ReviewRepository
from app.domain.services.marketplace_ranking import MarketplaceRankingService
from app.infrastructure.pagination import OffsetPagination


logger = logging.getLogger(__name__)


class BrowsePostsUseCase(PaginatedQueryUseCase[BrowsePostsRequestDTO, BrowsePostsResponseDTO]):
    """
    Use case for browsing published posts.
    Ratings are attached before sorting, so pages are cut after ranking.
    """

    def __init__(
        self,
        post_repository: PostRepository,
        review_repository: ReviewRepository,
        ranking_service: Optional[MarketplaceRankingService] = None
    ):
        super().__init__(settings.default_page_size, settings.max_page_size)
        self.post_repository = post_repository
        self.review_repository = review_repository
        self.ranking_service = ranking_service or MarketplaceRankingService()
        self.paginator = OffsetPagination(self.default_page_size, self.max_page_size)

    async def _execute_business_logic(self, request: BrowsePostsRequestDTO) -> BrowsePostsResponseDTO:
        order = self.ranking_service.parse_sort(request.sort)

        posts = self.post_repository.list_published(
            MarketplaceFilter(category=request.category, search=request.search)
        )
        stats = self.review_repository.rating_stats([post.id for post in posts])
        ranked = self.ranking_service.sort(
            self.ranking_service.attach_ratings(posts, stats), order
        )

        page_items, metadata = self.paginator.paginate(ranked, request.page, request.page_size)
        response = BrowsePostsResponseDTO.create(
            items=[PostSummaryResponseDTO.from_rated(item) for item in page_items],
            total=metadata.total_items,
            page=metadata.page,
            page_size=metadata.page_size
        )
        response.sort = order.value
        response.category = request.category
        return response


class GetPostDetailsUseCase(QueryUseCase[str, PostDetailsResponseDTO]):
    """
    Use case for the post detail page.
    Anonymous callers are allowed; only owners and admins see non-published posts.
    """

    def __init__(
        self,
        post_repository: PostRepository,
        profile_repository: ProfileRepository,
        review_repository: ReviewRepository
    ):
        super().__init__()
        self.post_repository = post_repository
        self.profile_repository = profile_repository
        self.review_repository = review_repository
        self.viewer_id: Optional[str] = None
        self.viewer_is_admin = False

    def set_viewer(self, user_id: Optional[str], is_admin: bool = False) -> "GetPostDetailsUseCase":
        self.viewer_id = user_id
        self.viewer_is_admin = is_admin
        return self

    async def _execute_business_logic(self, post_id: str) -> PostDetailsResponseDTO:
        post = self.post_repository.find_by_id(post_id)
        is_owner = bool(post and self.viewer_id and post.is_owned_by(self.viewer_id))
        # hidden posts look missing to everyone else
        if post is None or not (post.is_published or is_owner or self.viewer_is_admin):
            raise EntityNotFoundError("Post", post_id)

        reviews = self.review_repository.list_for_post(post.id)
        cards = profile_cards(
            self.profile_repository,
            [post.user_id] + [review.user_id for review in reviews]
        )
        average, count = self.review_repository.rating_stats([post.id]).get(post.id, (0.0, 0))
        my_review = next(
            (review for review in reviews if self.viewer_id and review.user_id == self.viewer_id),
            None
        )

        return PostDetailsResponseDTO(
            post=PostResponseDTO.from_domain(post),
            freelancer=cards[post.user_id],
            reviews=[ReviewResponseDTO.from_domain(review, cards[review.user_id]) for review in reviews],
            average_rating=round(average, 2),
            review_count=count,
            is_owner=is_owner,
            my_review_id=my_review.id if my_review else None
        )


class ListCategoriesUseCase(QueryUseCase[None, CategoriesResponseDTO]):
    """Use case for the category picker."""

    async def _execute_business_logic(self, request: None) -> CategoriesResponseDTO:
        return CategoriesResponseDTO(categories=list(settings.marketplace_categories))


class TrendingFreelancersUseCase(QueryUseCase[int, List[TrendingFreelancerResponseDTO]]):
    """Use case for freelancers ranked by the ratings of their published posts."""

    def __init__(
        self,
        post_repository: PostRepository,
        profile_repository: ProfileRepository,
        review_repository: ReviewRepository,
        ranking_service: Optional[MarketplaceRankingService] = None
    ):
        super().__init__()
        self.post_repository = post_repository
        self.profile_repository = profile_repository
        self.review_repository = review_repository
        self.ranking_service = ranking_service or MarketplaceRankingService()

    async def _execute_business_logic(self, limit: int) -> List[TrendingFreelancerResponseDTO]:
        posts = self.post_repository.list_published(MarketplaceFilter())
        stats = self.review_repository.rating_stats([post.id for post in posts])
        scores = self.ranking_service.trending_freelancers(
            self.ranking_service.attach_ratings(posts, stats),
            limit=max(1, min(limit, 50))
        )
        cards = profile_cards(self.profile_repository, [score.user_id for score in scores])
        return [
            TrendingFreelancerResponseDTO(
                freelancer=cards[score.user_id],
                average_rating=score.average_rating,
                review_count=score.review_count,
                post_count=score.post_count
            )
            for score in scores
        ]
