"""
Marketplace router.
Public browsing of published posts, post details, categories and trending freelancers.
"""

from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query

from app.infrastructure.auth import AuthenticatedUser, get_optional_user
from app.infrastructure.pagination import PaginationParams
from app.infrastructure.rate_limiting import search_rate_limit
from app.infrastructure.web.dependencies import PostRepo, ProfileRepo, ReviewRepo, unwrap_result
from app.application.use_cases.marketplace_use_cases import (
    BrowsePostsUseCase,
    GetPostDetailsUseCase,
    ListCategoriesUseCase,
    TrendingFreelancersUseCase
)
from app.application.use_cases.review_use_cases import ListReviewsUseCase
from app.application.dto.marketplace_dto import (
    BrowsePostsRequestDTO,
    BrowsePostsResponseDTO,
    PostDetailsResponseDTO,
    CategoriesResponseDTO,
    TrendingFreelancerResponseDTO
)
from app.application.dto.review_dto import ReviewResponseDTO


router = APIRouter()


@router.get("/posts", response_model=BrowsePostsResponseDTO)
async def browse_posts(
    posts: PostRepo,
    reviews: ReviewRepo,
    pagination: PaginationParams = Depends(),
    category: Optional[str] = Query(None, description="Category filter; 'All' means no filter"),
    search: Optional[str] = Query(None, max_length=255, description="Matches title and description"),
    sort: str = Query("recommended", description="recommended, newest, price-low, price-high or rating"),
    _: None = Depends(search_rate_limit)
):
    """
    Browse published posts.

    - **page**: Page number (1-based)
    - **page_size**: Posts per page
    - **category**: Category filter
    - **search**: Case-insensitive search in title and description
    - **sort**: recommended, newest, price-low, price-high or rating

    Every post carries its average rating and review count.
    """
    request = BrowsePostsRequestDTO(
        page=pagination.page,
        page_size=pagination.page_size,
        category=category,
        search=search,
        sort=sort
    )
    return unwrap_result(await BrowsePostsUseCase(posts, reviews).execute(request))


@router.get("/posts/{post_id}", response_model=PostDetailsResponseDTO)
async def get_post_details(
    post_id: str,
    user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
    posts: PostRepo,
    profiles: ProfileRepo,
    reviews: ReviewRepo
):
    """
    Get a post with its freelancer, reviews and rating.

    Authentication is optional; owners and admins can also open non-published posts.
    """
    use_case = GetPostDetailsUseCase(posts, profiles, reviews).set_viewer(
        user.user_id if user else None,
        user.is_admin if user else False
    )
    return unwrap_result(await use_case.execute(post_id))


@router.get("/posts/{post_id}/reviews", response_model=List[ReviewResponseDTO])
async def list_post_reviews(
    post_id: str,
    reviews: ReviewRepo,
    posts: PostRepo,
    profiles: ProfileRepo
):
    """
    List the reviews of a published post, newest first.
    """
    return unwrap_result(await ListReviewsUseCase(reviews, posts, profiles).execute(post_id))


@router.get("/categories", response_model=CategoriesResponseDTO)
async def list_categories():
    """
    List the marketplace categories.
    """
    return unwrap_result(await ListCategoriesUseCase().execute(None))


@router.get("/freelancers/trending", response_model=List[TrendingFreelancerResponseDTO])
async def trending_freelancers(
    posts: PostRepo,
    profiles: ProfileRepo,
    reviews: ReviewRepo,
    limit: int = Query(6, ge=1, le=50, description="Number of freelancers")
):
    """
    List freelancers ranked by the average rating of their published posts, then review count.
    """
    use_case = TrendingFreelancersUseCase(posts, profiles, reviews)
    return unwrap_result(await use_case.execute(limit))
