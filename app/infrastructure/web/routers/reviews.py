"""
Review router.
Buyers rate published posts; one review per buyer and post.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, status

from app.infrastructure.auth import AuthenticatedUser, get_current_user
from app.infrastructure.rate_limiting import create_rate_limit
from app.infrastructure.web.dependencies import ReviewRepo, PostRepo, ProfileRepo, Outbox, unwrap_result
from app.application.use_cases.review_use_cases import SubmitReviewUseCase, DeleteMyReviewUseCase
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.review_dto import SubmitReviewRequestDTO, ReviewResponseDTO


router = APIRouter()


@router.put("/posts/{post_id}", status_code=status.HTTP_200_OK, response_model=ReviewResponseDTO)
async def submit_review(
    post_id: str,
    request: SubmitReviewRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    reviews: ReviewRepo,
    posts: PostRepo,
    profiles: ProfileRepo,
    _: None = Depends(create_rate_limit)
):
    """
    Rate a published post. Submitting again replaces the caller's previous review.

    - **rating**: 1 to 5
    - **comment**: Optional comment, up to 1000 characters

    Only buyers can review, and never their own posts.
    """
    request.post_id = post_id
    use_case = SubmitReviewUseCase(reviews, posts, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.delete("/{review_id}", response_model=StatusResponseDTO)
async def delete_review(
    review_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    reviews: ReviewRepo
):
    """
    Delete a review. Authors delete their own; admins may delete any.
    """
    use_case = DeleteMyReviewUseCase(reviews).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(review_id))
