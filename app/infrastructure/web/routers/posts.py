"""
Service post router.
Handles the post editor: drafts, publishing, sections and images of the caller's posts.
"""

from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, UploadFile, File, status

from app.infrastructure.auth import AuthenticatedUser, get_current_user, require_approved_freelancer
from app.infrastructure.rate_limiting import create_rate_limit, upload_rate_limit
from app.infrastructure.web.dependencies import (
    PostRepo, ProfileRepo, ApplicationRepo, ReviewRepo, Storage, Outbox, unwrap_result
)
from app.application.use_cases.post_use_cases import (
    CreatePostUseCase,
    UpdatePostUseCase,
    GetMyPostUseCase,
    PublishPostUseCase,
    UnpublishPostUseCase,
    ArchivePostUseCase,
    DeletePostUseCase,
    ListMyPostsUseCase,
    ReorderSectionsUseCase,
    UploadPostImageUseCase
)
from app.application.dto.base_dto import StatusResponseDTO
from app.application.dto.post_dto import (
    CreatePostRequestDTO,
    UpdatePostRequestDTO,
    ListMyPostsRequestDTO,
    ReorderSectionsRequestDTO,
    UploadPostImageRequestDTO,
    PostResponseDTO,
    PostSummaryResponseDTO
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostResponseDTO)
async def create_post(
    request: CreatePostRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo,
    profiles: ProfileRepo,
    applications: ApplicationRepo,
    _: None = Depends(create_rate_limit)
):
    """
    Create a post.

    - **title**: Post title (required to publish)
    - **content**: Markdown description (required to publish)
    - **price**: Base price
    - **category**: Marketplace category
    - **sections**: Ordered markdown and image blocks
    - **packages**: basic, gold and platinum pricing tiers
    - **publish**: Publish right away instead of saving a draft

    Requires an approved freelancer account.
    """
    use_case = CreatePostUseCase(posts, profiles, applications).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.get("/mine", response_model=List[PostSummaryResponseDTO])
async def list_my_posts(
    user: Annotated[AuthenticatedUser, Depends(require_approved_freelancer)],
    posts: PostRepo,
    reviews: ReviewRepo,
    status: Optional[str] = Query(None, pattern="^(draft|published|archived)$", description="Filter by post status")
):
    """
    List the caller's posts, most recently edited first.

    - **status**: Optional draft, published or archived filter

    Requires an approved freelancer account.
    """
    use_case = ListMyPostsUseCase(posts, reviews).set_current_user(user.user_id, user.roles)
    return unwrap_result(await use_case.execute(ListMyPostsRequestDTO(status=status)))


@router.get("/{post_id}", response_model=PostResponseDTO)
async def get_my_post(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    posts: PostRepo
):
    """
    Get one of the caller's posts in any status, for editing.
    """
    use_case = GetMyPostUseCase(posts).set_current_user(user.user_id, user.roles)
    return unwrap_result(await use_case.execute(post_id))


@router.patch("/{post_id}", response_model=PostResponseDTO)
async def update_post(
    post_id: str,
    request: UpdatePostRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo,
    profiles: ProfileRepo
):
    """
    Update a post. Omitted fields stay unchanged; sections and packages are replaced as a whole.

    Published posts must stay publishable.
    """
    request.post_id = post_id
    use_case = UpdatePostUseCase(posts, profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.delete("/{post_id}", response_model=StatusResponseDTO)
async def delete_post(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo
):
    """
    Delete a post with its reviews and conversations.

    Owner or admin only.
    """
    use_case = DeletePostUseCase(posts).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(post_id))


@router.post("/{post_id}/publish", response_model=PostResponseDTO)
async def publish_post(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo,
    profiles: ProfileRepo,
    applications: ApplicationRepo
):
    """
    Publish a post to the marketplace.

    Requires a non-blank title and content, a valid price and a known category.
    """
    use_case = PublishPostUseCase(posts, profiles, applications).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(post_id))


@router.post("/{post_id}/unpublish", response_model=PostResponseDTO)
async def unpublish_post(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo
):
    """
    Move a post back to draft.
    """
    use_case = UnpublishPostUseCase(posts).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(post_id))


@router.post("/{post_id}/archive", response_model=PostResponseDTO)
async def archive_post(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo
):
    """
    Archive a post. Archived posts are hidden from the marketplace.
    """
    use_case = ArchivePostUseCase(posts).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(post_id))


@router.put("/{post_id}/sections/order", response_model=PostResponseDTO)
async def reorder_sections(
    post_id: str,
    request: ReorderSectionsRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo
):
    """
    Reorder the sections of a post.

    - **section_ids**: Every section ID of the post, in the new order
    """
    request.post_id = post_id
    use_case = ReorderSectionsUseCase(posts).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.post("/{post_id}/images", response_model=PostResponseDTO)
async def upload_post_image(
    post_id: str,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    posts: PostRepo,
    storage: Storage,
    file: UploadFile = File(...),
    kind: str = Query("cover", pattern="^(cover|image)$", description="cover or image"),
    _: None = Depends(upload_rate_limit)
):
    """
    Upload the cover or main image of a post. The previous image is removed from storage.

    - **file**: JPEG, PNG, GIF or WebP image
    - **kind**: cover or image
    """
    upload = UploadPostImageRequestDTO(
        post_id=post_id,
        kind=kind,
        filename=file.filename or "image",
        content_type=file.content_type,
        content=await file.read()
    )
    use_case = UploadPostImageUseCase(posts, storage).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(upload))
