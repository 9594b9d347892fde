"""
Profile router.
Handles the caller's own profile, avatar uploads and public freelancer pages.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, UploadFile, File

from app.infrastructure.auth import AuthenticatedUser, get_current_user
from app.infrastructure.rate_limiting import upload_rate_limit
from app.infrastructure.web.dependencies import ProfileRepo, PostRepo, ReviewRepo, Storage, Outbox, unwrap_result
from app.application.use_cases.profile_use_cases import (
    GetMyProfileUseCase,
    UpdateMyProfileUseCase,
    UploadAvatarUseCase,
    GetPublicProfileUseCase
)
from app.application.dto.base_dto import UploadRequestDTO
from app.application.dto.profile_dto import (
    UpdateProfileRequestDTO,
    ProfileResponseDTO,
    PublicProfileResponseDTO
)


router = APIRouter()


@router.get("/me", response_model=ProfileResponseDTO)
async def get_my_profile(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    profiles: ProfileRepo
):
    """
    Get the caller's profile.

    The profile is created from the token claims on first access.
    """
    use_case = GetMyProfileUseCase(profiles).set_current_user(user.user_id, user.roles)
    return unwrap_result(await use_case.execute(None))


@router.patch("/me", response_model=ProfileResponseDTO)
async def update_my_profile(
    request: UpdateProfileRequestDTO,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    profiles: ProfileRepo
):
    """
    Update the caller's profile.

    - **username**: 3-30 letters, digits or underscores; must be unique
    - **display_name**: 2-50 characters, empty to clear
    - **bio**: Up to 160 characters, empty to clear
    """
    use_case = UpdateMyProfileUseCase(profiles).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(request))


@router.post("/me/avatar", response_model=ProfileResponseDTO)
async def upload_avatar(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    profiles: ProfileRepo,
    storage: Storage,
    file: UploadFile = File(...),
    _: None = Depends(upload_rate_limit)
):
    """
    Upload a new avatar image.

    - **file**: JPEG, PNG, GIF or WebP image
    """
    upload = UploadRequestDTO(
        filename=file.filename or "avatar",
        content_type=file.content_type,
        content=await file.read()
    )
    use_case = UploadAvatarUseCase(profiles, storage).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(upload))


@router.get("/{user_id}", response_model=PublicProfileResponseDTO)
async def get_public_profile(
    user_id: str,
    profiles: ProfileRepo,
    posts: PostRepo,
    reviews: ReviewRepo
):
    """
    Get the public page of a user with their published posts and rating.

    No authentication required.
    """
    use_case = GetPublicProfileUseCase(profiles, posts, reviews)
    return unwrap_result(await use_case.execute(user_id))
