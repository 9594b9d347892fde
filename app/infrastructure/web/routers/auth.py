"""
Authentication router.
Handles registration with a marketplace role, login, token refresh, password management and account deletion.
"""

from typing import Annotated, Dict, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr, Field

from app.infrastructure.auth import (
    SupabaseAuthService,
    AuthenticatedUser,
    get_auth_service,
    get_current_user,
    get_current_user_payload
)
from app.infrastructure.auth.dependencies import security
from app.infrastructure.rate_limiting import auth_rate_limit
from app.infrastructure.web.dependencies import (
    ProfileRepo, PostRepo, ApplicationRepo, ReviewRepo, ConversationRepo, Outbox, unwrap_result
)
from app.application.use_cases.profile_use_cases import DeleteMyAccountUseCase
from app.application.dto.base_dto import StatusResponseDTO
from app.domain.models.base import ValidationError


router = APIRouter()


# Request/Response models
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    role: str = Field(default="buyer", pattern="^(buyer|freelancer)$")
    username: Optional[str] = Field(default=None, min_length=3, max_length=30, pattern="^[a-zA-Z0-9_]+$")
    display_name: Optional[str] = Field(default=None, max_length=50)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr
    redirect_to: Optional[str] = None


class UpdatePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8, max_length=100)


class AuthResponse(BaseModel):
    user: Dict[str, Any]
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)],
    _: None = Depends(auth_rate_limit)
):
    """
    Register a new user account.

    - **email**: Valid email address
    - **password**: Password with at least 8 characters
    - **role**: buyer or freelancer (freelancers still need an approved application to post)
    - **username**: Optional username
    - **display_name**: Optional display name
    """
    try:
        metadata = {}
        if request.username:
            metadata["username"] = request.username
        if request.display_name:
            metadata["display_name"] = request.display_name

        result = auth_service.sign_up(
            email=request.email,
            password=request.password,
            role=request.role,
            metadata=metadata
        )

        session = result.get("session") or {}
        return AuthResponse(
            user=result["user"],
            access_token=session.get("access_token", ""),
            refresh_token=session.get("refresh_token", "")
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)],
    _: None = Depends(auth_rate_limit)
):
    """
    Authenticate user and return access tokens.

    - **email**: User email address
    - **password**: User password
    """
    try:
        result = auth_service.sign_in(
            email=request.email,
            password=request.password
        )

        return AuthResponse(
            user=result["user"],
            access_token=result["access_token"],
            refresh_token=result["refresh_token"]
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )


@router.post("/refresh", response_model=Dict[str, str])
async def refresh_token(
    request: RefreshRequest,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)]
):
    """
    Refresh access token using refresh token.

    - **refresh_token**: Valid refresh token
    """
    try:
        result = auth_service.refresh_token(request.refresh_token)

        return {
            "access_token": result["access_token"],
            "refresh_token": result["refresh_token"],
            "token_type": "bearer"
        }

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )


@router.get("/me", response_model=Dict[str, Any])
async def get_identity(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)]
):
    """
    Get the caller's identity and marketplace role.

    Requires authentication.
    """
    return {
        "user_id": user.user_id,
        "email": user.email,
        "role": user.role,
        "account_status": user.account_status,
        "is_admin": user.is_admin
    }


@router.post("/logout", response_model=StatusResponseDTO)
async def logout(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    _payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)],
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)]
):
    """
    Sign out current user and revoke the session of the token.

    Requires authentication.
    """
    auth_service.sign_out(credentials.credentials)
    return StatusResponseDTO(message="Successfully logged out")


@router.post("/reset-password", response_model=StatusResponseDTO)
async def reset_password(
    request: PasswordResetRequest,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)],
    _: None = Depends(auth_rate_limit)
):
    """
    Send password reset email.

    - **email**: Email address to send reset link
    - **redirect_to**: Optional page the reset link opens
    """
    auth_service.reset_password(request.email, request.redirect_to)

    # Always return success to prevent email enumeration
    return StatusResponseDTO(message="If an account with that email exists, a reset link has been sent")


@router.post("/update-password", response_model=StatusResponseDTO)
async def update_password(
    request: UpdatePasswordRequest,
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)]
):
    """
    Update the caller's password.

    Requires authentication.
    """
    try:
        if not auth_service.update_password(user.user_id, request.new_password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Failed to update password"
            )
        return StatusResponseDTO(message="Password updated successfully")

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.delete("/account", response_model=StatusResponseDTO)
async def delete_account(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    outbox: Outbox,
    profiles: ProfileRepo,
    posts: PostRepo,
    applications: ApplicationRepo,
    reviews: ReviewRepo,
    conversations: ConversationRepo,
    auth_service: Annotated[SupabaseAuthService, Depends(get_auth_service)]
):
    """
    Permanently delete the caller's account, profile and marketplace content.

    Posts, the freelancer application, written reviews and conversations are removed too.

    Requires authentication. Admin accounts cannot delete themselves.
    """
    use_case = DeleteMyAccountUseCase(
        profiles, auth_service, posts, applications, reviews, conversations
    ).set_current_user(user.user_id, user.roles)
    use_case.defer_events(outbox)
    return unwrap_result(await use_case.execute(None))
