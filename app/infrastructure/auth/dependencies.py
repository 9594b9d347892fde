"""
Authentication dependencies for FastAPI.
Resolves the caller from the bearer token and their marketplace profile.
"""

from dataclasses import dataclass, field
from typing import Optional, Annotated, Any, Dict, List
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.infrastructure.auth.jwt_handler import JWTHandler
from app.infrastructure.auth.supabase_auth import SupabaseAuthService
from app.infrastructure.db.database import get_db
from app.infrastructure.repositories.application_repository import SQLAlchemyApplicationRepository
from app.infrastructure.repositories.profile_repository import SQLAlchemyProfileRepository
from app.application.dto.profile_dto import ProfileClaimsDTO, ProfileResponseDTO
from app.application.use_cases.profile_use_cases import EnsureProfileUseCase
from app.domain.models.base import ValidationError
from app.domain.models.profile import AccountStatus, UserRole


# Security scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

# Global instances
jwt_handler = JWTHandler()
auth_service = SupabaseAuthService()


@dataclass
class AuthenticatedUser:
    """The caller of a request: token identity plus marketplace profile."""
    user_id: str
    email: Optional[str]
    role: str
    account_status: str
    is_admin: bool = False
    roles: List[str] = field(default_factory=list)

    @property
    def is_suspended(self) -> bool:
        return self.account_status == AccountStatus.SUSPENDED.value


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


def get_auth_service() -> SupabaseAuthService:
    """Dependency to get authentication service."""
    return auth_service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_payload(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> Dict[str, Any]:
    """
    FastAPI dependency to get current user's full token payload.

    Raises:
        HTTPException: If authentication fails
    """
    try:
        return jwt_handler.verify_token(credentials.credentials)
    except ValidationError as e:
        raise _unauthorized(str(e))


async def get_current_user_id(
    payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)]
) -> str:
    """FastAPI dependency to get current authenticated user ID."""
    return payload["sub"]


async def resolve_user(
    payload: Dict[str, Any],
    session: Session,
    jwt_handler: JWTHandler
) -> AuthenticatedUser:
    """
    Load (or create on first access) the profile behind a verified token.
    Admins are profiles with the admin role or users whose email is in ADMIN_EMAILS.
    """
    metadata = payload.get("user_metadata") or {}
    claims = ProfileClaimsDTO(
        user_id=payload["sub"],
        email=payload.get("email"),
        role=jwt_handler.get_signup_role(payload),
        username=metadata.get("username"),
        display_name=metadata.get("display_name") or metadata.get("full_name")
    )

    result = await EnsureProfileUseCase(SQLAlchemyProfileRepository(session)).execute(claims)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error
        )

    profile: ProfileResponseDTO = result.data
    is_admin = profile.role == UserRole.ADMIN.value or settings.is_admin_email(claims.email)
    roles = [profile.role]
    if is_admin and UserRole.ADMIN.value not in roles:
        roles.append(UserRole.ADMIN.value)

    return AuthenticatedUser(
        user_id=profile.user_id,
        email=claims.email,
        role=profile.role,
        account_status=profile.account_status,
        is_admin=is_admin,
        roles=roles
    )


async def get_current_user(
    payload: Annotated[Dict[str, Any], Depends(get_current_user_payload)],
    session: Annotated[Session, Depends(get_db)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> AuthenticatedUser:
    """FastAPI dependency to get the authenticated caller with their profile."""
    return await resolve_user(payload, session, jwt_handler)


async def get_optional_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(optional_security)],
    session: Annotated[Session, Depends(get_db)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> Optional[AuthenticatedUser]:
    """
    FastAPI dependency to optionally get the caller.
    Returns None without a token or with an invalid one.
    """
    if credentials is None:
        return None
    try:
        payload = jwt_handler.verify_token(credentials.credentials)
    except ValidationError:
        return None
    return await resolve_user(payload, session, jwt_handler)


async def require_admin(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)]
) -> AuthenticatedUser:
    """FastAPI dependency that only lets admins through."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def require_approved_freelancer(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_db)]
) -> AuthenticatedUser:
    """
    FastAPI dependency for freelancer-only pages.
    Admins pass; freelancers need an approved application and an active account.
    """
    if user.is_admin:
        return user
    if user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is suspended"
        )
    if user.role != UserRole.FREELANCER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Freelancer access required"
        )

    application = SQLAlchemyApplicationRepository(session).find_by_user(user.user_id)
    if application is None or not application.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your freelancer application has not been approved yet"
        )
    return user
