"""
Authentication infrastructure module.
Handles JWT validation, user authentication, and authorization.
"""

from .jwt_handler import JWTHandler
from .supabase_auth import SupabaseAuthService
from .dependencies import (
    AuthenticatedUser,
    get_auth_service,
    get_jwt_handler,
    get_current_user_id,
    get_current_user_payload,
    get_current_user,
    get_optional_user,
    require_admin,
    require_approved_freelancer,
    resolve_user
)

__all__ = [
    "JWTHandler",
    "SupabaseAuthService",
    "AuthenticatedUser",
    "get_auth_service",
    "get_jwt_handler",
    "get_current_user_id",
    "get_current_user_payload",
    "get_current_user",
    "get_optional_user",
    "require_admin",
    "require_approved_freelancer",
    "resolve_user"
]
