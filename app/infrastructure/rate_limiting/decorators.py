"""
Rate limiting FastAPI dependencies.
"""

import hashlib
from typing import Optional, Callable
from fastapi import Request, HTTPException, status

from app.config import settings
from .limiter import RateLimit, get_rate_limiter, RATE_LIMITS


def create_rate_limit_dependency(
    limit_name: str = 'default',
    rate_limit: Optional[RateLimit] = None,
    key_func: Optional[Callable[[Request], str]] = None,
    error_message: str = "Rate limit exceeded"
):
    """
    Create a FastAPI dependency for rate limiting.
    
    Usage:
        rate_limit_dep = create_rate_limit_dependency('auth')
        
        @app.post("/login")
        async def login(request: Request, _: None = Depends(rate_limit_dep)):
            ...
    """
    async def rate_limit_dependency(request: Request):
        if not settings.rate_limit_enabled:
            return None
        
        # Get rate limit configuration
        if rate_limit:
            limit_config = rate_limit
        else:
            limit_config = RATE_LIMITS.get(limit_name, RATE_LIMITS['default'])
        
        # Check rate limit
        limiter = get_rate_limiter()
        status_result = limiter.check_rate_limit(request, limit_config, key_func)
        
        if status_result.retry_after:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=error_message,
                headers=status_result.to_headers()
            )
        
        return status_result
    
    return rate_limit_dependency


# Key generation functions
def ip_key(request: Request) -> str:
    """Generate rate limit key based on client IP."""
    client_ip = request.client.host if request.client else 'unknown'
    return f"rate_limit:ip:{client_ip}:{request.url.path}"


def user_key(request: Request) -> str:
    """
    Generate rate limit key based on the bearer token.
    The token is hashed, not verified; authentication happens in the endpoint.
    """
    authorization = request.headers.get('authorization', '')
    if authorization.startswith('Bearer '):
        token_hash = hashlib.sha256(authorization[7:].encode()).hexdigest()[:16]
        return f"rate_limit:user:{token_hash}:{request.url.path}"
    return ip_key(request)


# Predefined dependencies
auth_rate_limit = create_rate_limit_dependency(
    'auth', 
    key_func=ip_key,
    error_message="Too many authentication attempts. Please try again later."
)

create_rate_limit = create_rate_limit_dependency(
    'create',
    key_func=user_key,
    error_message="Too many create operations. Please slow down."
)

upload_rate_limit = create_rate_limit_dependency(
    'upload',
    key_func=user_key,
    error_message="Too many uploads. Please wait before uploading again."
)

search_rate_limit = create_rate_limit_dependency(
    'search',
    key_func=ip_key,
    error_message="Too many search requests. Please wait before searching again."
)

message_rate_limit = create_rate_limit_dependency(
    'message',
    key_func=user_key,
    error_message="You are sending messages too fast. Please wait a moment."
)
