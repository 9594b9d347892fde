"""
Rate limiting package for FastAPI applications.
"""

from .limiter import (
    RateLimit, RateLimitStrategy, RateLimitStatus, InMemoryRateLimiter,
    RateLimiter, get_rate_limiter, init_rate_limiter, RATE_LIMITS
)
from .decorators import (
    create_rate_limit_dependency,
    auth_rate_limit, create_rate_limit, upload_rate_limit,
    search_rate_limit, message_rate_limit,
    user_key, ip_key
)

__all__ = [
    # Core classes
    'RateLimit',
    'RateLimitStrategy', 
    'RateLimitStatus',
    'InMemoryRateLimiter',
    'RateLimiter',
    
    # Functions
    'get_rate_limiter',
    'init_rate_limiter',
    'create_rate_limit_dependency',
    
    # Predefined limits
    'RATE_LIMITS',
    
    # Dependencies
    'auth_rate_limit',
    'create_rate_limit',
    'upload_rate_limit',
    'search_rate_limit', 
    'message_rate_limit',
    
    # Key functions
    'user_key',
    'ip_key'
]
