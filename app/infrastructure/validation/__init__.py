"""
Input validation package.
"""

from .validators import SecurityValidator, DataValidator, BusinessValidator

__all__ = [
    'SecurityValidator',
    'DataValidator', 
    'BusinessValidator',
]
