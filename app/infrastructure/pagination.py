"""
Pagination utilities.
Offset-based pagination over ranked result lists and helpers for API responses.
"""

from typing import TypeVar, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from math import ceil
from pydantic import BaseModel, Field

from app.config import settings

T = TypeVar('T')


@dataclass
class PaginationMetadata:
    """Pagination metadata for responses."""
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_previous: bool


class OffsetPagination:
    """
    Offset-based pagination.
    Marketplace results are ranked after rating statistics are attached,
    so pages are cut from the ordered list.
    """
    
    def __init__(self, default_page_size: int = 20, max_page_size: int = 100):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
    
    def paginate(
        self,
        items: Sequence[T],
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Tuple[List[T], PaginationMetadata]:
        """
        Cut one page out of an ordered sequence.
        
        Args:
            items: Ordered items
            page: Page number (1-based)
            page_size: Number of items per page
            
        Returns:
            Tuple of (items, pagination_metadata)
        """
        # Validate and set page size
        if page_size is None:
            page_size = self.default_page_size
        page_size = max(1, min(page_size, self.max_page_size))
        
        # Validate page number
        page = max(1, page)
        
        offset = (page - 1) * page_size
        total_items = len(items)
        total_pages = ceil(total_items / page_size)
        
        metadata = PaginationMetadata(
            page=page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1
        )
        
        return list(items[offset:offset + page_size]), metadata


# Pagination parameters for FastAPI
class PaginationParams(BaseModel):
    """Common pagination parameters."""
    page: int = Field(1, ge=1, description="Page number")
    page_size: int = Field(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page")
