"""
Domain services.
"""

from .marketplace_ranking import (
    MarketplaceRankingService, MarketplaceSort, RatedPost, FreelancerScore
)

__all__ = [
    "MarketplaceRankingService",
    "MarketplaceSort",
    "RatedPost",
    "FreelancerScore",
]
