"""Ranking service for the marketplace.
Attaches rating statistics to posts and orders them for browsing.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from app.domain.models.base import ValidationError
from app.domain.models.post import ServicePost


class MarketplaceSort(str, Enum):
    """Sort orders offered by the marketplace."""
    RECOMMENDED = "recommended"
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"


@dataclass
class RatedPost:
    """A post with its review statistics."""
    post: ServicePost
    average_rating: float = 0.0
    review_count: int = 0


@dataclass
class FreelancerScore:
    """Aggregated rating of a freelancer across their published posts."""
    user_id: str
    average_rating: float
    review_count: int
    post_count: int


class MarketplaceRankingService:
    """
    Domain service for marketplace ordering.
    Posts without reviews rate 0 and sort after rated posts.
    """

    @staticmethod
    def parse_sort(value: str) -> MarketplaceSort:
        try:
            return MarketplaceSort(value)
        except ValueError:
            allowed = ", ".join(option.value for option in MarketplaceSort)
            raise ValidationError(f"Invalid sort '{value}'. Use one of: {allowed}", "sort")

    @staticmethod
    def attach_ratings(
        posts: List[ServicePost],
        stats: Dict[str, Tuple[float, int]]
    ) -> List[RatedPost]:
        rated = []
        for post in posts:
            average, count = stats.get(post.id, (0.0, 0))
            rated.append(RatedPost(post=post, average_rating=round(average, 2), review_count=count))
        return rated

    def sort(self, items: List[RatedPost], order: MarketplaceSort) -> List[RatedPost]:
        """Return the items in the requested order; ties fall back to newest first."""
        newest_first = sorted(items, key=lambda item: item.post.created_at, reverse=True)

        if order in (MarketplaceSort.RECOMMENDED, MarketplaceSort.NEWEST):
            return newest_first
        if order == MarketplaceSort.PRICE_LOW:
            return sorted(newest_first, key=lambda item: self._price(item, math.inf))
        if order == MarketplaceSort.PRICE_HIGH:
            return sorted(newest_first, key=lambda item: self._price(item, -math.inf), reverse=True)
        # stable sort keeps newest first among equal ratings
        return sorted(newest_first, key=lambda item: item.average_rating, reverse=True)

    @staticmethod
    def _price(item: RatedPost, missing: float) -> float:
        price = item.post.price
        return missing if price is None else price

    def trending_freelancers(self, items: List[RatedPost], limit: int = 6) -> List[FreelancerScore]:
        """Rank freelancers by their review-weighted average rating, then review volume."""
        totals: Dict[str, List[float]] = {}
        for item in items:
            rating_sum, reviews, posts = totals.get(item.post.user_id, [0.0, 0, 0])
            totals[item.post.user_id] = [
                rating_sum + item.average_rating * item.review_count,
                reviews + item.review_count,
                posts + 1
            ]

        scores = [
            FreelancerScore(
                user_id=user_id,
                average_rating=round(rating_sum / reviews, 2) if reviews else 0.0,
                review_count=int(reviews),
                post_count=int(posts)
            )
            for user_id, (rating_sum, reviews, posts) in totals.items()
        ]
        scores.sort(key=lambda score: (score.average_rating, score.review_count, score.post_count), reverse=True)
        return scores[:limit]
