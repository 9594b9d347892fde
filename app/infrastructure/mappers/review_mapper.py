"""
Review mapper.
"""

from app.domain.models.review import Review
from app.infrastructure.db.models import FreelancerPostReviewModel


class ReviewMapper:
    """Maps between Review and FreelancerPostReviewModel."""
    
    def domain_to_model(self, review: Review) -> FreelancerPostReviewModel:
        model = FreelancerPostReviewModel(id=review.id)
        self.update_model(model, review)
        return model
    
    def update_model(self, model: FreelancerPostReviewModel, review: Review) -> None:
        model.post_id = review.post_id
        model.user_id = review.user_id
        model.rating = review.rating
        model.comment = review.comment
        model.created_at = review.created_at
        model.updated_at = review.updated_at
    
    def model_to_domain(self, model: FreelancerPostReviewModel) -> Review:
        return Review(
            id=model.id,
            post_id=model.post_id,
            user_id=model.user_id,
            rating=model.rating,
            comment=model.comment,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
