"""Review domain public exports."""

from .models import Review
from .schemas import (
    AuthorReviewOut,
    AuthorReviewPage,
    RestaurantReviewOut,
    RestaurantReviewPage,
    ReviewCreate,
    ReviewOut,
    ReviewSort,
)

__all__ = [
    "Review",
    "ReviewSort",
    "ReviewCreate",
    "ReviewOut",
    "RestaurantReviewOut",
    "RestaurantReviewPage",
    "AuthorReviewOut",
    "AuthorReviewPage",
    "ReviewService",
]


def __getattr__(name: str):
    if name == "ReviewService":
        from app.services.reviews.service import ReviewService as _ReviewService

        return _ReviewService
    raise AttributeError(f"module 'app.modules.reviews' has no attribute {name!r}")
