"""Pydantic schemas for reviews and their paginated listings."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ReviewSort(str, enum.Enum):
    VOTES = "votes"
    DATE = "date"


class ReviewCreate(BaseModel):
    restaurant_id: int = Field(
        ..., validation_alias=AliasChoices("restaurant_id", "restaurantId")
    )
    content: str = Field(..., min_length=1, max_length=5000)
    rating: int = Field(..., ge=1, le=5)


class ReviewOut(BaseModel):
    id: int
    restaurant_id: int
    author_user_id: int
    content: str
    rating: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RestaurantReviewOut(ReviewOut):
    """Review as shown on a restaurant page, with vote totals."""

    username: str
    upvotes: int = 0
    downvotes: int = 0
    score: int = 0


class AuthorReviewOut(ReviewOut):
    """Review as shown on an author's profile."""

    restaurant_name: str
    username: str


class RestaurantReviewPage(BaseModel):
    reviews: List[RestaurantReviewOut]
    total: int
    page: int
    total_pages: int


class AuthorReviewPage(BaseModel):
    reviews: List[AuthorReviewOut]
    total: int
    page: int
    total_pages: int


__all__ = [
    "ReviewSort",
    "ReviewCreate",
    "ReviewOut",
    "RestaurantReviewOut",
    "AuthorReviewOut",
    "RestaurantReviewPage",
    "AuthorReviewPage",
]
