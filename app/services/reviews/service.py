"""Service layer for reviews and their vote-ranked listings."""

from __future__ import annotations

import logging
import math

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database.query_helpers import optimize_count_query, page_to_offset
from app.core.exceptions import (
    DatabaseException,
    OwnershipRequiredException,
    ResourceNotFoundException,
)
from app.modules.restaurants.models import Restaurant
from app.modules.reviews.models import Review
from app.modules.reviews.schemas import (
    AuthorReviewOut,
    AuthorReviewPage,
    RestaurantReviewOut,
    RestaurantReviewPage,
    ReviewCreate,
    ReviewSort,
)
from app.modules.users.models import User
from app.modules.votes.models import Vote, VoteType

logger = logging.getLogger(__name__)

_REVIEW_FIELDS = (
    "id",
    "restaurant_id",
    "author_user_id",
    "content",
    "rating",
    "created_at",
    "updated_at",
)


def _vote_tally():
    """Per-review upvote/downvote sums, computed at query time."""
    return (
        select(
            Vote.review_id.label("review_id"),
            func.sum(case((Vote.vote_type == VoteType.UPVOTE, 1), else_=0)).label(
                "upvotes"
            ),
            func.sum(case((Vote.vote_type == VoteType.DOWNVOTE, 1), else_=0)).label(
                "downvotes"
            ),
        )
        .group_by(Vote.review_id)
        .subquery()
    )


def _total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def _review_fields(review: Review) -> dict:
    return {field: getattr(review, field) for field in _REVIEW_FIELDS}


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def get_review_or_404(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise ResourceNotFoundException("Review", review_id)
        return review

    def create_review(self, *, payload: ReviewCreate, current_user: User) -> Review:
        if self.db.get(Restaurant, payload.restaurant_id) is None:
            raise ResourceNotFoundException("Restaurant", payload.restaurant_id)

        review = Review(
            restaurant_id=payload.restaurant_id,
            author_user_id=current_user.id,
            content=payload.content,
            rating=payload.rating,
        )
        self.db.add(review)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(
                "Failed to create review on restaurant %s",
                payload.restaurant_id,
                exc_info=True,
            )
            raise DatabaseException("Failed to create review")
        self.db.refresh(review)
        logger.info(
            "Review created: id=%s restaurant=%s by user=%s",
            review.id,
            review.restaurant_id,
            current_user.id,
        )
        return review

    def list_for_restaurant(
        self,
        *,
        restaurant_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: ReviewSort = ReviewSort.VOTES,
    ) -> RestaurantReviewPage:
        """Page through a restaurant's reviews with their vote totals."""
        if self.db.get(Restaurant, restaurant_id) is None:
            raise ResourceNotFoundException("Restaurant", restaurant_id)

        offset, limit = page_to_offset(page, limit)
        tally = _vote_tally()
        upvotes = func.coalesce(tally.c.upvotes, 0)
        downvotes = func.coalesce(tally.c.downvotes, 0)
        score = upvotes - downvotes

        query = (
            self.db.query(
                Review,
                User.username,
                upvotes.label("upvotes"),
                downvotes.label("downvotes"),
                score.label("score"),
            )
            .join(User, Review.author_user_id == User.id)
            .outerjoin(tally, tally.c.review_id == Review.id)
            .filter(Review.restaurant_id == restaurant_id)
        )
        total = optimize_count_query(
            self.db.query(Review).filter(Review.restaurant_id == restaurant_id)
        )

        if sort_by == ReviewSort.DATE:
            query = query.order_by(Review.created_at.desc(), Review.id.desc())
        else:
            query = query.order_by(
                score.desc(), Review.created_at.desc(), Review.id.desc()
            )

        rows = query.offset(offset).limit(limit).all()
        reviews = [
            RestaurantReviewOut(
                **_review_fields(review),
                username=username,
                upvotes=up,
                downvotes=down,
                score=net,
            )
            for review, username, up, down, net in rows
        ]
        return RestaurantReviewPage(
            reviews=reviews,
            total=total,
            page=max(1, page),
            total_pages=_total_pages(total, limit),
        )

    def list_for_author(
        self, *, user_id: int, page: int = 1, limit: int = 10
    ) -> AuthorReviewPage:
        author = self.db.get(User, user_id)
        if author is None:
            raise ResourceNotFoundException("User", user_id)

        offset, limit = page_to_offset(page, limit)
        query = (
            self.db.query(Review, Restaurant.name)
            .join(Restaurant, Review.restaurant_id == Restaurant.id)
            .filter(Review.author_user_id == user_id)
        )
        total = optimize_count_query(query)
        rows = (
            query.order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        reviews = [
            AuthorReviewOut(
                **_review_fields(review),
                restaurant_name=restaurant_name,
                username=author.username,
            )
            for review, restaurant_name in rows
        ]
        return AuthorReviewPage(
            reviews=reviews,
            total=total,
            page=max(1, page),
            total_pages=_total_pages(total, limit),
        )

    def delete_review(self, *, review_id: int, current_user: User) -> None:
        review = self.get_review_or_404(review_id)
        if review.author_user_id != current_user.id:
            logger.warning(
                "User %s tried to delete review %s by %s",
                current_user.id,
                review_id,
                review.author_user_id,
            )
            raise OwnershipRequiredException("review")

        try:
            self.db.delete(review)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to delete review %s", review_id, exc_info=True)
            raise DatabaseException("Failed to delete review")
        logger.info("Review deleted: id=%s by user=%s", review_id, current_user.id)


__all__ = ["ReviewService"]
