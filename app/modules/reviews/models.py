"""SQLAlchemy models for restaurant reviews."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.db_defaults import timestamp_default, utcnow


class Review(Base):
    """Star-rated review. Vote totals are computed from `votes` on read."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    author_user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    restaurant = relationship("Restaurant", back_populates="reviews")
    author = relationship("User", back_populates="reviews")
    votes = relationship(
        "Vote",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
        Index("ix_reviews_restaurant_id", "restaurant_id"),
        Index("ix_reviews_author_user_id", "author_user_id"),
    )


__all__ = ["Review"]
