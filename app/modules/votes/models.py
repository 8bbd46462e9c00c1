"""SQLAlchemy models for review votes."""

from __future__ import annotations

import enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.db_defaults import timestamp_default, utcnow


class VoteType(str, enum.Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Vote(Base):
    """One user's up/down vote on one review; unique per (voter, review)."""

    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    vote_type = Column(
        Enum(
            VoteType,
            name="vote_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    voter_user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    review_id = Column(
        Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    voter = relationship("User", back_populates="votes")
    review = relationship("Review", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("voter_user_id", "review_id", name="uq_votes_voter_review"),
        Index("ix_votes_review_id_vote_type", "review_id", "vote_type"),
        # SQLite would otherwise reuse the id of a toggled-off vote.
        {"sqlite_autoincrement": True},
    )


__all__ = ["Vote", "VoteType"]
