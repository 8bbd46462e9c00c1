"""Pydantic schemas for the vote ledger."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .models import VoteType


class VoteOutcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class VoteBody(BaseModel):
    """Body of `POST /reviews/{id}/vote`; the review comes from the path."""

    # Kept as a plain string so the ledger owns the upvote/downvote check.
    vote_type: str = Field(..., validation_alias=AliasChoices("vote_type", "voteType"))


class VoteCreate(VoteBody):
    review_id: int = Field(..., validation_alias=AliasChoices("review_id", "reviewId"))


class VoteOut(BaseModel):
    id: int
    vote_type: VoteType
    review_id: int
    voter_user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VoteResult(BaseModel):
    outcome: VoteOutcome
    message: str
    review_id: int
    voter_user_id: int
    id: Optional[int] = None
    vote_type: Optional[VoteType] = None


class VoteCounts(BaseModel):
    review_id: int
    upvotes: int
    downvotes: int
    score: int


class UserVoteStatus(BaseModel):
    review_id: int
    vote_type: Optional[VoteType] = None
    has_voted: bool


__all__ = [
    "VoteOutcome",
    "VoteBody",
    "VoteCreate",
    "VoteOut",
    "VoteResult",
    "VoteCounts",
    "UserVoteStatus",
]
