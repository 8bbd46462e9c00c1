"""Business logic for the review vote ledger.

A (voter, review) pair holds at most one vote. Submitting a vote either
creates it, removes it (same type again) or flips it in place (other type).
Each decision is a conditional single-statement write keyed on the pair, so a
concurrent request can never observe a half-applied ledger.
"""

from __future__ import annotations

import logging
from typing import List, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.db_defaults import utcnow
from app.core.exceptions import (
    DatabaseException,
    InvalidArgumentException,
    ResourceConflictException,
    ResourceNotFoundException,
)
from app.modules.reviews.models import Review
from app.modules.users.models import User
from app.modules.votes.models import Vote, VoteType
from app.modules.votes.schemas import (
    UserVoteStatus,
    VoteCounts,
    VoteOut,
    VoteOutcome,
    VoteResult,
)

logger = logging.getLogger(__name__)

# One retry after losing an insert race on uq_votes_voter_review.
MAX_DECISION_ATTEMPTS = 2


def parse_vote_type(value: Union[str, VoteType, None]) -> VoteType:
    """Coerce raw input into a VoteType or raise InvalidArgumentException."""
    if isinstance(value, VoteType):
        return value
    try:
        return VoteType(value)
    except ValueError:
        raise InvalidArgumentException(
            "vote_type must be 'upvote' or 'downvote'",
            field="vote_type",
        )


class VoteService:
    """Encapsulates the vote ledger workflows on reviews."""

    def __init__(self, db: Session):
        self.db = db

    # ----- Access helpers -----
    def _ensure_review(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if review is None:
            raise ResourceNotFoundException("Review", review_id)
        return review

    def _ensure_voter(self, voter_user_id: int) -> None:
        if self.db.get(User, voter_user_id) is None:
            raise ResourceNotFoundException("User", voter_user_id)

    def _pair_filter(self, review_id: int, voter_user_id: int):
        return (Vote.review_id == review_id, Vote.voter_user_id == voter_user_id)

    # ----- Ledger writes -----
    def submit_vote(
        self,
        *,
        review_id: int,
        current_user: User,
        vote_type: Union[str, VoteType, None],
    ) -> VoteResult:
        """Apply the create/toggle-off/switch decision for the caller's vote."""
        chosen = parse_vote_type(vote_type)
        self._ensure_review(review_id)

        for attempt in range(1, MAX_DECISION_ATTEMPTS + 1):
            try:
                result = self._decide(review_id, current_user.id, chosen)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    "Vote write rejected for user %s on review %s (attempt %d)",
                    current_user.id,
                    review_id,
                    attempt,
                )
                # A foreign-key failure means the review or the voter is gone;
                # only a unique-pair collision is worth deciding again.
                self._ensure_review(review_id)
                self._ensure_voter(current_user.id)
                continue
            except SQLAlchemyError:
                self.db.rollback()
                logger.error(
                    "Failed to record vote for user %s on review %s",
                    current_user.id,
                    review_id,
                    exc_info=True,
                )
                raise DatabaseException("Failed to record vote")

            logger.info(
                "Vote %s: user=%s review=%s type=%s",
                result.outcome.value,
                current_user.id,
                review_id,
                chosen.value,
            )
            return result

        raise ResourceConflictException(
            "Vote changed concurrently; please retry",
            details={"review_id": review_id},
        )

    def _decide(self, review_id: int, voter_user_id: int, chosen: VoteType) -> VoteResult:
        pair = self._pair_filter(review_id, voter_user_id)

        removed = self.db.execute(
            delete(Vote)
            .where(*pair, Vote.vote_type == chosen)
            .execution_options(synchronize_session=False)
        )
        if removed.rowcount:
            return VoteResult(
                outcome=VoteOutcome.REMOVED,
                message=f"Successfully removed {chosen.value}",
                review_id=review_id,
                voter_user_id=voter_user_id,
            )

        switched = self.db.execute(
            update(Vote)
            .where(*pair, Vote.vote_type != chosen)
            .values(vote_type=chosen, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if switched.rowcount:
            vote = self.db.execute(
                select(Vote)
                .where(*pair)
                .execution_options(populate_existing=True)
            ).scalar_one()
            return VoteResult(
                outcome=VoteOutcome.UPDATED,
                message=f"Successfully changed vote to {chosen.value}",
                review_id=review_id,
                voter_user_id=voter_user_id,
                id=vote.id,
                vote_type=chosen,
            )

        vote = Vote(review_id=review_id, voter_user_id=voter_user_id, vote_type=chosen)
        self.db.add(vote)
        self.db.flush()
        return VoteResult(
            outcome=VoteOutcome.CREATED,
            message=f"Successfully added {chosen.value}",
            review_id=review_id,
            voter_user_id=voter_user_id,
            id=vote.id,
            vote_type=chosen,
        )

    def remove_vote(self, *, review_id: int, current_user: User) -> None:
        """Delete the caller's vote on a review, whatever its type."""
        try:
            result = self.db.execute(
                delete(Vote)
                .where(*self._pair_filter(review_id, current_user.id))
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                self.db.rollback()
                raise ResourceNotFoundException("Vote")
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to remove vote on review %s", review_id, exc_info=True)
            raise DatabaseException("Failed to remove vote")

        logger.info("Vote removed: user=%s review=%s", current_user.id, review_id)

    # ----- Ledger reads -----
    def get_vote_counts(self, review_id: int) -> VoteCounts:
        """Count upvotes and downvotes for a review at query time."""
        self._ensure_review(review_id)
        rows = self.db.execute(
            select(Vote.vote_type, func.count(Vote.id))
            .where(Vote.review_id == review_id)
            .group_by(Vote.vote_type)
        ).all()
        tally = {vote_type: count for vote_type, count in rows}
        upvotes = tally.get(VoteType.UPVOTE, 0)
        downvotes = tally.get(VoteType.DOWNVOTE, 0)
        return VoteCounts(
            review_id=review_id,
            upvotes=upvotes,
            downvotes=downvotes,
            score=upvotes - downvotes,
        )

    def get_user_vote(self, *, review_id: int, current_user: User) -> UserVoteStatus:
        self._ensure_review(review_id)
        vote_type = self.db.execute(
            select(Vote.vote_type).where(*self._pair_filter(review_id, current_user.id))
        ).scalar_one_or_none()
        return UserVoteStatus(
            review_id=review_id,
            vote_type=vote_type,
            has_voted=vote_type is not None,
        )

    def list_votes_for_review(self, review_id: int) -> List[VoteOut]:
        self._ensure_review(review_id)
        votes = self.db.scalars(
            select(Vote)
            .where(Vote.review_id == review_id)
            .order_by(Vote.created_at.asc(), Vote.id.asc())
        ).all()
        return [VoteOut.model_validate(vote) for vote in votes]

    def list_votes_for_user(self, current_user: User) -> List[VoteOut]:
        votes = self.db.scalars(
            select(Vote)
            .where(Vote.voter_user_id == current_user.id)
            .order_by(Vote.created_at.asc(), Vote.id.asc())
        ).all()
        return [VoteOut.model_validate(vote) for vote in votes]


__all__ = ["VoteService", "parse_vote_type", "MAX_DECISION_ATTEMPTS"]
