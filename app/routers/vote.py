"""Vote router for the review vote ledger."""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app import oauth2
from app.core.config import settings
from app.core.database import get_db
from app.core.middleware.rate_limit import limiter
from app.modules.users.models import User
from app.modules.votes import (
    UserVoteStatus,
    VoteCounts,
    VoteCreate,
    VoteOut,
    VoteOutcome,
    VoteResult,
    VoteService,
)

router = APIRouter(prefix="/votes", tags=["Votes"])


def get_vote_service(db: Session = Depends(get_db)) -> VoteService:
    """Provide a VoteService instance via FastAPI dependency injection."""
    return VoteService(db)


def outcome_status(result: VoteResult) -> int:
    """A newly created vote answers 201; toggles and switches answer 200."""
    if result.outcome == VoteOutcome.CREATED:
        return status.HTTP_201_CREATED
    return status.HTTP_200_OK


@router.post("", response_model=VoteResult)
@limiter.limit(settings.rate_limit_vote)
def submit_vote(
    request: Request,
    response: Response,
    vote: VoteCreate,
    service: VoteService = Depends(get_vote_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Create, toggle off, or switch the caller's vote on a review."""
    result = service.submit_vote(
        review_id=vote.review_id,
        current_user=current_user,
        vote_type=vote.vote_type,
    )
    response.status_code = outcome_status(result)
    return result


@router.delete("/review/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_vote(
    review_id: int,
    service: VoteService = Depends(get_vote_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Remove the caller's vote from a review."""
    service.remove_vote(review_id=review_id, current_user=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/review/{review_id}", response_model=List[VoteOut])
def list_review_votes(
    review_id: int,
    service: VoteService = Depends(get_vote_service),
):
    return service.list_votes_for_review(review_id)


@router.get("/review/{review_id}/counts", response_model=VoteCounts)
def get_vote_counts(
    review_id: int,
    service: VoteService = Depends(get_vote_service),
):
    """Get the upvote/downvote totals and score for a review."""
    return service.get_vote_counts(review_id)


@router.get("/review/{review_id}/user", response_model=UserVoteStatus)
def get_my_vote(
    review_id: int,
    service: VoteService = Depends(get_vote_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Report the caller's current vote on a review, if any."""
    return service.get_user_vote(review_id=review_id, current_user=current_user)


@router.get("/user", response_model=List[VoteOut])
def list_my_votes(
    service: VoteService = Depends(get_vote_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    return service.list_votes_for_user(current_user)
