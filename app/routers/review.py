"""Review router: posting, listing and deleting reviews, plus per-review voting."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from app import oauth2
from app.core.config import settings
from app.core.database import get_db
from app.core.middleware.rate_limit import limiter
from app.modules.reviews import (
    AuthorReviewPage,
    RestaurantReviewPage,
    ReviewCreate,
    ReviewOut,
    ReviewService,
    ReviewSort,
)
from app.modules.users.models import User
from app.modules.votes import VoteBody, VoteCounts, VoteResult, VoteService

from .vote import get_vote_service, outcome_status

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Provide a ReviewService instance via FastAPI dependency injection."""
    return ReviewService(db)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReviewOut)
def create_review(
    payload: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    return service.create_review(payload=payload, current_user=current_user)


@router.get("/restaurant/{restaurant_id}", response_model=RestaurantReviewPage)
def list_restaurant_reviews(
    restaurant_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Optional[ReviewSort] = Query(None),
    sort_by_camel: Optional[ReviewSort] = Query(
        None, alias="sortBy", include_in_schema=False
    ),
    service: ReviewService = Depends(get_review_service),
):
    """Page through a restaurant's reviews, best-voted or newest first.

    The order is read from `sort_by` or its camelCase twin `sortBy`.
    """
    return service.list_for_restaurant(
        restaurant_id=restaurant_id,
        page=page,
        limit=limit,
        sort_by=sort_by or sort_by_camel or ReviewSort.VOTES,
    )


@router.get("/user/{user_id}", response_model=AuthorReviewPage)
def list_user_reviews(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
):
    return service.list_for_author(user_id=user_id, page=page, limit=limit)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    service: ReviewService = Depends(get_review_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Delete one of the caller's reviews together with its votes."""
    service.delete_review(review_id=review_id, current_user=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{review_id}/vote", response_model=VoteResult)
@limiter.limit(settings.rate_limit_vote)
def vote_on_review(
    request: Request,
    response: Response,
    review_id: int,
    vote: VoteBody,
    service: VoteService = Depends(get_vote_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Same ledger decision as `POST /votes`, with the review taken from the path."""
    result = service.submit_vote(
        review_id=review_id,
        current_user=current_user,
        vote_type=vote.vote_type,
    )
    response.status_code = outcome_status(result)
    return result


@router.get("/{review_id}/votes", response_model=VoteCounts)
def get_review_vote_counts(
    review_id: int,
    service: VoteService = Depends(get_vote_service),
):
    return service.get_vote_counts(review_id)
