"""Centralized API router registration.

Groups (all mounted under `/api` by the app factory):
- Accounts: auth.
- Listings: restaurants, reviews.
- Vote ledger: votes (also reachable per review under `/reviews/{id}/vote`).
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.routers import auth, restaurant, review, vote

API_PREFIX = "/api"

api_router = APIRouter(prefix=API_PREFIX)

api_router.include_router(auth.router)
api_router.include_router(restaurant.router)
api_router.include_router(review.router)
api_router.include_router(vote.router)

ENDPOINT_MAP = {
    "auth": f"{API_PREFIX}/auth",
    "restaurants": f"{API_PREFIX}/restaurants",
    "reviews": f"{API_PREFIX}/reviews",
    "votes": f"{API_PREFIX}/votes",
}


@api_router.get("/health", tags=["Health"])
def health():
    """Report that the API is up, with a map of its route groups."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINT_MAP,
    }
