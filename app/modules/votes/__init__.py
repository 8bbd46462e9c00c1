"""Vote ledger public exports."""

from .models import Vote, VoteType
from .schemas import (
    UserVoteStatus,
    VoteBody,
    VoteCounts,
    VoteCreate,
    VoteOut,
    VoteOutcome,
    VoteResult,
)

__all__ = [
    "Vote",
    "VoteType",
    "VoteOutcome",
    "VoteBody",
    "VoteCreate",
    "VoteOut",
    "VoteResult",
    "VoteCounts",
    "UserVoteStatus",
    "VoteService",
]


def __getattr__(name: str):
    """Resolve the service lazily so importing models never pulls in services."""
    if name == "VoteService":
        from app.services.votes.vote_service import VoteService as _VoteService

        return _VoteService
    raise AttributeError(f"module 'app.modules.votes' has no attribute {name!r}")
