"""Aggregated ORM model registry.

Importing this module registers every table on `Base.metadata`, which is what
Alembic and the test schema setup rely on.
"""

from app.models.base import Base
from app.modules.restaurants.models import Restaurant
from app.modules.reviews.models import Review
from app.modules.users.models import User
from app.modules.votes.models import Vote, VoteType

__all__ = ["Base", "User", "Restaurant", "Review", "Vote", "VoteType"]
