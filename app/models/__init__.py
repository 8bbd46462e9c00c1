"""Models package.

Only the declarative `Base` is exported here so `app.core.database` can import it
without pulling in every domain model. Import `app.models.registry` to register
all tables (Alembic, test schema setup, the app factory).
"""

from app.models.base import Base

__all__ = ["Base"]
