"""
Query helpers for pagination and counting.
"""

from sqlalchemy.orm import Query

MAX_PAGE_SIZE = 100


def paginate_query(query: Query, skip: int = 0, limit: int = 100) -> Query:
    """Apply pagination to a query with validation."""
    limit = min(max(1, limit), MAX_PAGE_SIZE)
    skip = max(0, skip)
    return query.offset(skip).limit(limit)


def page_to_offset(page: int, limit: int) -> tuple[int, int]:
    """Translate a 1-based page number into (offset, clamped limit)."""
    limit = min(max(1, limit), MAX_PAGE_SIZE)
    page = max(1, page)
    return (page - 1) * limit, limit


def optimize_count_query(query: Query) -> int:
    """Return count with ORDER BY removed to avoid inflated totals."""
    return query.order_by(None).count()


__all__ = [
    "paginate_query",
    "page_to_offset",
    "optimize_count_query",
    "MAX_PAGE_SIZE",
]
