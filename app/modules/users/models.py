"""SQLAlchemy models for the users domain."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.db_defaults import timestamp_default, utcnow


class User(Base):
    """Registered account; owns restaurants, reviews and votes."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )

    restaurants = relationship(
        "Restaurant",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reviews = relationship(
        "Review",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes = relationship(
        "Vote",
        back_populates="voter",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["User"]
