"""SQLAlchemy models for restaurant listings."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.db_defaults import timestamp_default, utcnow


class Restaurant(Base):
    """A listing created by a user, with a location and a cover image."""

    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    image_path = Column(String, nullable=True)
    creator_user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=timestamp_default(),
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    creator = relationship("User", back_populates="restaurants")
    reviews = relationship(
        "Review",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="latitude_range"),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="longitude_range"
        ),
        Index("ix_restaurants_name", "name"),
        Index("ix_restaurants_creator_user_id", "creator_user_id"),
    )


__all__ = ["Restaurant"]
