"""Pydantic schemas for restaurant listings."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RestaurantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class RestaurantCreate(RestaurantBase):
    pass


class RestaurantOut(RestaurantBase):
    id: int
    image_path: Optional[str] = None
    creator_user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RestaurantListOut(BaseModel):
    restaurants: List[RestaurantOut]
    total: int


__all__ = ["RestaurantBase", "RestaurantCreate", "RestaurantOut", "RestaurantListOut"]
