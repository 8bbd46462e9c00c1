"""Service layer for restaurant listings."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database.query_helpers import optimize_count_query, paginate_query
from app.core.exceptions import (
    DatabaseException,
    OwnershipRequiredException,
    ResourceNotFoundException,
)
from app.modules.restaurants.models import Restaurant
from app.modules.restaurants.schemas import (
    RestaurantCreate,
    RestaurantListOut,
    RestaurantOut,
)
from app.modules.users.models import User
from app.modules.utils.files import delete_image

logger = logging.getLogger(__name__)


class RestaurantService:
    def __init__(self, db: Session):
        self.db = db

    def get_restaurant_or_404(self, restaurant_id: int) -> Restaurant:
        restaurant = self.db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise ResourceNotFoundException("Restaurant", restaurant_id)
        return restaurant

    def create_restaurant(
        self,
        *,
        payload: RestaurantCreate,
        current_user: User,
        image_path: Optional[str] = None,
    ) -> Restaurant:
        restaurant = Restaurant(
            **payload.model_dump(),
            image_path=image_path,
            creator_user_id=current_user.id,
        )
        self.db.add(restaurant)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            delete_image(image_path)
            logger.error("Failed to create restaurant %r", payload.name, exc_info=True)
            raise DatabaseException("Failed to create restaurant")
        self.db.refresh(restaurant)
        logger.info(
            "Restaurant created: id=%s name=%r by user=%s",
            restaurant.id,
            restaurant.name,
            current_user.id,
        )
        return restaurant

    def list_restaurants(
        self, *, name: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> RestaurantListOut:
        query = self.db.query(Restaurant)
        if name:
            query = query.filter(Restaurant.name == name)
        total = optimize_count_query(query)
        restaurants = paginate_query(
            query.order_by(Restaurant.created_at.desc(), Restaurant.id.desc()),
            skip,
            limit,
        ).all()
        return RestaurantListOut(
            restaurants=[RestaurantOut.model_validate(r) for r in restaurants],
            total=total,
        )

    def search_restaurants(self, query_text: str, *, limit: int = 50) -> List[RestaurantOut]:
        """Case-insensitive substring match on the restaurant name."""
        pattern = f"%{query_text.strip()}%"
        restaurants = paginate_query(
            self.db.query(Restaurant)
            .filter(Restaurant.name.ilike(pattern))
            .order_by(Restaurant.name.asc(), Restaurant.id.asc()),
            0,
            limit,
        ).all()
        return [RestaurantOut.model_validate(r) for r in restaurants]

    def delete_restaurant(self, *, restaurant_id: int, current_user: User) -> None:
        restaurant = self.get_restaurant_or_404(restaurant_id)
        if restaurant.creator_user_id != current_user.id:
            logger.warning(
                "User %s tried to delete restaurant %s owned by %s",
                current_user.id,
                restaurant_id,
                restaurant.creator_user_id,
            )
            raise OwnershipRequiredException("restaurant")

        image_path = restaurant.image_path
        try:
            self.db.delete(restaurant)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to delete restaurant %s", restaurant_id, exc_info=True)
            raise DatabaseException("Failed to delete restaurant")

        delete_image(image_path)
        logger.info("Restaurant deleted: id=%s by user=%s", restaurant_id, current_user.id)


__all__ = ["RestaurantService"]
