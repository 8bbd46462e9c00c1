"""Restaurant domain package exports."""

from .models import Restaurant
from .schemas import RestaurantCreate, RestaurantListOut, RestaurantOut

__all__ = [
    "Restaurant",
    "RestaurantCreate",
    "RestaurantOut",
    "RestaurantListOut",
    "RestaurantService",
]


def __getattr__(name: str):
    if name == "RestaurantService":
        from app.services.restaurants.service import (
            RestaurantService as _RestaurantService,
        )

        return _RestaurantService
    raise AttributeError(
        f"module 'app.modules.restaurants' has no attribute {name!r}"
    )
