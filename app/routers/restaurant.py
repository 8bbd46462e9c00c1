"""Restaurant router: listing creation with image upload, browsing and deletion."""

from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Query,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.orm import Session

from app import oauth2
from app.core.database import get_db
from app.modules.restaurants import (
    RestaurantCreate,
    RestaurantListOut,
    RestaurantOut,
    RestaurantService,
)
from app.modules.users.models import User
from app.modules.utils.files import save_image_upload

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])


def get_restaurant_service(db: Session = Depends(get_db)) -> RestaurantService:
    """Provide a RestaurantService instance via FastAPI dependency injection."""
    return RestaurantService(db)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RestaurantOut)
async def create_restaurant(
    name: str = Form(..., min_length=1, max_length=200),
    description: str = Form(..., min_length=1),
    latitude: float = Form(..., ge=-90, le=90),
    longitude: float = Form(..., ge=-180, le=180),
    image: UploadFile = File(...),
    service: RestaurantService = Depends(get_restaurant_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Create a restaurant from a multipart form with a JPEG or PNG image."""
    payload = RestaurantCreate(
        name=name, description=description, latitude=latitude, longitude=longitude
    )
    image_path = await save_image_upload(image)
    return service.create_restaurant(
        payload=payload, current_user=current_user, image_path=image_path
    )


@router.get("", response_model=RestaurantListOut)
def list_restaurants(
    name: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    service: RestaurantService = Depends(get_restaurant_service),
):
    return service.list_restaurants(name=name, skip=skip, limit=limit)


@router.get("/search", response_model=List[RestaurantOut])
def search_restaurants(
    q: str = Query(..., min_length=1),
    service: RestaurantService = Depends(get_restaurant_service),
):
    """Case-insensitive name search."""
    return service.search_restaurants(q)


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(
    restaurant_id: int,
    service: RestaurantService = Depends(get_restaurant_service),
):
    return service.get_restaurant_or_404(restaurant_id)


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: int,
    service: RestaurantService = Depends(get_restaurant_service),
    current_user: User = Depends(oauth2.get_current_user),
):
    """Delete a restaurant the caller created; its reviews and votes go with it."""
    service.delete_restaurant(restaurant_id=restaurant_id, current_user=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
