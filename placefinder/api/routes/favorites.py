from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from placefinder.api.deps import get_settings, require_user, unwrap
from placefinder.core.config import Settings
from placefinder.core.db import get_db
from placefinder.places.schemas import FavoriteOut, PaginatedFavorites
from placefinder.places.services.favorites import create_favorite_service

router = APIRouter(prefix="/favorites")


class FavoriteCreate(BaseModel):
    place_id: int = Field(..., ge=1, description="Place to add to favorites")


class FavoriteAddResponse(BaseModel):
    message: str
    created: bool
    favorite: FavoriteOut


class FavoriteCheckResponse(BaseModel):
    is_favorited: bool


@router.post("", response_model=FavoriteAddResponse)
def add_favorite(
    body: FavoriteCreate,
    user_id: int = Depends(require_user),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Add a place to the current user's favorites (idempotent)"""
    added = unwrap(create_favorite_service(db, settings).add_favorite(user_id, body.place_id))
    message = "Place added to favorites" if added.created else "Place already in favorites"
    return FavoriteAddResponse(message=message, created=added.created, favorite=added.favorite)


@router.get("", response_model=PaginatedFavorites)
def list_favorites(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, description="Favorites per page"),
    user_id: int = Depends(require_user),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Current user's favorites, most recently added first"""
    if page_size is not None:
        page_size = min(page_size, settings.max_page_size)
    return unwrap(create_favorite_service(db, settings).list_favorites(user_id, page, page_size))


@router.get("/check/{place_id}", response_model=FavoriteCheckResponse)
def check_favorite(
    place_id: int = Path(..., ge=1),
    user_id: int = Depends(require_user),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    is_favorited = unwrap(create_favorite_service(db, settings).is_favorited(user_id, place_id))
    return FavoriteCheckResponse(is_favorited=is_favorited)


@router.delete("/{favorite_id}")
def remove_favorite(
    favorite_id: int = Path(..., ge=1),
    user_id: int = Depends(require_user),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    unwrap(create_favorite_service(db, settings).remove_favorite(user_id, favorite_id))
    return {"message": "Favorite removed successfully"}
