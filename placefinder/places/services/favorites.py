"""Favorite places: add/remove/check/list for one user, one transaction per call"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from placefinder.core.config import Settings
from placefinder.core.results import NotFound, Ok, Result, ServiceUnavailable
from placefinder.places.repository import FavoriteRepository, PlaceRepository
from placefinder.places.schemas import (
    FavoriteAdded,
    FavoriteEntry,
    FavoriteOut,
    PaginatedFavorites,
    PlaceOut,
)
from placefinder.places.services.pagination import (
    build_pagination,
    normalize_page,
    normalize_page_size,
    page_offset,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
PLACE_NOT_FOUND = "Place not found"
FAVORITE_NOT_FOUND = "Favorite not found"


class FavoriteService:
    def __init__(
        self,
        db: Session,
        favorites: FavoriteRepository,
        places: PlaceRepository,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.db = db
        self.favorites = favorites
        self.places = places
        self.default_page_size = default_page_size

    def _unavailable(self, operation: str) -> ServiceUnavailable:
        logger.exception("Favorite %s failed", operation)
        self.db.rollback()
        return ServiceUnavailable(f"Could not {operation} favorite")

    def add_favorite(self, user_id: int, place_id: int) -> Result:
        """Idempotent: a repeat add returns the existing row with created=False."""
        try:
            if not self.places.exists(place_id):
                return NotFound(PLACE_NOT_FOUND)
            favorite, created = self.favorites.insert_if_absent(user_id, place_id)
            if favorite is None:
                self.db.rollback()
                logger.warning(
                    "Favorite removed concurrently while being added",
                    extra={"user_id": user_id, "place_id": place_id},
                )
                return ServiceUnavailable("Could not add favorite")
            self.db.commit()
        except IntegrityError:
            # place removed between the existence check and the insert
            self.db.rollback()
            logger.info("Favorite add lost race with place delete", extra={"place_id": place_id})
            return NotFound(PLACE_NOT_FOUND)
        except SQLAlchemyError:
            return self._unavailable("add")

        if created:
            logger.info("Favorite added", extra={"user_id": user_id, "place_id": place_id})
        return Ok(FavoriteAdded(favorite=FavoriteOut.model_validate(favorite), created=created))

    def remove_favorite(self, user_id: int, favorite_id: int) -> Result:
        """Missing and not-owned are reported identically."""
        try:
            deleted = self.favorites.delete_owned(user_id, favorite_id)
            if not deleted:
                self.db.rollback()
                return NotFound(FAVORITE_NOT_FOUND)
            self.db.commit()
        except SQLAlchemyError:
            return self._unavailable("remove")

        logger.info("Favorite removed", extra={"user_id": user_id, "favorite_id": favorite_id})
        return Ok(None)

    def is_favorited(self, user_id: int, place_id: int) -> Result:
        try:
            return Ok(self.favorites.exists(user_id, place_id))
        except SQLAlchemyError:
            return self._unavailable("check")

    def list_favorites(
        self,
        user_id: int,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> Result:
        page = normalize_page(page)
        page_size = normalize_page_size(page_size, self.default_page_size)

        try:
            total_records = self.favorites.count_for_user(user_id)
            rows = self.favorites.list_for_user(user_id, page_offset(page, page_size), page_size)
        except SQLAlchemyError:
            return self._unavailable("list")

        data = [
            FavoriteEntry(
                id=favorite.id,
                place_id=favorite.place_id,
                created_at=favorite.created_at,
                place=PlaceOut(
                    id=place.id,
                    name=place.name,
                    category_id=place.category_id,
                    category_name=category_name,
                    lat=place.lat,
                    lng=place.lng,
                    created_at=place.created_at,
                    updated_at=place.updated_at,
                ),
            )
            for favorite, place, category_name in rows
        ]
        return Ok(PaginatedFavorites(data=data, pagination=build_pagination(total_records, page, page_size)))


def create_favorite_service(db: Session, settings: Settings) -> FavoriteService:
    return FavoriteService(
        db=db,
        favorites=FavoriteRepository(db),
        places=PlaceRepository(db),
        default_page_size=settings.favorites_default_page_size,
    )
