import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from placefinder.api.deps import get_auth_context, get_settings, unwrap
from placefinder.core.auth import AuthContext
from placefinder.core.config import Settings
from placefinder.core.db import get_db
from placefinder.core.geo import GeoPoint
from placefinder.places.schemas import PaginatedSearchResult
from placefinder.places.services.search import create_search_engine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/places/search",
    response_model=PaginatedSearchResult,
    response_model_exclude_unset=True,
)
def search_places(
    lat: float = Query(..., ge=-90, le=90, description="Center latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Center longitude"),
    radius_m: float = Query(..., gt=0, description="Search radius in meters"),
    category_id: Optional[int] = Query(None, ge=1, description="Category filter"),
    keyword: Optional[str] = Query(None, max_length=100, description="Substring of the place name"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, description="Results per page"),
    auth: AuthContext = Depends(get_auth_context),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Search places near a point, nearest first"""
    if page_size is not None:
        page_size = min(page_size, settings.max_page_size)

    logger.debug("Search places request from user %s", auth.user_id or "anonymous")
    search_engine = create_search_engine(db, settings)
    return unwrap(
        search_engine.search(
            GeoPoint(lat, lng),
            radius_m,
            category_id=category_id,
            keyword=keyword,
            page=page,
            page_size=page_size,
            user_id=auth.user_id,
        )
    )
