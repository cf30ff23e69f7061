#!/usr/bin/env python3
"""Nearby place search: count, fetch by distance, favorite overlay, paginate"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from placefinder.core.config import Settings
from placefinder.core.geo import GeoPoint, is_real_number
from placefinder.core.results import InvalidArgument, Ok, Result, ServiceUnavailable
from placefinder.places.repository import FavoriteRepository, PlaceRepository
from placefinder.places.schemas import PaginatedSearchResult
from placefinder.places.services.filters import SearchFilterBuilder
from placefinder.places.services.overlay import FavoriteOverlay
from placefinder.places.services.pagination import (
    build_pagination,
    normalize_page,
    normalize_page_size,
    page_offset,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class PlaceSearchEngine:
    """Search places within a radius of a center point.

    The same predicate drives both the COUNT and the page fetch, so
    ``total_records`` never disagrees with what paging walks through.
    """

    def __init__(
        self,
        places: PlaceRepository,
        overlay: FavoriteOverlay,
        filter_builder: SearchFilterBuilder,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        db: Optional[Session] = None,
    ):
        self.places = places
        self.overlay = overlay
        self.filter_builder = filter_builder
        self.default_page_size = default_page_size
        self.db = db

    def search(
        self,
        center: GeoPoint,
        radius_m: float,
        category_id: Optional[int] = None,
        keyword: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Result:
        if center is None or not center.is_valid():
            return InvalidArgument("center must be a finite lat in [-90, 90] and lng in [-180, 180]")
        if not is_real_number(radius_m) or radius_m <= 0:
            return InvalidArgument("radius_m must be a positive number")

        page = normalize_page(page)
        page_size = normalize_page_size(page_size, self.default_page_size)

        search_filter = self.filter_builder.build(center, radius_m, category_id, keyword)

        try:
            total_records = self.places.count_matching(search_filter)
            results = self.places.fetch_matching(
                search_filter,
                offset=page_offset(page, page_size),
                limit=page_size,
            )
            self.overlay.apply(results, user_id)
        except SQLAlchemyError:
            logger.exception("Place search failed")
            if self.db is not None:
                self.db.rollback()
            return ServiceUnavailable("Place search is temporarily unavailable")

        pagination = build_pagination(total_records, page, page_size)
        logger.info(
            "place search",
            extra={
                "lat": center.lat,
                "lng": center.lng,
                "radius_m": radius_m,
                "filters": search_filter.names,
                "total_records": total_records,
                "page": page,
                "returned": len(results),
            },
        )
        return Ok(PaginatedSearchResult(data=results, pagination=pagination))


def create_search_engine(db: Session, settings: Settings) -> PlaceSearchEngine:
    """Factory function to create PlaceSearchEngine instance"""
    return PlaceSearchEngine(
        places=PlaceRepository(db),
        overlay=FavoriteOverlay(FavoriteRepository(db)),
        filter_builder=SearchFilterBuilder(settings.meters_per_degree),
        default_page_size=settings.search_default_page_size,
        db=db,
    )
