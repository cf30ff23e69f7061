"""Pydantic schemas returned by the place and favorite services"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    page: int
    page_size: int
    total_records: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class SearchResult(BaseModel):
    """Individual search result.

    ``is_favorited`` stays unset when no user was supplied; serialize with
    ``exclude_unset=True`` so it is omitted rather than false.
    """
    id: int
    name: str
    category_id: int
    category_name: str
    lat: float
    lng: float
    distance_m: float = Field(ge=0)
    is_favorited: Optional[bool] = None


class PaginatedSearchResult(BaseModel):
    data: List[SearchResult]
    pagination: Pagination


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class PlaceOut(BaseModel):
    id: int
    name: str
    category_id: int
    category_name: str
    lat: float
    lng: float
    created_at: datetime
    updated_at: datetime


class FavoriteOut(BaseModel):
    id: int
    user_id: int
    place_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FavoriteAdded(BaseModel):
    favorite: FavoriteOut
    # False when the pair already existed
    created: bool


class FavoriteEntry(BaseModel):
    id: int
    place_id: int
    created_at: datetime
    place: PlaceOut


class PaginatedFavorites(BaseModel):
    data: List[FavoriteEntry]
    pagination: Pagination
