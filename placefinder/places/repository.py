"""
Typed repositories over the places store.

Each repository wraps one SQLAlchemy ``Session`` and owns the queries for a
single entity. Commit/rollback is left to the calling service.
"""

from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from placefinder.places.models import Category, Favorite, Place
from placefinder.places.schemas import SearchResult
from placefinder.places.services.filters import SearchFilter


class PlaceRepository:
    """Geo index over places: count and ordered/bounded fetch by distance."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, place_id: int) -> bool:
        stmt = select(Place.id).where(Place.id == place_id)
        return self.db.execute(stmt).first() is not None

    def count_matching(self, search_filter: SearchFilter) -> int:
        stmt = (
            select(func.count(Place.id))
            .select_from(Place)
            .join(Category, Place.category_id == Category.id)
            .where(search_filter.where())
        )
        return int(self.db.execute(stmt).scalar() or 0)

    def fetch_matching(self, search_filter: SearchFilter, offset: int, limit: int) -> List[SearchResult]:
        """Matching places ordered by distance ascending, one page."""
        distance = search_filter.distance().label("distance_m")
        stmt = (
            select(
                Place.id,
                Place.name,
                Place.category_id,
                Place.lat,
                Place.lng,
                distance,
                Category.name.label("category_name"),
            )
            .join(Category, Place.category_id == Category.id)
            .where(search_filter.where())
            .order_by(distance, Place.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            SearchResult(
                id=row.id,
                name=row.name,
                category_id=row.category_id,
                category_name=row.category_name,
                lat=row.lat,
                lng=row.lng,
                distance_m=max(0.0, float(row.distance_m)),
            )
            for row in self.db.execute(stmt)
        ]


class FavoriteRepository:
    def __init__(self, db: Session):
        self.db = db

    def favorited_place_ids(self, user_id: int, place_ids: Iterable[int]) -> Set[int]:
        """One membership query for (user_id, place_id in place_ids)."""
        place_ids = list(place_ids)
        if not place_ids:
            return set()
        stmt = select(Favorite.place_id).where(
            Favorite.user_id == user_id,
            Favorite.place_id.in_(place_ids),
        )
        return set(self.db.execute(stmt).scalars())

    def find(self, user_id: int, place_id: int) -> Optional[Favorite]:
        stmt = select(Favorite).where(Favorite.user_id == user_id, Favorite.place_id == place_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, user_id: int, place_id: int) -> bool:
        stmt = select(Favorite.id).where(Favorite.user_id == user_id, Favorite.place_id == place_id)
        return self.db.execute(stmt).first() is not None

    def insert_if_absent(self, user_id: int, place_id: int) -> Tuple[Optional[Favorite], bool]:
        """Atomic insert guarded by the (user_id, place_id) unique constraint.

        Returns the row for the pair and whether this call created it. A row
        deleted between the skipped insert and the read is inserted once more;
        ``(None, False)`` means it was deleted again before it could be read.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            insert = postgresql.insert
        elif dialect == "sqlite":
            insert = sqlite.insert
        else:
            raise RuntimeError(f"insert-if-absent not supported on dialect '{dialect}'")

        stmt = (
            insert(Favorite)
            .values(user_id=user_id, place_id=place_id)
            .on_conflict_do_nothing(index_elements=["user_id", "place_id"])
        )
        for _ in range(2):
            created = self.db.execute(stmt).rowcount == 1
            favorite = self.find(user_id, place_id)
            if favorite is not None:
                return favorite, created
        return None, False

    def delete_owned(self, user_id: int, favorite_id: int) -> bool:
        stmt = delete(Favorite).where(Favorite.id == favorite_id, Favorite.user_id == user_id)
        return self.db.execute(stmt).rowcount == 1

    def count_for_user(self, user_id: int) -> int:
        stmt = select(func.count(Favorite.id)).where(Favorite.user_id == user_id)
        return int(self.db.execute(stmt).scalar() or 0)

    def list_for_user(self, user_id: int, offset: int, limit: int) -> List[Tuple[Favorite, Place, str]]:
        """Newest first, each row with its place and the place's category name."""
        stmt = (
            select(Favorite, Place, Category.name)
            .join(Place, Favorite.place_id == Place.id)
            .join(Category, Place.category_id == Category.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(fav, place, category_name) for fav, place, category_name in self.db.execute(stmt)]


class CategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Category]:
        stmt = select(Category).order_by(Category.name.asc())
        return list(self.db.execute(stmt).scalars())
