"""Conjunctive match predicate for nearby place search"""

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import and_

from placefinder.core.geo import GeoPoint, bounding_box, distance_expression
from placefinder.places.models import Place


@dataclass(frozen=True, eq=False)
class FilterClause:
    name: str
    expression: object


@dataclass(eq=False)
class SearchFilter:
    """Ordered clauses, AND-combined. Shared verbatim by the count and fetch queries."""
    center: GeoPoint
    radius_m: float
    clauses: List[FilterClause] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.clauses]

    def where(self):
        return and_(*(c.expression for c in self.clauses))

    def distance(self):
        return distance_expression(Place.lat, Place.lng, self.center)


def normalize_keyword(keyword: Optional[str]) -> Optional[str]:
    if keyword is None:
        return None
    keyword = keyword.strip()
    return keyword or None


class SearchFilterBuilder:
    def __init__(self, meters_per_degree: float = 111000.0):
        self.meters_per_degree = meters_per_degree

    def build(
        self,
        center: GeoPoint,
        radius_m: float,
        category_id: Optional[int] = None,
        keyword: Optional[str] = None,
    ) -> SearchFilter:
        search_filter = SearchFilter(center=center, radius_m=radius_m)
        clauses = search_filter.clauses

        # Exact spherical distance is always first and always applied
        clauses.append(FilterClause("distance", search_filter.distance() <= radius_m))

        box = bounding_box(center, radius_m, self.meters_per_degree)
        box_expr = [Place.lat.between(box.lat_min, box.lat_max)]
        if box.lng_min is not None:
            box_expr.append(Place.lng.between(box.lng_min, box.lng_max))
        clauses.append(FilterClause("bounding_box", and_(*box_expr)))

        if category_id is not None:
            clauses.append(FilterClause("category", Place.category_id == category_id))

        keyword = normalize_keyword(keyword)
        if keyword:
            clauses.append(FilterClause("keyword", Place.name.icontains(keyword, autoescape=True)))

        return search_filter
