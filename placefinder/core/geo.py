"""Spherical distance and bounding-box helpers.

``distance_expression`` is what queries filter and sort on; ``haversine_m``
is its pure-Python mirror.
"""

import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Float, func

EARTH_RADIUS_M = 6371000.0


def is_real_number(value) -> bool:
    """int or float, finite; bools and numeric strings are rejected"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def is_valid(self) -> bool:
        """Finite and inside lat [-90, 90], lng [-180, 180]"""
        if not (is_real_number(self.lat) and is_real_number(self.lng)):
            return False
        return -90 <= self.lat <= 90 and -180 <= self.lng <= 180


@dataclass(frozen=True)
class BoundingBox:
    lat_min: float
    lat_max: float
    # None when the box wraps a pole or the antimeridian; only the latitude band applies
    lng_min: Optional[float] = None
    lng_max: Optional[float] = None


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Calculate distance between two points in meters"""
    la1, lo1, la2, lo2 = map(math.radians, [a.lat, a.lng, b.lat, b.lng])
    h = (
        math.sin((la2 - la1) / 2) ** 2
        + math.cos(la1) * math.cos(la2) * math.sin((lo2 - lo1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def distance_expression(lat_col, lng_col, center: GeoPoint):
    """Haversine distance in meters from ``center`` to the row's (lat, lng), as SQL.

    Uses radians/sin/cos/asin/sqrt/least only; SQLite connections get them
    registered in ``placefinder.core.db``.
    """
    half_dlat = func.radians(lat_col - center.lat) / 2.0
    half_dlng = func.radians(lng_col - center.lng) / 2.0
    h = (
        func.sin(half_dlat) * func.sin(half_dlat)
        + func.cos(func.radians(center.lat))
        * func.cos(func.radians(lat_col))
        * func.sin(half_dlng) * func.sin(half_dlng)
    )
    # least() clamps float noise that would push asin out of its domain
    return (2 * EARTH_RADIUS_M) * func.asin(func.least(1.0, func.sqrt(h)), type_=Float)


def bounding_box(center: GeoPoint, radius_m: float, meters_per_degree: float = 111000.0) -> BoundingBox:
    """Box that always encloses the radius circle around ``center``.

    Latitude degrees are treated as fixed length; longitude degrees shrink
    with cos(lat) so the box is widened accordingly.
    """
    lat_delta = radius_m / meters_per_degree
    lat_min = max(-90.0, center.lat - lat_delta)
    lat_max = min(90.0, center.lat + lat_delta)

    if lat_min <= -90.0 or lat_max >= 90.0:
        return BoundingBox(lat_min, lat_max)

    # widest longitude span inside the band is at the latitude furthest from the equator
    cos_lat = math.cos(math.radians(max(abs(lat_min), abs(lat_max))))
    lng_delta = lat_delta / cos_lat
    lng_min = center.lng - lng_delta
    lng_max = center.lng + lng_delta
    if lng_min < -180.0 or lng_max > 180.0:
        return BoundingBox(lat_min, lat_max)

    return BoundingBox(lat_min, lat_max, lng_min, lng_max)
