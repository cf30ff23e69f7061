from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from placefinder.core.db import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    slug = Column(String(128), nullable=False, unique=True)


class Place(Base):
    __tablename__ = "places"
    __table_args__ = (
        CheckConstraint("lat >= -90 AND lat <= 90", name="ck_places_lat_range"),
        CheckConstraint("lng >= -180 AND lng <= 180", name="ck_places_lng_range"),
        # bounding-box pre-filter
        Index("ix_places_lat_lng", "lat", "lng"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    # Location pair, range-checked by the table constraints
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "place_id", name="uq_favorites_user_place"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

