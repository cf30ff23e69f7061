import pytest

from placefinder.core.config import Settings
from placefinder.core.db import Base, create_db_engine, create_session_factory
from placefinder.core.geo import GeoPoint
from placefinder.places.models import Category, Place

TEST_SECRET = "test-secret"

# Central coordinate for reference: New York City
NYC_CENTER = GeoPoint(40.7128, -74.0060)

CATEGORIES = [
    {"id": 1, "name": "Store", "slug": "store"},
    {"id": 2, "name": "Gas Stations", "slug": "gas-stations"},
    {"id": 3, "name": "Coffee", "slug": "coffee"},
]

PLACES = [
    {"id": 1, "name": "Downtown Grocery", "category_id": 1, "lat": 40.7228, "lng": -74.0160},      # ~1.4km
    {"id": 2, "name": "City Mart", "category_id": 1, "lat": 40.7328, "lng": -74.0260},             # ~2.8km
    {"id": 3, "name": "Suburban Shop", "category_id": 1, "lat": 40.8128, "lng": -74.1060},         # ~14km
    {"id": 4, "name": "Quick Fill Gas", "category_id": 2, "lat": 40.7178, "lng": -74.0100},        # ~0.65km
    {"id": 5, "name": "Urban Gas Station", "category_id": 2, "lat": 40.7328, "lng": -73.9760},     # ~3.4km
    {"id": 6, "name": "Highway Fuel Stop", "category_id": 2, "lat": 40.6128, "lng": -73.8060},     # ~20km
    {"id": 7, "name": "Morning Brew Café", "category_id": 3, "lat": 40.7158, "lng": -74.0020},     # ~0.5km
    {"id": 8, "name": "Espresso Corner", "category_id": 3, "lat": 40.7278, "lng": -73.9960},       # ~1.9km
    {"id": 9, "name": "Premium Coffee House", "category_id": 3, "lat": 40.7428, "lng": -73.9760},  # ~4.2km
    {"id": 10, "name": "Suburban Coffee Shop", "category_id": 3, "lat": 40.5128, "lng": -73.9060}, # ~24km
]

# ids within 5000m of NYC_CENTER, nearest first
NEARBY_IDS_BY_DISTANCE = [7, 4, 1, 8, 2, 5, 9]


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", secret_key=TEST_SECRET, _env_file=None)


def seed_places(engine):
    Base.metadata.create_all(engine)

    session = create_session_factory(engine)()
    session.add_all(Category(**c) for c in CATEGORIES)
    session.flush()
    session.add_all(Place(**p) for p in PLACES)
    session.commit()
    session.close()


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    seed_places(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
