import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from placefinder.api.deps import unwrap
from placefinder.api.main import create_app
from placefinder.core.auth import sign_user_token
from placefinder.core.results import InvalidArgument, NotFound, Ok, ServiceUnavailable, Unauthenticated

from conftest import NEARBY_IDS_BY_DISTANCE, NYC_CENTER, TEST_SECRET

SEARCH_PARAMS = {"lat": NYC_CENTER.lat, "lng": NYC_CENTER.lng, "radius_m": 5000}


@pytest.fixture
def client(settings, engine):
    return TestClient(create_app(settings, engine=engine))


def _auth(user_id):
    return {"Authorization": f"Bearer {sign_user_token(user_id, TEST_SECRET)}"}


@pytest.mark.e2e
def test_search_anonymous(client):
    r = client.get("/api/places/search", params=SEARCH_PARAMS)
    assert r.status_code == 200
    data = r.json()
    assert [row["id"] for row in data["data"]] == NEARBY_IDS_BY_DISTANCE
    assert all("is_favorited" not in row for row in data["data"])
    assert data["pagination"] == {
        "page": 1,
        "page_size": 20,
        "total_records": 7,
        "total_pages": 1,
        "has_next_page": False,
        "has_previous_page": False,
    }


@pytest.mark.e2e
def test_search_with_user_marks_favorites(client):
    r = client.post("/api/favorites", json={"place_id": 8}, headers=_auth(5))
    assert r.status_code == 200

    r = client.get("/api/places/search", params=SEARCH_PARAMS, headers=_auth(5))
    assert r.status_code == 200
    marks = {row["id"]: row["is_favorited"] for row in r.json()["data"]}
    assert marks[8] is True
    assert sum(marks.values()) == 1


@pytest.mark.e2e
def test_search_invalid_token_is_anonymous(client):
    r = client.get("/api/places/search", params=SEARCH_PARAMS, headers={"Authorization": "Bearer 5.bad"})
    assert r.status_code == 200
    assert all("is_favorited" not in row for row in r.json()["data"])


@pytest.mark.e2e
def test_search_filters_and_paging(client):
    r = client.get(
        "/api/places/search",
        params={**SEARCH_PARAMS, "category_id": 3, "keyword": "Coffee"},
    )
    assert [row["name"] for row in r.json()["data"]] == ["Premium Coffee House"]

    r = client.get("/api/places/search", params={**SEARCH_PARAMS, "page": 5, "page_size": 2})
    body = r.json()
    assert body["data"] == []
    assert body["pagination"]["total_pages"] == 4
    assert body["pagination"]["has_next_page"] is False


@pytest.mark.e2e
@pytest.mark.parametrize(
    "override",
    [{"lat": 91}, {"lng": -181}, {"radius_m": 0}, {"page": 0}, {"category_id": 0}],
)
def test_search_rejects_bad_params(client, override):
    r = client.get("/api/places/search", params={**SEARCH_PARAMS, **override})
    assert r.status_code == 422


@pytest.mark.e2e
def test_favorites_require_authentication(client):
    assert client.get("/api/favorites").status_code == 401
    assert client.post("/api/favorites", json={"place_id": 1}).status_code == 401
    r = client.get("/api/favorites", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


@pytest.mark.e2e
def test_favorite_lifecycle(client):
    headers = _auth(5)

    r = client.post("/api/favorites", json={"place_id": 1}, headers=headers)
    assert r.status_code == 200
    first = r.json()
    assert first["created"] is True
    assert first["message"] == "Place added to favorites"

    r = client.post("/api/favorites", json={"place_id": 1}, headers=headers)
    assert r.status_code == 200
    assert r.json()["created"] is False
    assert r.json()["favorite"]["id"] == first["favorite"]["id"]

    r = client.get("/api/favorites/check/1", headers=headers)
    assert r.json() == {"is_favorited": True}

    r = client.get("/api/favorites", headers=headers)
    listing = r.json()
    assert listing["pagination"]["total_records"] == 1
    assert listing["data"][0]["place"]["category_name"] == "Store"

    favorite_id = first["favorite"]["id"]
    assert client.delete(f"/api/favorites/{favorite_id}", headers=_auth(6)).status_code == 404
    assert client.delete(f"/api/favorites/{favorite_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/favorites/{favorite_id}", headers=headers).status_code == 404
    assert client.get("/api/favorites/check/1", headers=headers).json() == {"is_favorited": False}


@pytest.mark.e2e
def test_add_favorite_unknown_place(client):
    r = client.post("/api/favorites", json={"place_id": 9999}, headers=_auth(5))
    assert r.status_code == 404
    assert r.json()["detail"] == "Place not found"


@pytest.mark.e2e
def test_categories_sorted_by_name(client):
    r = client.get("/api/categories")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["data"]] == ["Coffee", "Gas Stations", "Store"]


@pytest.mark.e2e
def test_health(client):
    assert client.get("/api/health").json()["status"] == "ok"
    assert client.get("/api/health/db").json()["scope"] == "db"


@pytest.mark.parametrize(
    "failure,status",
    [
        (NotFound(), 404),
        (InvalidArgument("bad"), 400),
        (Unauthenticated(), 401),
        (ServiceUnavailable(), 503),
    ],
)
def test_unwrap_maps_failures_to_status(failure, status):
    with pytest.raises(HTTPException) as exc:
        unwrap(failure)
    assert exc.value.status_code == status
    assert exc.value.detail == failure.message


def test_unwrap_returns_ok_value():
    assert unwrap(Ok([1, 2])) == [1, 2]
