import pytest
from fastapi.testclient import TestClient

from bizimport.api.app import app
from bizimport.api.deps import get_location_config, get_places_provider
from bizimport.core.config import settings
from bizimport.core.errors import PlacesProviderError
from bizimport.core.nodes.location import LocationConfig

from .helpers import LONDON, FakeProvider, make_place

HEADERS = {"X-API-Key": "test-key"}


@pytest.fixture
def provider():
    return FakeProvider(by_type={"cafe": [make_place("good"), make_place("low", rating=3.0)]})


@pytest.fixture
def client(monkeypatch, provider):
    monkeypatch.setattr(settings, "api_key", "test-key")
    app.dependency_overrides[get_places_provider] = lambda: provider
    app.dependency_overrides[get_location_config] = lambda: LocationConfig(
        default_lat=LONDON[0], default_lng=LONDON[1], default_name="London"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_is_public(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_api_key_required(client):
    assert client.get("/v1/categories").status_code == 401
    assert client.get("/v1/categories", headers={"X-API-Key": "wrong"}).status_code == 401


def test_categories(client):
    resp = client.get("/v1/categories", headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body) == 20
    cafe = next(c for c in body if c["key"] == "cafe")
    assert cafe == {
        "key": "cafe",
        "display_name": "Cafe / Coffee Shop",
        "google_types": ["cafe", "coffee_shop"],
        "type_count": 2,
    }


def test_estimate(client):
    resp = client.post("/v1/import/estimate", json={"category": "restaurant", "radius_meters": 20000}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"requests": 375, "grid_points": 25, "type_count": 15, "high_cost": True}


def test_estimate_unknown_category_is_zero(client):
    resp = client.post("/v1/import/estimate", json={"category": "spaceport", "radius_meters": 9000}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"requests": 0, "grid_points": 1, "type_count": 0, "high_cost": False}


def test_preview(client, provider):
    resp = client.post(
        "/v1/import/preview",
        json={"category": "cafe", "location": "", "radius": 1000, "min_rating": 4.5, "max_results": 10},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert [r["place_id"] for r in body["results"]] == ["good"]
    assert body["total_raw"] == 2
    assert body["total_found"] == 1
    assert body["total_rejected"] == 1
    assert body["search"]["resolution_method"] == "default_center"
    assert body["search"]["resolved_location"] == "London"
    assert body["search"]["grid_points"] == 1
    assert body["search"]["requests_made"] == 2
    assert len(provider.calls) == 2


def test_preview_bad_rating_is_400(client):
    resp = client.post(
        "/v1/import/preview",
        json={"category": "cafe", "radius": 1000, "min_rating": 3.5},
        headers=HEADERS,
    )
    assert resp.status_code == 400
    assert "4.4" in resp.json()["detail"]


def test_preview_provider_failure_is_502(client, provider):
    provider.error = PlacesProviderError("quota exhausted")
    resp = client.post("/v1/import/preview", json={"category": "cafe", "radius": 1000}, headers=HEADERS)
    assert resp.status_code == 502
    assert "quota exhausted" in resp.json()["detail"]


def test_preview_reports_failed_types_as_warnings(client, provider):
    provider.failing_types = {"coffee_shop"}
    resp = client.post("/v1/import/preview", json={"category": "cafe", "radius": 1000}, headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert [r["place_id"] for r in body["results"]] == ["good"]
    assert body["search"]["requests_failed"] == 1
    assert len(body["warnings"]) == 1
    assert body["warnings"][0].startswith("coffee_shop at point 1:")


def test_preview_geocode_denied_is_400(client, provider):
    provider.geocode_error = PlacesProviderError("Google geocoding error: REQUEST_DENIED.")
    resp = client.post("/v1/import/preview", json={"category": "cafe", "location": "Bristol", "radius": 1000}, headers=HEADERS)
    assert resp.status_code == 400
    assert "REQUEST_DENIED" in resp.json()["detail"]


def test_estimate_null_radius_is_single_point(client):
    resp = client.post("/v1/import/estimate", json={"category": "cafe", "radius_meters": None}, headers=HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"requests": 2, "grid_points": 1, "type_count": 2, "high_cost": False}


def test_text_search(client, provider):
    provider.text_results = [
        make_place("dishoom", name="Dishoom", primary_type="indian_restaurant", types=["indian_restaurant", "restaurant"]),
        make_place("mystery", name="", primary_type=None, types=["gym"]),
    ]
    resp = client.post(
        "/v1/import/text-search",
        json={"text_query": " Dishoom ", "location": "Shoreditch"},
        headers=HEADERS,
    )
    assert resp.status_code == 200
    body = resp.json()

    query, bias = provider.text_calls[0]
    assert query == "Dishoom in Shoreditch"
    assert (bias.lat, bias.lng, bias.cell_radius_m) == (LONDON[0], LONDON[1], 50000)

    assert body["total_found"] == 2
    first, second = body["results"]
    assert first["place_id"] == "dishoom"
    assert first["system_category"] == "restaurant"
    assert first["category"] == "Restaurant"
    assert first["status"] == "ready"
    assert second["name"] == "Unknown"
    assert second["system_category"] == "fitness"

    assert body["costs"]["preview"]["amount"] == "£0.025"
    assert body["costs"]["import"]["business_count"] == 2
    assert body["costs"]["import"]["estimated_total"] == "£0.03"


@pytest.mark.parametrize("payload", [{"location": "Shoreditch"}, {"text_query": "Dishoom"}, {"text_query": " ", "location": "Soho"}])
def test_text_search_requires_query_and_location(client, provider, payload):
    resp = client.post("/v1/import/text-search", json=payload, headers=HEADERS)
    assert resp.status_code == 400
    assert provider.text_calls == []
