import asyncio
import json

import httpx
import pytest

from bizimport.core.errors import PlacesProviderError
from bizimport.core.geo import SearchPoint
from bizimport.providers.google_places import GooglePlacesConfig, GooglePlacesProvider

NEARBY_RESPONSE = {
    "places": [
        {
            "id": "abc123",
            "displayName": {"text": "Monmouth Coffee"},
            "rating": 4.6,
            "userRatingCount": 5210,
            "location": {"latitude": 51.5052, "longitude": -0.0912},
            "types": ["coffee_shop", "cafe", "food"],
            "primaryType": "coffee_shop",
            "businessStatus": "OPERATIONAL",
            "formattedAddress": "2 Park St, London SE1 9AB, UK",
            "photos": [{"name": "places/abc123/photos/p1", "widthPx": 800, "heightPx": 600}],
        },
        {"displayName": {"text": "no id, skipped"}},
    ]
}


def run_with(handler, coro_fn, **cfg):
    async def _run():
        config = GooglePlacesConfig(api_key="k-test", base_backoff_s=0.0, **cfg)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            async with GooglePlacesProvider(config, client=client) as provider:
                return await coro_fn(provider)

    return asyncio.run(_run())


def test_requires_api_key():
    with pytest.raises(ValueError):
        GooglePlacesProvider(GooglePlacesConfig(api_key=""))


def test_search_nearby_builds_request_and_normalizes():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(200, json=NEARBY_RESPONSE)

    point = SearchPoint(51.5, -0.1, 3000)
    places = run_with(handler, lambda p: p.search_nearby("cafe", point))

    req = seen[0]
    assert req.method == "POST"
    assert req.url.path == "/v1/places:searchNearby"
    assert req.headers["X-Goog-Api-Key"] == "k-test"
    assert "places.userRatingCount" in req.headers["X-Goog-FieldMask"]
    body = json.loads(req.content)
    assert body["includedTypes"] == ["cafe"]
    assert body["maxResultCount"] == 20
    assert body["rankPreference"] == "DISTANCE"
    assert body["locationRestriction"]["circle"] == {
        "center": {"latitude": 51.5, "longitude": -0.1},
        "radius": 3000.0,
    }

    assert len(places) == 1
    p = places[0]
    assert p.source == "google_places"
    assert p.source_id == "abc123"
    assert p.name == "Monmouth Coffee"
    assert p.review_count == 5210
    assert p.primary_type == "coffee_shop"
    assert p.photo_name == "places/abc123/photos/p1"
    assert (p.lat, p.lng) == (51.5052, -0.0912)


def test_empty_response_is_empty_list():
    places = run_with(lambda r: httpx.Response(200, json={}), lambda p: p.search_nearby("bakery", SearchPoint(0, 0, 500)))
    assert places == []


def test_retries_transient_status():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503, json={})
        return httpx.Response(200, json=NEARBY_RESPONSE)

    places = run_with(handler, lambda p: p.search_nearby("cafe", SearchPoint(0, 0, 500)))
    assert len(calls) == 2
    assert len(places) == 1


def test_gives_up_after_max_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, json={})

    with pytest.raises(PlacesProviderError):
        run_with(handler, lambda p: p.search_nearby("cafe", SearchPoint(0, 0, 500)), max_retries=2)
    assert len(calls) == 3


def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(403, json={"error": {"message": "forbidden"}})

    with pytest.raises(PlacesProviderError):
        run_with(handler, lambda p: p.search_nearby("cafe", SearchPoint(0, 0, 500)))
    assert len(calls) == 1


def test_geocode_ok():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "formatted_address": "Bristol, UK",
                        "geometry": {"location": {"lat": 51.4545, "lng": -2.5879}},
                        "address_components": [
                            {"long_name": "Bristol", "short_name": "Bristol", "types": ["locality"]},
                            {"long_name": "United Kingdom", "short_name": "gb", "types": ["country", "political"]},
                        ],
                    }
                ],
            },
        )

    result = run_with(handler, lambda p: p.geocode("Bristol, United Kingdom", region="GB"))
    params = seen[0].url.params
    assert params["address"] == "Bristol, United Kingdom"
    assert params["region"] == "gb"
    assert params["language"] == "en-GB"
    assert params["key"] == "k-test"
    assert (result.lat, result.lng) == (51.4545, -2.5879)
    assert result.country_code == "GB"
    assert result.country_name == "United Kingdom"


def test_geocode_zero_results():
    result = run_with(lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}), lambda p: p.geocode("Nowhere"))
    assert result is None


def test_geocode_request_denied_raises():
    def handler(request):
        return httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "API key invalid"})

    with pytest.raises(PlacesProviderError, match="API key invalid"):
        run_with(handler, lambda p: p.geocode("Bristol"))


def test_search_text_sends_query_with_location_bias():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "places": [{"id": "places/xyz789", "displayName": {"text": "Dishoom"}, "primaryType": "indian_restaurant"}],
                "nextPageToken": "tok-2",
            },
        )

    bias = SearchPoint(51.5074, -0.1278, 50000)
    places, token = run_with(handler, lambda p: p.search_text("Dishoom in Shoreditch", bias))

    req = seen[0]
    assert req.url.path == "/v1/places:searchText"
    assert "nextPageToken" in req.headers["X-Goog-FieldMask"]
    body = json.loads(req.content)
    assert body["textQuery"] == "Dishoom in Shoreditch"
    assert body["locationBias"]["circle"]["radius"] == 50000.0
    assert "pageToken" not in body

    assert [p.source_id for p in places] == ["xyz789"]
    assert places[0].name == "Dishoom"
    assert token == "tok-2"


def test_search_text_without_bias_or_next_page():
    seen = []

    def handler(request: httpx.Request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={})

    places, token = run_with(handler, lambda p: p.search_text("Dishoom", page_token="tok-2"))
    assert places == []
    assert token is None
    assert "locationBias" not in seen[0]
    assert seen[0]["pageToken"] == "tok-2"
