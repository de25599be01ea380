from __future__ import annotations

from typing import Dict, List, Optional

from bizimport.core.errors import PlacesProviderError
from bizimport.providers.base import PlaceCandidate

LONDON = (51.5074, -0.1278)


def make_place(place_id: str, **overrides) -> PlaceCandidate:
    fields = dict(
        source="google_places",
        source_id=place_id,
        name=f"Place {place_id}",
        rating=4.7,
        review_count=120,
        lat=LONDON[0] + 0.001,
        lng=LONDON[1],
        types=["cafe", "food", "point_of_interest"],
        primary_type="cafe",
        business_status="OPERATIONAL",
        address_full="1 High St, London, UK",
    )
    fields.update(overrides)
    return PlaceCandidate(**fields)


class FakeProvider:
    provider_name = "fake"

    def __init__(
        self,
        by_type: Optional[Dict[str, List[PlaceCandidate]]] = None,
        geocode_result=None,
        error=None,
        failing_types=(),
        geocode_error=None,
        text_results: Optional[List[PlaceCandidate]] = None,
    ):
        self.by_type = by_type or {}
        self.geocode_result = geocode_result
        self.error = error
        self.failing_types = set(failing_types)
        self.geocode_error = geocode_error
        self.text_results = text_results or []
        self.calls = []
        self.geocode_calls = []
        self.text_calls = []

    async def search_nearby(self, place_type, point):
        self.calls.append((place_type, point))
        if self.error is not None:
            raise self.error
        if place_type in self.failing_types:
            raise PlacesProviderError(f"Google Places request failed: 400 for {place_type}")
        return list(self.by_type.get(place_type, []))

    async def geocode(self, address, *, region=None):
        self.geocode_calls.append((address, region))
        if self.geocode_error is not None:
            raise self.geocode_error
        return self.geocode_result

    async def search_text(self, query, bias=None, *, page_token=None):
        self.text_calls.append((query, bias))
        if self.error is not None:
            raise self.error
        return list(self.text_results), None
