# bizimport/providers/google_places.py
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from ..core.errors import PlacesProviderError
from ..core.geo import SearchPoint
from .base import GeocodeResult, PlaceCandidate


def _safe_get(d: Dict[str, Any], path: List[str], default=None):
    cur: Any = d
    for key in path:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


@dataclass(frozen=True)
class GooglePlacesConfig:
    api_key: str
    # e.g. "en" or "en-GB"
    language_code: str = "en"

    # Hard caps / safety
    timeout_s: float = 20.0
    max_retries: int = 4
    base_backoff_s: float = 0.6
    max_result_count: int = 20

    # Keep this lean to reduce billing/latency.
    nearby_field_mask: str = (
        "places.id,"
        "places.displayName,"
        "places.rating,"
        "places.userRatingCount,"
        "places.location,"
        "places.types,"
        "places.primaryType,"
        "places.businessStatus,"
        "places.formattedAddress,"
        "places.photos"
    )
    text_search_field_mask: str = (
        "places.id,"
        "places.displayName,"
        "places.formattedAddress,"
        "places.rating,"
        "places.userRatingCount,"
        "places.types,"
        "places.primaryType,"
        "places.location,"
        "nextPageToken"
    )


class GooglePlacesProvider:
    """
    Google Places API v1 + Geocoding provider:
      - POST https://places.googleapis.com/v1/places:searchNearby
      - POST https://places.googleapis.com/v1/places:searchText
      - GET  https://maps.googleapis.com/maps/api/geocode/json

    Places auth is the X-Goog-Api-Key header with an X-Goog-FieldMask;
    geocoding takes the key as a query parameter.
    """

    provider_name = "google_places"
    _BASE_URL = "https://places.googleapis.com/v1"
    _GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, cfg: GooglePlacesConfig, client: Optional[httpx.AsyncClient] = None):
        if not cfg.api_key:
            raise ValueError("GooglePlacesConfig.api_key is required")
        self.cfg = cfg
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.cfg.timeout_s)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GooglePlacesProvider must be used with 'async with' or provide a client.")
        return self._client

    async def _request_with_retries(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Retries on transient failures (429/5xx/timeouts) with exponential backoff + jitter.
        """
        last_err: Optional[Exception] = None
        for attempt in range(self.cfg.max_retries + 1):
            try:
                resp = await self.client.request(method, url, headers=headers, json=json, params=params)
                if resp.status_code in (429, 500, 502, 503, 504):
                    # transient / quota / backend issues
                    raise httpx.HTTPStatusError(
                        f"transient status {resp.status_code}",
                        request=resp.request,
                        response=resp,
                    )
                resp.raise_for_status()
                data = resp.json()
                if not isinstance(data, dict):
                    raise ValueError("Expected JSON object response")
                return data
            except httpx.HTTPStatusError as e:
                last_err = e
                if e.response.status_code not in (429, 500, 502, 503, 504):
                    # 4xx other than 429 will not improve on retry
                    break
            except (httpx.TimeoutException, httpx.NetworkError, ValueError) as e:
                last_err = e
            if attempt >= self.cfg.max_retries:
                break
            backoff = self.cfg.base_backoff_s * (2 ** attempt)
            jitter = random.random() * 0.25
            logger.warning("places request {} {} failed ({}); retry {} in {:.2f}s", method, url, last_err, attempt + 1, backoff + jitter)
            await asyncio.sleep(backoff + jitter)
        raise PlacesProviderError(f"Google Places request failed: {last_err}") from last_err

    def _headers(self, field_mask: str) -> Dict[str, str]:
        return {
            "X-Goog-Api-Key": self.cfg.api_key,
            "X-Goog-FieldMask": field_mask,
            "Content-Type": "application/json",
        }

    def _to_candidate(self, p: Dict[str, Any]) -> Optional[PlaceCandidate]:
        place_id = _safe_get(p, ["id"])
        if not place_id:
            return None
        loc = _safe_get(p, ["location"], {}) or {}
        photos = p.get("photos") or []
        return PlaceCandidate(
            source=self.provider_name,
            # searchText can return resource names ("places/<id>")
            source_id=str(place_id).replace("places/", ""),
            name=_safe_get(p, ["displayName", "text"], "") or "",
            rating=p.get("rating"),
            review_count=p.get("userRatingCount"),
            lat=loc.get("latitude"),
            lng=loc.get("longitude"),
            types=[str(t) for t in p.get("types", []) or []],
            primary_type=p.get("primaryType"),
            business_status=p.get("businessStatus"),
            address_full=p.get("formattedAddress"),
            photo_name=_safe_get(photos[0], ["name"]) if photos else None,
            payload=p,
        )

    def _to_candidates(self, data: Dict[str, Any]) -> List[PlaceCandidate]:
        candidates = (self._to_candidate(p) for p in data.get("places", []) or [])
        return [c for c in candidates if c is not None]

    async def search_nearby(self, place_type: str, point: SearchPoint) -> List[PlaceCandidate]:
        """
        One searchNearby call restricted to a circle around `point`,
        ranked by distance.
        """
        body: Dict[str, Any] = {
            "includedTypes": [place_type],
            "maxResultCount": self.cfg.max_result_count,
            "rankPreference": "DISTANCE",
            "languageCode": self.cfg.language_code,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": point.lat, "longitude": point.lng},
                    "radius": float(point.cell_radius_m),
                }
            },
        }

        data = await self._request_with_retries(
            "POST",
            f"{self._BASE_URL}/places:searchNearby",
            headers=self._headers(self.cfg.nearby_field_mask),
            json=body,
        )
        return self._to_candidates(data)

    async def search_text(
        self,
        query: str,
        bias: Optional[SearchPoint] = None,
        *,
        page_token: Optional[str] = None,
    ) -> Tuple[List[PlaceCandidate], Optional[str]]:
        """
        Executes one searchText page. Returns (candidates, next_page_token).

        `bias` is a soft preference (locationBias), not a restriction, so named
        businesses just outside the circle still come back.
        """
        body: Dict[str, Any] = {
            "textQuery": query,
            "languageCode": self.cfg.language_code,
        }
        if bias is not None:
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": bias.lat, "longitude": bias.lng},
                    "radius": float(bias.cell_radius_m),
                }
            }
        if page_token:
            body["pageToken"] = page_token

        data = await self._request_with_retries(
            "POST",
            f"{self._BASE_URL}/places:searchText",
            headers=self._headers(self.cfg.text_search_field_mask),
            json=body,
        )
        next_token = data.get("nextPageToken")
        return self._to_candidates(data), (str(next_token) if next_token else None)

    async def geocode(self, address: str, *, region: Optional[str] = None) -> Optional[GeocodeResult]:
        params: Dict[str, Any] = {"address": address, "key": self.cfg.api_key}
        if region:
            params["region"] = region.lower()
            params["language"] = "ar" if region.upper() == "AE" else f"en-{region.upper()}"

        data = await self._request_with_retries("GET", self._GEOCODE_URL, params=params)

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            raise PlacesProviderError(
                f"Google geocoding error: {data.get('error_message') or status}. "
                "Check the Geocoding API is enabled and billing is active."
            )

        results = data.get("results") or []
        if not results:
            return None
        first = results[0]
        coords = _safe_get(first, ["geometry", "location"], {}) or {}
        if coords.get("lat") is None or coords.get("lng") is None:
            return None

        country_code = country_name = None
        for comp in first.get("address_components", []) or []:
            if "country" in (comp.get("types") or []):
                country_code = (comp.get("short_name") or "").upper() or None
                country_name = comp.get("long_name")
                break

        return GeocodeResult(
            lat=float(coords["lat"]),
            lng=float(coords["lng"]),
            formatted_address=first.get("formatted_address", "") or "",
            country_code=country_code,
            country_name=country_name,
        )
