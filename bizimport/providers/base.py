# Provider interfaces and dataclasses.
# bizimport/providers/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from ..core.geo import SearchPoint


@dataclass(frozen=True)
class PlaceCandidate:
    """
    A normalized, provider-agnostic place returned by a nearby search.
    `payload` keeps the raw provider record for debugging/provenance.
    """
    source: str
    source_id: str
    name: str
    rating: Optional[float] = None
    review_count: Optional[int] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    types: List[str] = field(default_factory=list)
    primary_type: Optional[str] = None
    business_status: Optional[str] = None
    address_full: Optional[str] = None
    photo_name: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lng: float
    formatted_address: str
    country_code: Optional[str]
    country_name: Optional[str]


class DiscoveryProvider(Protocol):
    provider_name: str

    async def search_nearby(self, place_type: str, point: SearchPoint) -> List[PlaceCandidate]:
        """One nearby search for a single type around a grid point."""
        ...

    async def geocode(self, address: str, *, region: Optional[str] = None) -> Optional[GeocodeResult]:
        """
        Returns the best match for `address`, or None when nothing was found.
        """
        ...

    async def search_text(
        self,
        query: str,
        bias: Optional[SearchPoint] = None,
        *,
        page_token: Optional[str] = None,
    ) -> Tuple[List[PlaceCandidate], Optional[str]]:
        """
        Returns (candidates, next_page_token). next_page_token is None when done.
        """
        ...
