# Distance and search-grid helpers.
# bizimport/core/geo.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

EARTH_RADIUS_M = 6371e3
METERS_PER_DEGREE_LAT = 111320.0

_COORDS_RE = re.compile(r"^(-?\d+\.?\d*)\s*,\s*(-?\d+\.?\d*)$")


@dataclass(frozen=True)
class SearchPoint:
    """One tile of a search grid."""
    lat: float
    lng: float
    cell_radius_m: float


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    p1 = math.radians(lat1)
    p2 = math.radians(lat2)
    dp = math.radians(lat2 - lat1)
    dl = math.radians(lng2 - lng1)

    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def generate_search_grid(
    center_lat: float,
    center_lng: float,
    radius_m: float,
    spacing_m: float,
    cell_radius_m: float,
) -> List[SearchPoint]:
    """
    Square tiling of points `spacing_m` apart around the center, keeping only
    the points that fall inside the search circle. The center always comes first.
    """
    points = [SearchPoint(center_lat, center_lng, cell_radius_m)]

    lat_step = spacing_m / METERS_PER_DEGREE_LAT
    lng_step = spacing_m / (METERS_PER_DEGREE_LAT * math.cos(math.radians(center_lat)))
    steps_needed = math.ceil(radius_m / spacing_m)

    for i in range(-steps_needed, steps_needed + 1):
        for j in range(-steps_needed, steps_needed + 1):
            if i == 0 and j == 0:
                continue
            lat = center_lat + i * lat_step
            lng = center_lng + j * lng_step
            if haversine_m(center_lat, center_lng, lat, lng) <= radius_m:
                points.append(SearchPoint(lat, lng, cell_radius_m))

    return points


def parse_coordinates(text: str) -> Optional[Tuple[float, float]]:
    """Parses "lat, lng" input. Returns None for anything else."""
    m = _COORDS_RE.match((text or "").strip())
    if not m:
        return None
    return float(m.group(1)), float(m.group(2))


def valid_coordinates(lat: float, lng: float) -> bool:
    return (
        math.isfinite(lat)
        and math.isfinite(lng)
        and -90 <= lat <= 90
        and -180 <= lng <= 180
    )
