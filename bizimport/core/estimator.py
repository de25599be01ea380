# Request-count projection for grid-based area searches.
# bizimport/core/estimator.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from .categories import CategoryProfile, get_category

# Guardrails
MAX_GRID_POINTS = 25
MAX_TYPES_PER_CATEGORY = 15
MAX_REQUESTS_PER_PREVIEW = 400
GRID_CELL_RADIUS = 3000
GRID_CELL_SPACING = int(GRID_CELL_RADIUS * 1.2)

# Grid activation thresholds by category type count
GRID_RADIUS_MANY = 3000  # 5+ types
GRID_RADIUS_FEW = 5000  # fewer than 5 types
MANY_TYPES_MIN = 5

# The admin UI warns above this many requests.
HIGH_COST_REQUESTS = 300


@dataclass(frozen=True)
class EstimateResult:
    request_count: int
    grid_point_count: int
    type_count: int

    @property
    def high_cost(self) -> bool:
        return self.request_count > HIGH_COST_REQUESTS


ZERO_ESTIMATE = EstimateResult(request_count=0, grid_point_count=1, type_count=0)


def grid_threshold(type_count: int) -> int:
    """Radius (m) above which a single-point search is replaced by a grid."""
    return GRID_RADIUS_MANY if type_count >= MANY_TYPES_MIN else GRID_RADIUS_FEW


def clamp_to_budget(grid_points: int, type_count: int) -> int:
    """
    Shrinks the grid until grid_points * type_count fits MAX_REQUESTS_PER_PREVIEW.
    Never grows the grid and never goes below a single point.
    """
    if type_count <= 0:
        return max(1, grid_points)
    if grid_points * type_count <= MAX_REQUESTS_PER_PREVIEW:
        return max(1, grid_points)
    return max(1, min(grid_points, MAX_REQUESTS_PER_PREVIEW // type_count))


def _coerce_radius(radius_meters: Any) -> float:
    try:
        radius = float(radius_meters)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(radius):
        return 0.0
    return radius


def estimate_pre_search_requests(
    category: Union[str, CategoryProfile, None],
    radius_meters: Any,
) -> EstimateResult:
    """
    Projects how many Places requests a preview search will issue.

    Unknown categories and unusable radii never raise: they fall back to the
    cheapest estimate (zero requests, or a single grid point).
    """
    profile: Optional[CategoryProfile]
    if isinstance(category, CategoryProfile):
        profile = category
    else:
        profile = get_category(category)

    if profile is None:
        return ZERO_ESTIMATE

    type_count = min(len(profile.google_types), MAX_TYPES_PER_CATEGORY)
    if type_count == 0:
        return ZERO_ESTIMATE

    radius = _coerce_radius(radius_meters)

    if radius <= grid_threshold(type_count):
        grid_points = 1
    else:
        steps_needed = math.ceil(radius / GRID_CELL_SPACING)
        grid_points = min(1 + (2 * steps_needed) ** 2, MAX_GRID_POINTS)

    grid_points = clamp_to_budget(grid_points, type_count)
    return EstimateResult(
        request_count=grid_points * type_count,
        grid_point_count=grid_points,
        type_count=type_count,
    )
