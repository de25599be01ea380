from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ...providers.base import PlaceCandidate
from ..categories import CategoryProfile
from ..geo import haversine_m
from ..workflow_types import WorkflowContext

MIN_REVIEWS = 10
LODGING_TYPES = frozenset({"lodging", "hotel", "motel", "bed_and_breakfast", "hostel", "guest_house"})


@dataclass(frozen=True)
class PlaceValidation:
    valid: bool
    reject_reason: Optional[str] = None
    match_reason: Optional[str] = None
    distance_m: Optional[float] = None


def validate_place(
    place: PlaceCandidate,
    category: CategoryProfile,
    *,
    min_rating: float,
    min_reviews: int,
    center_lat: float,
    center_lng: float,
    radius_m: float,
) -> PlaceValidation:
    if not place.name or not place.source_id:
        return PlaceValidation(False, "missing_name")
    if place.business_status and place.business_status != "OPERATIONAL":
        return PlaceValidation(False, f"status_{place.business_status.lower()}")
    if (place.rating or 0) < min_rating:
        return PlaceValidation(False, f"rating {place.rating or 0} below {min_rating}")
    if (place.review_count or 0) < min_reviews:
        return PlaceValidation(False, f"only {place.review_count or 0} reviews (min {min_reviews})")

    types = set(place.types)
    if place.primary_type:
        types.add(place.primary_type)
    if category.key != "hotel" and types & LODGING_TYPES:
        return PlaceValidation(False, "lodging")

    if place.lat is None or place.lng is None:
        return PlaceValidation(False, "missing_location")
    distance = haversine_m(center_lat, center_lng, place.lat, place.lng)
    if distance > radius_m:
        return PlaceValidation(False, f"outside radius ({round(distance)}m > {round(radius_m)}m)")

    wanted = set(category.google_types)
    if place.primary_type and place.primary_type in wanted:
        match = "primary_type"
    elif types & wanted:
        match = "type_match"
    else:
        return PlaceValidation(False, "category_mismatch")

    return PlaceValidation(True, match_reason=match, distance_m=distance)


class ValidatePlacesNode:
    name = "validate_places"

    def __init__(self, min_reviews: int = MIN_REVIEWS):
        self.min_reviews = min_reviews

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        category = ctx.plan["category"]
        max_results = ctx.plan["max_results"]
        accepted = []
        rejected = []

        for c in ctx.raw_candidates:
            v = validate_place(
                c,
                category,
                min_rating=ctx.plan["min_rating"],
                min_reviews=self.min_reviews,
                center_lat=ctx.location.lat,
                center_lng=ctx.location.lng,
                radius_m=ctx.plan["radius_m"],
            )
            if not v.valid:
                logger.debug("[{}] rejected {}: {}", ctx.search_id, c.name or c.source_id, v.reject_reason)
                rejected.append({"name": c.name, "reason": v.reject_reason or "unknown"})
                continue
            accepted.append((c, v))

        ctx.accepted = accepted[:max_results]
        ctx.rejected = rejected
        logger.info("[{}] {} valid, {} rejected", ctx.search_id, len(accepted), len(rejected))
        return ctx
