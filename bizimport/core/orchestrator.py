import uuid
from typing import Any, Dict, List, Optional

from loguru import logger

from .categories import GOOGLE_TYPE_TO_CATEGORY, classify_google_types, get_category
from .config import settings
from .errors import InvalidSearchError
from .geo import SearchPoint
from .nodes.assemble import AssembleResultsNode
from .nodes.dedupe import DedupePlacesNode
from .nodes.discover import DiscoverPlacesNode
from .nodes.grid import SearchGridNode
from .nodes.location import LocationConfig, LocationResolverNode
from .nodes.planner import RequestPlannerNode
from .nodes.validate import ValidatePlacesNode
from .workflow import WorkflowRunner
from .workflow_types import WorkflowContext


def location_config_from_settings() -> LocationConfig:
    return LocationConfig(
        default_lat=settings.default_center_lat,
        default_lng=settings.default_center_lng,
        default_name=settings.default_location_name,
        country_code=settings.country_code,
        country_name=settings.country_name,
    )


def build_preview_runner(provider, location_config: LocationConfig) -> WorkflowRunner:
    return WorkflowRunner(
        nodes=[
            RequestPlannerNode(),
            LocationResolverNode(provider, location_config),
            SearchGridNode(),
            DiscoverPlacesNode(provider),
            DedupePlacesNode(),
            ValidatePlacesNode(),
            AssembleResultsNode(),
        ]
    )


async def run_preview(req: Dict[str, Any], provider, location_config: LocationConfig) -> WorkflowContext:
    search_id = uuid.uuid4().hex[:12]
    logger.info("[{}] preview {} within {}m of {!r}", search_id, req.get("category"), req.get("radius"), req.get("location"))
    runner = build_preview_runner(provider, location_config)
    return await runner.run(WorkflowContext(search_id=search_id, request=req))


# Single named-business lookup
TEXT_SEARCH_BIAS_RADIUS_M = 50000
TEXT_SEARCH_COST_GBP = 0.025
PLACE_DETAILS_COST_GBP = 0.017


def system_category_for(primary_type: Optional[str], types: List[str]) -> str:
    if primary_type and primary_type in GOOGLE_TYPE_TO_CATEGORY:
        return GOOGLE_TYPE_TO_CATEGORY[primary_type]
    return classify_google_types(types)


def text_search_costs(result_count: int) -> Dict[str, Dict[str, Any]]:
    return {
        "preview": {
            "amount": f"£{TEXT_SEARCH_COST_GBP:.3f}",
            "requests": 1,
            "description": "1 Text Search request",
        },
        "import": {
            "estimated_per_business": f"£{PLACE_DETAILS_COST_GBP:.3f}",
            "estimated_total": f"£{result_count * PLACE_DETAILS_COST_GBP:.2f}",
            "business_count": result_count,
            "description": "Place Details requests",
        },
    }


async def run_text_search(text_query: str, location: str, provider, location_config: LocationConfig) -> List[Dict[str, Any]]:
    text_query = " ".join((text_query or "").split())
    location = " ".join((location or "").split())
    if not text_query or not location:
        raise InvalidSearchError("Missing text_query or location")

    bias = None
    if location_config.has_default_center:
        bias = SearchPoint(location_config.default_lat, location_config.default_lng, TEXT_SEARCH_BIAS_RADIUS_M)

    places, _ = await provider.search_text(f"{text_query} in {location}", bias)
    logger.info("text search {!r} in {!r}: {} results", text_query, location, len(places))

    results = []
    for c in places:
        key = system_category_for(c.primary_type, c.types)
        results.append(
            {
                "place_id": c.source_id,
                "name": c.name or "Unknown",
                "rating": c.rating or 0,
                "review_count": c.review_count or 0,
                "address": c.address_full or "",
                "category": get_category(key).display_name,
                "system_category": key,
                "google_types": list(c.types),
                "google_primary_type": c.primary_type,
                "distance_m": 0,
                "lat": c.lat,
                "lng": c.lng,
                "status": "ready",
                "has_photo": False,
                "photo_name": None,
            }
        )
    return results
