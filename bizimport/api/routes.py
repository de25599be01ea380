from typing import List

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from .deps import get_location_config, get_places_provider
from .schemas import (
    CategoryInfo,
    EstimateRequest,
    EstimateResponse,
    PreviewRequest,
    PreviewResponse,
    TextSearchRequest,
    TextSearchResponse,
)
from ..core.auth import require_api_key
from ..core.categories import list_categories
from ..core.errors import InvalidSearchError, LocationResolutionError, PlacesProviderError
from ..core.estimator import estimate_pre_search_requests
from ..core.orchestrator import run_preview, run_text_search, text_search_costs

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/categories", response_model=List[CategoryInfo])
async def read_categories():
    return [
        CategoryInfo(
            key=c.key,
            display_name=c.display_name,
            google_types=list(c.google_types),
            type_count=len(c.google_types),
        )
        for c in list_categories()
    ]


@router.post("/import/estimate", response_model=EstimateResponse)
async def estimate_import(req: EstimateRequest):
    est = estimate_pre_search_requests(req.category, req.radius_meters)
    return EstimateResponse(
        requests=est.request_count,
        grid_points=est.grid_point_count,
        type_count=est.type_count,
        high_cost=est.high_cost,
    )


@router.post("/import/preview", response_model=PreviewResponse)
async def preview_import(
    req: PreviewRequest,
    provider=Depends(get_places_provider),
    location_config=Depends(get_location_config),
):
    try:
        ctx = await run_preview(req.model_dump(), provider, location_config)
    except (InvalidSearchError, LocationResolutionError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlacesProviderError as e:
        logger.error("preview search failed: {}", e)
        raise HTTPException(status_code=502, detail=str(e))

    usage = ctx.budget_usage
    return PreviewResponse(
        results=ctx.results,
        total_raw=len(ctx.raw_candidates),
        total_found=len(ctx.results),
        total_rejected=len(ctx.rejected),
        rejected=ctx.rejected,
        search={
            "center": {"lat": ctx.location.lat, "lng": ctx.location.lng},
            "resolved_location": ctx.location.label or ctx.plan.get("location", ""),
            "resolution_method": ctx.location.method,
            "grid_points": usage.get("grid_points", 0),
            "types_searched": usage.get("types_searched", 0),
            "estimated_requests": usage.get("estimated_requests", 0),
            "requests_made": usage.get("requests_made", 0),
            "requests_failed": usage.get("requests_failed", 0),
        },
        message=ctx.message,
        warnings=ctx.errors,
    )


@router.post("/import/text-search", response_model=TextSearchResponse)
async def text_search_import(
    req: TextSearchRequest,
    provider=Depends(get_places_provider),
    location_config=Depends(get_location_config),
):
    try:
        results = await run_text_search(req.text_query, req.location, provider, location_config)
    except InvalidSearchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlacesProviderError as e:
        logger.error("text search failed: {}", e)
        raise HTTPException(status_code=502, detail=str(e))

    return TextSearchResponse(
        results=results,
        total_found=len(results),
        costs=text_search_costs(len(results)),
    )
