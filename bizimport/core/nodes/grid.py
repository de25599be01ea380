from __future__ import annotations

from loguru import logger

from ..estimator import (
    GRID_CELL_RADIUS,
    GRID_CELL_SPACING,
    MAX_GRID_POINTS,
    clamp_to_budget,
    grid_threshold,
)
from ..geo import SearchPoint, generate_search_grid
from ..workflow_types import WorkflowContext


class SearchGridNode:
    name = "search_grid"

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        loc = ctx.location
        types = ctx.plan["types"]
        radius_m = ctx.plan["radius_m"]

        if radius_m <= grid_threshold(len(types)):
            points = [SearchPoint(loc.lat, loc.lng, radius_m)]
        else:
            points = generate_search_grid(loc.lat, loc.lng, radius_m, GRID_CELL_SPACING, GRID_CELL_RADIUS)
            points = points[:MAX_GRID_POINTS]

        allowed = clamp_to_budget(len(points), len(types))
        if allowed < len(points):
            logger.warning(
                "[{}] reduced grid from {} to {} points (request budget)", ctx.search_id, len(points), allowed
            )
            points = points[:allowed]

        ctx.search_points = points
        ctx.budget_usage = {
            "grid_points": len(points),
            "types_searched": len(types),
            "estimated_requests": len(points) * len(types),
        }
        logger.info("[{}] grid: {} points x {} types = ~{} requests", ctx.search_id, len(points), len(types), len(points) * len(types))
        return ctx
