from __future__ import annotations

from dataclasses import dataclass

from ..categories import get_category, is_valid_category
from ..errors import InvalidSearchError
from ..estimator import MAX_TYPES_PER_CATEGORY
from ..workflow_types import WorkflowContext


@dataclass(frozen=True)
class RequestPlannerConfig:
    min_rating_floor: float = 4.4
    min_request_radius_m: int = 100
    min_radius_m: int = 500
    max_radius_m: int = 50000


class RequestPlannerNode:
    name = "request_planner"

    def __init__(self, config: RequestPlannerConfig | None = None):
        self.config = config or RequestPlannerConfig()

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        req = ctx.request
        key = str(req.get("category") or "").strip().lower()
        min_rating = float(req.get("min_rating") or 0)
        radius = float(req.get("radius") or 0)
        max_results = int(req.get("max_results") or 0)

        if not key or min_rating < 1 or radius < self.config.min_request_radius_m or max_results < 1:
            raise InvalidSearchError("Invalid search parameters")

        if not is_valid_category(key):
            raise InvalidSearchError(f"Invalid category: {key}")
        category = get_category(key)
        if min_rating < self.config.min_rating_floor:
            raise InvalidSearchError(f"Minimum rating must be at least {self.config.min_rating_floor} stars")

        radius_m = max(self.config.min_radius_m, min(radius, self.config.max_radius_m))

        ctx.plan = {
            "category": category,
            "types": list(category.google_types[:MAX_TYPES_PER_CATEGORY]),
            "radius_m": radius_m,
            "min_rating": min_rating,
            "max_results": max_results,
            "location": " ".join(str(req.get("location") or "").split()),
        }
        return ctx
