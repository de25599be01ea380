from __future__ import annotations

from loguru import logger

from ..errors import PlacesProviderError
from ..estimator import GRID_CELL_RADIUS
from ..workflow_types import WorkflowContext

TARGET_VALID_UNIQUES = 150
MAX_CONSECUTIVE_EMPTY = 3


class DiscoverPlacesNode:
    """
    Runs one nearby search per (grid point, type), stopping early once enough
    unique places are found and skipping points that look empty.

    A failed call counts as an empty batch; the search only fails when every
    call failed.
    """

    name = "discover_places"

    def __init__(self, provider, target_uniques: int = TARGET_VALID_UNIQUES):
        self.provider = provider
        self.target_uniques = target_uniques

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        types = ctx.plan["types"]
        points = ctx.search_points
        seen = set()
        raw = []
        requests_made = 0
        failures = []

        for idx, point in enumerate(points, start=1):
            if len(seen) >= self.target_uniques:
                logger.info("[{}] early stop: {} unique results", ctx.search_id, len(seen))
                break

            consecutive_empty = 0
            for type_idx, place_type in enumerate(types):
                if len(seen) >= self.target_uniques:
                    break

                requests_made += 1
                try:
                    batch = await self.provider.search_nearby(place_type, point)
                except PlacesProviderError as e:
                    logger.warning("[{}] point {}, type {}: {}", ctx.search_id, idx, place_type, e)
                    failures.append(e)
                    ctx.errors.append(f"{place_type} at point {idx}: {e}")
                    batch = []

                if batch:
                    consecutive_empty = 0
                    for c in batch:
                        if c.source_id not in seen:
                            seen.add(c.source_id)
                            raw.append(c)
                    logger.debug(
                        "[{}] point {}/{}, type {}: {} results ({} unique)",
                        ctx.search_id, idx, len(points), place_type, len(batch), len(seen),
                    )
                    continue

                consecutive_empty += 1
                if type_idx == 0 and point.cell_radius_m <= GRID_CELL_RADIUS:
                    logger.debug("[{}] point {}: first type empty, skipping sparse area", ctx.search_id, idx)
                    break
                if consecutive_empty >= MAX_CONSECUTIVE_EMPTY:
                    logger.debug("[{}] point {}: {} empty types in a row, skipping", ctx.search_id, idx, consecutive_empty)
                    break

        if failures and len(failures) == requests_made:
            raise failures[0]

        logger.info(
            "[{}] {} unique raw results from {} requests ({} failed)",
            ctx.search_id, len(raw), requests_made, len(failures),
        )
        ctx.raw_candidates = raw
        ctx.budget_usage["requests_made"] = requests_made
        ctx.budget_usage["requests_failed"] = len(failures)
        return ctx
