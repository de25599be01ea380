from __future__ import annotations

from typing import Tuple

from loguru import logger

from ...providers.base import PlaceCandidate
from ..workflow_types import WorkflowContext


def place_key(place: PlaceCandidate) -> Tuple[str, str]:
    """Provider id when present, else normalized name + address."""
    if place.source_id:
        return place.source, place.source_id
    text = f"{place.name}|{place.address_full or ''}".lower()
    return "unkeyed", " ".join(text.split())


class DedupePlacesNode:
    name = "dedupe_places"

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        seen = set()
        unique = []
        for place in ctx.raw_candidates:
            key = place_key(place)
            if key not in seen:
                seen.add(key)
                unique.append(place)

        dropped = len(ctx.raw_candidates) - len(unique)
        if dropped:
            logger.debug("[{}] dropped {} duplicate places", ctx.search_id, dropped)
        ctx.raw_candidates = unique
        ctx.budget_usage["duplicates_dropped"] = dropped
        return ctx
