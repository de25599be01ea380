from __future__ import annotations

from ..workflow_types import WorkflowContext


class AssembleResultsNode:
    name = "assemble_results"

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        category = ctx.plan["category"]
        items = []

        for c, v in ctx.accepted:
            items.append(
                {
                    "place_id": c.source_id,
                    "name": c.name,
                    "rating": c.rating or 0,
                    "review_count": c.review_count or 0,
                    "address": c.address_full or "Address not available",
                    "category": category.display_name,
                    "system_category": category.key,
                    "google_types": list(c.types),
                    "google_primary_type": c.primary_type or (c.types[0] if c.types else None),
                    "match_reason": v.match_reason,
                    "distance_m": round(v.distance_m or 0),
                    "lat": c.lat,
                    "lng": c.lng,
                    "status": c.business_status or "OPERATIONAL",
                    "has_photo": bool(c.photo_name),
                    "photo_name": c.photo_name,
                }
            )

        points = ctx.budget_usage.get("grid_points", 0)
        types = ctx.budget_usage.get("types_searched", 0)
        ctx.results = items
        ctx.message = (
            f"Found {len(items)} businesses from {len(ctx.raw_candidates)} raw results "
            f"({len(ctx.rejected)} rejected). Searched {points} point{'s' if points != 1 else ''} "
            f"with {types} types."
        )
        return ctx
