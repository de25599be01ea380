from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..errors import LocationResolutionError, PlacesProviderError
from ..geo import parse_coordinates, valid_coordinates
from ..workflow_types import ResolvedLocation, WorkflowContext


@dataclass(frozen=True)
class LocationConfig:
    default_lat: Optional[float] = None
    default_lng: Optional[float] = None
    default_name: str = ""
    country_code: str = "GB"
    country_name: str = "United Kingdom"

    @property
    def has_default_center(self) -> bool:
        return self.default_lat is not None and self.default_lng is not None


class LocationResolverNode:
    """Turns the admin's free-text location into search-center coordinates."""

    name = "location_resolver"

    def __init__(self, provider, config: LocationConfig):
        self.provider = provider
        self.config = config

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        text = ctx.plan.get("location", "")
        resolved = await self._resolve(text)

        if not valid_coordinates(resolved.lat, resolved.lng):
            raise LocationResolutionError(f"Invalid coordinates resolved: {resolved.lat}, {resolved.lng}")

        logger.info("[{}] location {!r} -> {}, {} ({})", ctx.search_id, text, resolved.lat, resolved.lng, resolved.method)
        ctx.location = resolved
        return ctx

    async def _resolve(self, text: str) -> ResolvedLocation:
        cfg = self.config
        default_label = cfg.default_name

        if not text:
            if not cfg.has_default_center:
                raise LocationResolutionError("No location provided and no default coordinates configured.")
            return ResolvedLocation(cfg.default_lat, cfg.default_lng, "default_center", default_label)

        coords = parse_coordinates(text)
        if coords is not None:
            return ResolvedLocation(coords[0], coords[1], "raw_coords", text)

        if cfg.has_default_center and text.lower() == " ".join(default_label.split()).lower():
            return ResolvedLocation(cfg.default_lat, cfg.default_lng, "default_name_match", text)

        query = f"{text}, {cfg.country_name}" if cfg.country_name else text
        try:
            result = await self.provider.geocode(query, region=cfg.country_code or None)
        except PlacesProviderError as e:
            raise LocationResolutionError(str(e)) from e

        if result is None:
            raise LocationResolutionError(f'Location not found: "{query}". Please refine the location name.')

        if result.country_code and cfg.country_code and result.country_code != cfg.country_code.upper():
            raise LocationResolutionError(
                f"Location resolved outside {cfg.country_name} (got {result.country_name}). "
                f'Please add more detail (e.g., "{text}, {cfg.country_name}").'
            )
        return ResolvedLocation(result.lat, result.lng, "geocoded", text)
