from typing import AsyncIterator

from fastapi import HTTPException

from ..core.config import settings
from ..core.nodes.location import LocationConfig
from ..core.orchestrator import location_config_from_settings
from ..providers.google_places import GooglePlacesConfig, GooglePlacesProvider


async def get_places_provider() -> AsyncIterator[GooglePlacesProvider]:
    if not settings.google_places_api_key:
        raise HTTPException(status_code=503, detail="Google Places API key is not configured")
    cfg = GooglePlacesConfig(api_key=settings.google_places_api_key)
    async with GooglePlacesProvider(cfg) as provider:
        yield provider


def get_location_config() -> LocationConfig:
    return location_config_from_settings()
