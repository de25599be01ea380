from __future__ import annotations


class BizImportError(Exception):
    """Base class for errors surfaced to API callers."""


class InvalidSearchError(BizImportError):
    """Search parameters were rejected before any provider call."""


class LocationResolutionError(BizImportError):
    """The search location could not be turned into coordinates."""


class PlacesProviderError(BizImportError):
    """The places provider kept failing after retries."""
