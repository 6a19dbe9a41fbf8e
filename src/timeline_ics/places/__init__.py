"""Place lookup and enrichment."""

from timeline_ics.places.base import (
    PlaceLookup,
    PlaceLookupError,
    PlaceNotFoundError,
    RateLimitError,
)
from timeline_ics.places.google import GooglePlacesClient
from timeline_ics.places.enrichment import PlaceEnrichmentGate

__all__ = [
    "PlaceLookup",
    "PlaceLookupError",
    "PlaceNotFoundError",
    "RateLimitError",
    "GooglePlacesClient",
    "PlaceEnrichmentGate",
]
