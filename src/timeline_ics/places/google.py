"""Google Places Details lookup.

## API Documentation Summary
Source: https://developers.google.com/maps/documentation/places/web-service/details

## Endpoint
- URL: https://maps.googleapis.com/maps/api/place/details/json
- Query: place_id, key, fields, language

## Authentication
- API key in the ``key`` query parameter

## Response Format
```json
{
  "status": "OK",
  "result": {
    "place_id": "ChIJ...",
    "name": "Shuri Castle",
    "formatted_address": "1 Chome-2 Shurikinjocho, Naha, Okinawa 903-0815, Japan",
    "geometry": {"location": {"lat": 26.2170, "lng": 127.7195}},
    "types": ["tourist_attraction", "point_of_interest", "establishment"],
    "url": "https://maps.google.com/?cid=1021876599690425051"
  }
}
```

## Status Translation
| status | Result |
|--------|--------|
| OK | PlaceDetails |
| NOT_FOUND, ZERO_RESULTS, INVALID_REQUEST | PlaceNotFoundError |
| OVER_QUERY_LIMIT | RateLimitError |
| anything else | PlaceLookupError |
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from timeline_ics.models.location import Coordinates
from timeline_ics.models.place import PlaceDetails
from timeline_ics.places.base import (
    PlaceLookup,
    PlaceLookupError,
    PlaceNotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DETAILS_FIELDS = "place_id,name,formatted_address,geometry,types,url"

NOT_FOUND_STATUSES = frozenset({"NOT_FOUND", "ZERO_RESULTS", "INVALID_REQUEST"})


class GooglePlacesClient(PlaceLookup):
    """Google Places API (legacy Details endpoint) lookup.

    Example:
        ```python
        async with GooglePlacesClient(api_key="...") as places:
            details = await places.get_place("ChIJN1t_tDeuEmsRUsoyG83frY4")
        ```
    """

    name = "google_places"
    base_url = "https://maps.googleapis.com/maps/api/place"

    def __init__(
        self,
        api_key: str,
        language: str = "en",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Google Places client.

        Args:
            api_key: Places API key
            language: Language for names and addresses
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.language = language

    async def get_place(self, place_id: str) -> PlaceDetails:
        """Fetch place details from Google Places.

        Raises:
            PlaceNotFoundError: If Google does not know the place id
            RateLimitError: If the quota is exhausted
            PlaceLookupError: For any other failure
        """
        params = {
            "place_id": place_id,
            "key": self.api_key,
            "fields": DETAILS_FIELDS,
            "language": self.language,
        }

        data = await self._get_json("/details/json", params=params)

        status = data.get("status")
        if status == "OK":
            return self._translate_response(data, place_id)
        if status in NOT_FOUND_STATUSES:
            raise PlaceNotFoundError(
                f"Place {place_id} not found ({status})", provider=self.name
            )
        if status == "OVER_QUERY_LIMIT":
            raise RateLimitError(self.name)

        logger.error(
            f"place_details failed: status={status}, "
            f"error_message={data.get('error_message')}"
        )
        raise PlaceLookupError(
            data.get("error_message") or f"Unexpected status {status}",
            provider=self.name,
        )

    def _translate_response(
        self,
        response_data: dict[str, Any],
        place_id: str,
    ) -> PlaceDetails:
        """Translate a Details response to ``PlaceDetails``."""
        result = response_data.get("result", {})

        geo = None
        location = result.get("geometry", {}).get("location", {})
        if location.get("lat") is not None and location.get("lng") is not None:
            geo = Coordinates(latitude=location["lat"], longitude=location["lng"])

        return PlaceDetails(
            place_id=result.get("place_id") or place_id,
            name=result.get("name", ""),
            formatted_address=result.get("formatted_address", ""),
            geo=geo,
            types=tuple(result.get("types", [])),
            url=result.get("url"),
        )
