"""Pytest fixtures for location history conversion tests.

This module provides test fixtures that ensure:
1. No external API calls are made (place lookups use an in-memory fake)
2. No real timezone boundary file is needed (a small synthetic index is used)
3. Isolated test environment with controlled configuration
"""

import asyncio
import json
import os
from typing import Any

import pytest

from timeline_ics.models.location import Coordinates
from timeline_ics.models.place import PlaceDetails
from timeline_ics.models.record import NormalizedRecord, RecordCategory, TimeSpan
from timeline_ics.models.timeline import RawTimeline
from timeline_ics.places.base import PlaceLookup, PlaceNotFoundError
from timeline_ics.timezones.resolver import (
    Polygon,
    TimeZoneIndex,
    TimeZonePolygon,
    TimeZoneResolver,
)


START_TIMESTAMP = "2011-11-11T11:11:11.111Z"
END_TIMESTAMP = "2011-11-11T11:22:22.222Z"
CHILD_VISIT_PLACE_ID = "some-child-visit-place-id"
PLACE_DETAILS_URL = "https://maps.google.com/?cid=1021876599690425051"


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Remove TIMELINE_ICS_* variables so settings start from defaults."""
    for key in list(os.environ):
        if key.startswith("TIMELINE_ICS_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from timeline_ics.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Place Lookup
# =============================================================================


class FakePlaceLookup(PlaceLookup):
    """In-memory place lookup recording every requested place id."""

    name = "fake"
    base_url = "memory://places"

    def __init__(
        self,
        places: dict[str, PlaceDetails] | None = None,
        failures: dict[str, Exception] | None = None,
    ):
        super().__init__()
        self.places = places or {}
        self.failures = failures or {}
        self.calls: list[str] = []
        self.closed = False

    async def get_place(self, place_id: str) -> PlaceDetails:
        self.calls.append(place_id)
        # Yield like a network call would
        await asyncio.sleep(0)
        if place_id in self.failures:
            raise self.failures[place_id]
        if place_id not in self.places:
            raise PlaceNotFoundError(f"Place {place_id} not found", provider=self.name)
        return self.places[place_id]

    def _translate_response(self, response_data: dict[str, Any], place_id: str) -> PlaceDetails:
        return PlaceDetails(place_id=place_id, **response_data)

    async def aclose(self) -> None:
        self.closed = True
        await super().aclose()


@pytest.fixture
def fake_lookup_class() -> type[FakePlaceLookup]:
    return FakePlaceLookup


@pytest.fixture
def park_details() -> PlaceDetails:
    """Place details for a park visited in Okinawa."""
    return PlaceDetails(
        place_id=CHILD_VISIT_PLACE_ID,
        name="some-place-details-name",
        formatted_address="some-place-details-formatted-address",
        types=("park", "point_of_interest"),
        url=PLACE_DETAILS_URL,
    )


@pytest.fixture
def fake_lookup(park_details: PlaceDetails) -> FakePlaceLookup:
    """Fake lookup knowing the park plus both segment endpoints."""
    return FakePlaceLookup(
        places={
            CHILD_VISIT_PLACE_ID: park_details,
            "start-place-id": PlaceDetails(
                place_id="start-place-id",
                name="Start Cafe",
                formatted_address="1 Start Street\nNaha",
                types=("cafe",),
            ),
            "end-place-id": PlaceDetails(
                place_id="end-place-id",
                name="End Beach",
                formatted_address="2 End Road, Onna",
                types=("natural_feature",),
            ),
        }
    )


# =============================================================================
# Timezones
# =============================================================================


def square(min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> list:
    """Closed GeoJSON ring for an axis-aligned rectangle."""
    return [
        [min_lon, min_lat],
        [max_lon, min_lat],
        [max_lon, max_lat],
        [min_lon, max_lat],
        [min_lon, min_lat],
    ]


@pytest.fixture
def timezone_geojson() -> dict[str, Any]:
    """Two rectangular zones: Japan-ish and New York-ish."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"tzid": "Asia/Tokyo"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [square(122.0, 24.0, 146.0, 46.0)],
                },
            },
            {
                "type": "Feature",
                "properties": {"tzid": "America/New_York"},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [[square(-80.0, 38.0, -71.0, 45.0)]],
                },
            },
        ],
    }


@pytest.fixture
def timezone_index(timezone_geojson: dict[str, Any]) -> TimeZoneIndex:
    return TimeZoneIndex.from_geojson(timezone_geojson)


@pytest.fixture
def timezone_file(tmp_path, timezone_geojson: dict[str, Any]):
    """Timezone boundary file on disk."""
    path = tmp_path / "timezones.geojson"
    path.write_text(json.dumps(timezone_geojson), encoding="utf-8")
    return path


@pytest.fixture
def resolver(timezone_index: TimeZoneIndex) -> TimeZoneResolver:
    return TimeZoneResolver(timezone_index)


@pytest.fixture
def tokyo_zone() -> TimeZonePolygon:
    return TimeZonePolygon(
        zone_id="Asia/Tokyo",
        polygons=(Polygon.from_rings([square(122.0, 24.0, 146.0, 46.0)]),),
    )


# =============================================================================
# Timeline Data
# =============================================================================


@pytest.fixture
def sample_timeline_data() -> dict[str, Any]:
    """A month export with one drive and one visit containing a child visit."""
    return {
        "timelineObjects": [
            {
                "activitySegment": {
                    "startLocation": {
                        "latitudeE7": 263383300,
                        "longitudeE7": 1278000000,
                        "placeId": "start-place-id",
                        "sourceInfo": {"deviceTag": 12345},
                    },
                    "endLocation": {
                        "latitudeE7": 263393300,
                        "longitudeE7": 1278500000,
                        "placeId": "end-place-id",
                    },
                    "duration": {
                        "startTimestamp": START_TIMESTAMP,
                        "endTimestamp": END_TIMESTAMP,
                    },
                    "distance": 7900,
                    "activityType": "IN_VEHICLE",
                    "confidence": "HIGH",
                    "activities": [
                        {"activityType": "IN_VEHICLE", "probability": 91.4},
                        {"activityType": "IN_PASSENGER_VEHICLE", "probability": 5.2},
                    ],
                    "waypointPath": {
                        "distanceMeters": 7934.2,
                        "roadSegment": [
                            {"placeId": "first-road-place-id", "duration": "9s"},
                            {"placeId": "last-road-place-id", "duration": "14s"},
                        ],
                    },
                }
            },
            {
                "placeVisit": {
                    "location": {
                        "latitudeE7": 263393300,
                        "longitudeE7": 1278500000,
                        "placeId": "some-place-visit-place-id",
                        "address": "2 End Road\nOnna\nOkinawa",
                        "name": "End Beach",
                    },
                    "duration": {
                        "startTimestamp": END_TIMESTAMP,
                        "endTimestamp": "2011-11-11T12:00:00Z",
                    },
                    "placeConfidence": "HIGH_CONFIDENCE",
                    "childVisits": [
                        {
                            "location": {
                                "latitudeE7": 263383300,
                                "longitudeE7": 1278000000,
                                "placeId": CHILD_VISIT_PLACE_ID,
                                "name": "some-child-visit-name",
                            },
                            "duration": {
                                "startTimestamp": START_TIMESTAMP,
                                "endTimestamp": END_TIMESTAMP,
                            },
                            "lastEditedTimestamp": END_TIMESTAMP,
                        }
                    ],
                }
            },
        ]
    }


@pytest.fixture
def sample_timeline_json(sample_timeline_data: dict[str, Any]) -> str:
    return json.dumps(sample_timeline_data)


@pytest.fixture
def sample_timeline(sample_timeline_json: str) -> RawTimeline:
    return RawTimeline.model_validate_json(sample_timeline_json)


@pytest.fixture
def child_visit_record() -> NormalizedRecord:
    """Normalized child visit in Okinawa."""
    point = Coordinates.from_e7(263383300, 1278000000)
    return NormalizedRecord(
        id=END_TIMESTAMP,
        place_id=CHILD_VISIT_PLACE_ID,
        span=TimeSpan(start=START_TIMESTAMP, end=END_TIMESTAMP),
        last_edited=END_TIMESTAMP,
        display_name="some-child-visit-name",
        point=point,
        canonical_url=f"https://www.google.com/maps/place/?q=place_id:{CHILD_VISIT_PLACE_ID}",
        category=RecordCategory.CHILD_VISIT,
    )
