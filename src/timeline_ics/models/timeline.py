"""Raw location-history schema.

These models mirror the semantic location history JSON as exported by
Google Takeout (one file per month). Only the fields used during
conversion are declared; everything else is ignored on load.

## File layout

```json
{
  "timelineObjects": [
    {
      "activitySegment": {
        "startLocation": {"latitudeE7": 263383300, "longitudeE7": 1278000000},
        "endLocation": {"latitudeE7": 263393300, "longitudeE7": 1278500000,
                        "placeId": "ChIJ..."},
        "duration": {"startTimestamp": "2011-11-11T11:11:11.111Z",
                     "endTimestamp": "2011-11-11T11:22:22.222Z"},
        "distance": 7900,
        "activityType": "IN_PASSENGER_VEHICLE",
        "activities": [{"activityType": "IN_PASSENGER_VEHICLE",
                        "probability": 91.4}],
        "waypointPath": {"distanceMeters": 7934.2,
                         "roadSegment": [{"placeId": "ChIJ...",
                                          "duration": "9s"}]}
      }
    },
    {
      "placeVisit": {
        "location": {"latitudeE7": 263383300, "longitudeE7": 1278000000,
                     "placeId": "ChIJ...", "address": "...", "name": "..."},
        "duration": {...},
        "lastEditedTimestamp": "2011-11-11T11:22:22.222Z",
        "childVisits": [{"location": {...}, "duration": {...}}]
      }
    }
  ]
}
```

Coordinates are E7 fixed-point integers (degrees x 10^7).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RawModel(BaseModel):
    """Base for raw export models: camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class RawDuration(RawModel):
    """Start/end instants of a visit or segment (RFC3339, UTC)."""

    start_timestamp: str | None = None
    end_timestamp: str | None = None


class RawLocation(RawModel):
    """A location reference as it appears in the export."""

    latitude_e7: int | None = Field(default=None, alias="latitudeE7")
    longitude_e7: int | None = Field(default=None, alias="longitudeE7")
    place_id: str | None = None
    address: str | None = None
    name: str | None = None
    semantic_type: str | None = None
    location_confidence: float | None = None


class RawActivity(RawModel):
    """A candidate transport mode with its probability."""

    activity_type: str | None = None
    probability: float | None = None


class RawRoadSegment(RawModel):
    place_id: str | None = None
    duration: str | None = None


class RawWaypointPath(RawModel):
    distance_meters: float | None = None
    road_segment: list[RawRoadSegment] = Field(default_factory=list)
    source: str | None = None


class RawActivitySegment(RawModel):
    """A movement between two locations."""

    start_location: RawLocation | None = None
    end_location: RawLocation | None = None
    duration: RawDuration | None = None
    distance: float | None = None
    activity_type: str | None = None
    confidence: str | None = None
    activities: list[RawActivity] = Field(default_factory=list)
    waypoint_path: RawWaypointPath | None = None
    last_edited_timestamp: str | None = None
    edit_confirmation_status: str | None = None


class RawChildVisit(RawModel):
    """A nested, possibly unconfirmed stay inside a place visit."""

    location: RawLocation | None = None
    duration: RawDuration | None = None
    last_edited_timestamp: str | None = None
    center_lat_e7: int | None = Field(default=None, alias="centerLatE7")
    center_lng_e7: int | None = Field(default=None, alias="centerLngE7")
    place_confidence: str | None = None
    visit_confidence: float | None = None
    place_visit_type: str | None = None
    edit_confirmation_status: str | None = None


class RawPlaceVisit(RawModel):
    """A stay at one place."""

    location: RawLocation | None = None
    duration: RawDuration | None = None
    last_edited_timestamp: str | None = None
    center_lat_e7: int | None = Field(default=None, alias="centerLatE7")
    center_lng_e7: int | None = Field(default=None, alias="centerLngE7")
    place_confidence: str | None = None
    visit_confidence: float | None = None
    place_visit_type: str | None = None
    edit_confirmation_status: str | None = None
    child_visits: list[RawChildVisit] = Field(default_factory=list)


class RawTimelineObject(RawModel):
    """One timeline entry: either a segment or a visit (rarely neither)."""

    activity_segment: RawActivitySegment | None = None
    place_visit: RawPlaceVisit | None = None


class RawTimeline(RawModel):
    """Top-level document of one history file."""

    timeline_objects: list[RawTimelineObject] = Field(default_factory=list)
