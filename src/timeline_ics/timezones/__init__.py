"""Timezone lookup from coordinates."""

from timeline_ics.timezones.resolver import (
    Polygon,
    TimeZoneDataError,
    TimeZoneIndex,
    TimeZonePolygon,
    TimeZoneResolver,
    load_timezone_index,
)

__all__ = [
    "Polygon",
    "TimeZoneDataError",
    "TimeZoneIndex",
    "TimeZonePolygon",
    "TimeZoneResolver",
    "load_timezone_index",
]
