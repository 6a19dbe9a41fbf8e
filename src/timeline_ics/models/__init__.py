"""Domain models for timeline to calendar conversion."""

from timeline_ics.models.location import Coordinates
from timeline_ics.models.activity import ActivityType, select_activity_type
from timeline_ics.models.place import Enrichment, PlaceDetails
from timeline_ics.models.record import (
    Endpoint,
    NormalizedRecord,
    RecordCategory,
    SegmentDetail,
    TimeSpan,
)
from timeline_ics.models.event import CalendarEvent
from timeline_ics.models.timeline import (
    RawActivitySegment,
    RawChildVisit,
    RawLocation,
    RawPlaceVisit,
    RawTimeline,
    RawTimelineObject,
)

__all__ = [
    # Location
    "Coordinates",
    # Activity
    "ActivityType",
    "select_activity_type",
    # Place
    "Enrichment",
    "PlaceDetails",
    # Records
    "Endpoint",
    "NormalizedRecord",
    "RecordCategory",
    "SegmentDetail",
    "TimeSpan",
    # Event
    "CalendarEvent",
    # Raw export
    "RawActivitySegment",
    "RawChildVisit",
    "RawLocation",
    "RawPlaceVisit",
    "RawTimeline",
    "RawTimelineObject",
]
