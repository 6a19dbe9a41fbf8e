"""Normalized intermediate records.

Every raw timeline entry that survives normalization becomes exactly one
``NormalizedRecord``, which in turn becomes exactly one calendar event.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from timeline_ics.models.activity import ActivityType
from timeline_ics.models.location import Coordinates


class RecordCategory(str, Enum):
    """Which kind of raw entry a record came from."""

    VISIT = "visit"
    CHILD_VISIT = "child_visit"
    ACTIVITY_SEGMENT = "activity_segment"

    @property
    def is_visit(self) -> bool:
        return self in (RecordCategory.VISIT, RecordCategory.CHILD_VISIT)


class TimeSpan(BaseModel):
    """Start and end instants as RFC3339 UTC strings.

    Ordering is not checked; values are passed through untouched.
    """

    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class Endpoint(BaseModel):
    """One end of an activity segment."""

    model_config = ConfigDict(frozen=True)

    place_id: str | None = None
    name: str = ""
    address: str = ""
    point: Coordinates | None = None


class SegmentDetail(BaseModel):
    """Movement data only activity segments carry."""

    model_config = ConfigDict(frozen=True)

    start: Endpoint
    end: Endpoint
    distance_meters: float = 0.0
    activity_type: ActivityType = ActivityType.UNKNOWN
    first_segment_place_id: str | None = None
    last_segment_place_id: str | None = None


class NormalizedRecord(BaseModel):
    """A timeline entry reduced to what the event builder needs."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier, used as the event UID")
    place_id: str | None = None
    span: TimeSpan
    last_edited: str = Field(
        ..., description="Last edit instant, span.end when the export has none"
    )
    display_name: str = ""
    address: str = ""
    point: Coordinates = Field(
        ..., description="Representative point used for timezone lookup"
    )
    canonical_url: str = ""
    description: str | None = None
    category: RecordCategory
    segment: SegmentDetail | None = None

    def place_ids(self) -> list[str]:
        """All place ids worth looking up for this record, in a fixed order."""
        if self.segment is None:
            return [self.place_id] if self.place_id else []
        ids = [
            self.segment.start.place_id,
            self.segment.end.place_id,
            self.segment.first_segment_place_id,
            self.segment.last_segment_place_id,
        ]
        return [place_id for place_id in ids if place_id]
