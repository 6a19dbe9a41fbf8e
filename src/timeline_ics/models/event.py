"""Calendar event model ready for serialization."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from timeline_ics.models.location import Coordinates


class CalendarEvent(BaseModel):
    """A fully resolved calendar event.

    Times are local wall-clock strings (``yyyyMMdd'T'HHmmss``) paired with
    ``time_zone_id``; they carry no offset or ``Z`` suffix.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    uid: str = Field(..., description="Unique event identifier")
    place_id: str | None = Field(default=None, description="Place id of the event location")

    # Stamps (RFC3339 as found in the export)
    dt_stamp: str = Field(..., description="Creation stamp")
    last_modified: str = Field(..., description="Last modification stamp")

    organizer: str | None = None

    # Time
    dt_start: str = Field(..., description="Local start time")
    dt_end: str = Field(..., description="Local end time")
    time_zone_id: str = Field(default="UTC", description="IANA timezone of dt_start/dt_end")

    # Content
    summary: str
    location: str = ""
    geo: Coordinates | None = None
    description: str | None = None
    url: str | None = None
