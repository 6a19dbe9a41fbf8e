"""Calendar output: event construction and iCalendar serialization.

## Pipeline position

1. Normalized record (+ optional place overlay, + resolved timezone)
2. ``build_event`` -> ``CalendarEvent``
3. ``serialize_event`` -> VEVENT text
4. ``serialize_calendar`` -> one VCALENDAR per source file
"""

from timeline_ics.calendar.builder import (
    BuildOptions,
    EventBuildError,
    InvalidTimestampError,
    UnknownTimeZoneError,
    build_event,
    format_distance,
    localize_timestamp,
)
from timeline_ics.calendar.serializer import (
    escape_location,
    serialize_calendar,
    serialize_event,
)

__all__ = [
    "BuildOptions",
    "EventBuildError",
    "InvalidTimestampError",
    "UnknownTimeZoneError",
    "build_event",
    "format_distance",
    "localize_timestamp",
    "escape_location",
    "serialize_calendar",
    "serialize_event",
]
