"""Calendar event construction.

``build_event`` combines a normalized record, its optional place overlay and
its resolved timezone into a ``CalendarEvent``. It performs no I/O and
returns equal events for equal inputs.

## Field resolution

| Field | Visit / child visit | Activity segment |
|-------|---------------------|------------------|
| summary | place marker + name | mode marker + distance + route |
| location | overlay address, record address, coordinates | last road segment address, end address, end coordinates |
| url | overlay URL, place id URL, coordinate URL | end place id URL, end coordinate URL |
| geo | overlay geo, record point | end point |
| description | place id + URL | start/end (+ first/last road segment) paragraphs |

Descriptions use escaped line breaks (a literal backslash followed by
``n``) because iCalendar property values cannot contain raw newlines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timeline_ics.models.event import CalendarEvent
from timeline_ics.models.location import Coordinates
from timeline_ics.models.place import (
    DEFAULT_PLACE_EMOJI,
    Enrichment,
    PlaceDetails,
    place_id_url,
)
from timeline_ics.models.record import Endpoint, NormalizedRecord, SegmentDetail
from timeline_ics.timeline.normalizer import single_line_address

DEFAULT_TIME_ZONE = "UTC"
LOCAL_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
KM_TO_MILES = 0.621371
ROUTE_ARROW = "➡"
ESCAPED_NEWLINE = "\\n"

# RFC3339 instant: date, "T", time, optional fraction, "Z" or offset
RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})$"
)


class EventBuildError(ValueError):
    """Raised when a record cannot be turned into an event."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id


class InvalidTimestampError(EventBuildError):
    """Raised for instants that are not RFC3339 timestamps."""

    pass


class UnknownTimeZoneError(EventBuildError):
    """Raised for timezone identifiers missing from the IANA database."""

    pass


@dataclass(frozen=True)
class BuildOptions:
    """Presentation options for built events."""

    show_miles: bool = False


def parse_instant(timestamp: str) -> datetime:
    """Parse an RFC3339 instant into an aware UTC datetime.

    Raises:
        InvalidTimestampError: If the text is not an RFC3339 instant
    """
    if not RFC3339_PATTERN.match(timestamp):
        raise InvalidTimestampError(f"Text '{timestamp}' is not an RFC3339 timestamp")
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidTimestampError(f"Text '{timestamp}' could not be parsed: {e}") from e
    return parsed.astimezone(timezone.utc)


def get_zone(zone_id: str) -> ZoneInfo:
    """Look up an IANA zone.

    Raises:
        UnknownTimeZoneError: If the identifier is unknown or malformed
    """
    try:
        return ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise UnknownTimeZoneError(f"Unknown time-zone ID: {zone_id}") from e


def localize_timestamp(timestamp: str, zone_id: str) -> str:
    """Convert a UTC instant to local wall-clock text in a zone.

    Examples:
        ('2011-11-11T11:22:22.222Z', 'Asia/Tokyo') -> '20111111T202222'
        ('2011-11-11T11:22:22.222Z', 'UTC') -> '20111111T112222'
    """
    zone = get_zone(zone_id)
    return parse_instant(timestamp).astimezone(zone).strftime(LOCAL_TIMESTAMP_FORMAT)


def format_distance(distance_meters: float, show_miles: bool = False) -> str:
    """Render a distance with one decimal, in km or mi."""
    kilometres = distance_meters / 1000
    if show_miles:
        return f"{kilometres * KM_TO_MILES:.1f}mi"
    return f"{kilometres:.1f}km"


def _paragraph(label: str, address: str, url: str) -> str:
    # Raw newlines would end the property value
    address = single_line_address(address)
    return f"{label} {address}{ESCAPED_NEWLINE}{url}{ESCAPED_NEWLINE}{ESCAPED_NEWLINE}"


def _point_text(point: Coordinates | None) -> str:
    return str(point) if point is not None else ""


# Visits


def _visit_summary(record: NormalizedRecord, place: PlaceDetails | None) -> str:
    if place is None:
        return f"{DEFAULT_PLACE_EMOJI} {record.display_name}"
    return f"{place.emoji} {place.name or record.display_name}"


def _visit_description(place_id: str | None, url: str) -> str:
    maps_part = f"Google Maps URL:{ESCAPED_NEWLINE}{url}"
    if not place_id:
        return maps_part
    return f"Place ID:{ESCAPED_NEWLINE}{place_id}{ESCAPED_NEWLINE}{ESCAPED_NEWLINE}{maps_part}"


def _build_visit(
    record: NormalizedRecord,
    enrichment: Enrichment | None,
) -> dict[str, object]:
    place = enrichment.place if enrichment is not None else None

    url = (place.url if place is not None else None) or record.canonical_url
    location = (
        (place.formatted_address if place is not None else "")
        or record.address
        or str(record.point)
    )
    geo = (place.geo if place is not None else None) or record.point

    return {
        "summary": _visit_summary(record, place),
        "location": location,
        "url": url,
        "geo": geo,
        "description": _visit_description(record.place_id, url),
    }


# Activity segments


def _endpoint_name(endpoint: Endpoint, details: PlaceDetails | None) -> str:
    if details is not None and details.name:
        return details.name
    return endpoint.name


def _endpoint_paragraph(label: str, endpoint: Endpoint, details: PlaceDetails | None) -> str:
    if details is not None:
        address = details.formatted_address or _point_text(endpoint.point)
        url = place_id_url(endpoint.place_id) if endpoint.place_id else ""
    else:
        address = _point_text(endpoint.point) or endpoint.address
        url = endpoint.point.maps_url() if endpoint.point is not None else ""
    return _paragraph(label, address, url)


def _segment_summary(
    segment: SegmentDetail,
    enrichment: Enrichment | None,
    options: BuildOptions,
) -> str:
    start_details = enrichment.start if enrichment is not None else None
    end_details = enrichment.end if enrichment is not None else None
    start_name = _endpoint_name(segment.start, start_details)
    end_name = _endpoint_name(segment.end, end_details)

    summary = (
        f"{segment.activity_type.emoji} "
        f"{format_distance(segment.distance_meters, options.show_miles)}"
    )
    if start_name or end_name:
        summary += f" ({start_name} {ROUTE_ARROW} {end_name})"
    return summary


def _segment_description(segment: SegmentDetail, enrichment: Enrichment | None) -> str:
    overlay = enrichment or Enrichment()
    parts = [
        _endpoint_paragraph("Start Location:", segment.start, overlay.start),
        _endpoint_paragraph("End Location:", segment.end, overlay.end),
    ]
    # Road segments are only listed when their lookup succeeded
    if overlay.first_segment is not None:
        parts.append(
            _paragraph(
                "First segment:",
                overlay.first_segment.formatted_address,
                place_id_url(overlay.first_segment.place_id),
            )
        )
    if overlay.last_segment is not None:
        parts.append(
            _paragraph(
                "Last segment:",
                overlay.last_segment.formatted_address,
                place_id_url(overlay.last_segment.place_id),
            )
        )
    return "".join(parts)


def _build_segment(
    record: NormalizedRecord,
    segment: SegmentDetail,
    enrichment: Enrichment | None,
    options: BuildOptions,
) -> dict[str, object]:
    overlay = enrichment or Enrichment()

    location = (
        (overlay.last_segment.formatted_address if overlay.last_segment else "")
        or (overlay.end.formatted_address if overlay.end else "")
        or record.address
        or str(record.point)
    )

    return {
        "summary": _segment_summary(segment, enrichment, options),
        "location": location,
        "url": record.canonical_url,
        "geo": record.point,
        "description": _segment_description(segment, enrichment),
    }


def build_event(
    record: NormalizedRecord,
    enrichment: Enrichment | None = None,
    zone_id: str | None = None,
    options: BuildOptions | None = None,
) -> CalendarEvent:
    """Build the calendar event for one record.

    Args:
        record: Normalized record
        enrichment: Optional place overlay (never modified)
        zone_id: Resolved IANA zone, None for UTC
        options: Presentation options

    Returns:
        The calendar event

    Raises:
        InvalidTimestampError: If a span instant is malformed
        UnknownTimeZoneError: If ``zone_id`` is not a known zone
    """
    options = options or BuildOptions()
    time_zone_id = zone_id or DEFAULT_TIME_ZONE

    try:
        dt_start = localize_timestamp(record.span.start, time_zone_id)
        dt_end = localize_timestamp(record.span.end, time_zone_id)
    except EventBuildError as e:
        raise type(e)(f"Record {record.id}: {e}", record_id=record.id) from e

    if record.segment is not None:
        fields = _build_segment(record, record.segment, enrichment, options)
    else:
        fields = _build_visit(record, enrichment)

    return CalendarEvent(
        uid=record.id,
        place_id=record.place_id,
        dt_stamp=record.last_edited,
        last_modified=record.last_edited,
        dt_start=dt_start,
        dt_end=dt_end,
        time_zone_id=time_zone_id,
        **fields,
    )
