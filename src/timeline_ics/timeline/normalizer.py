"""Normalization of raw timeline entries.

Each raw entry kind has its own function; ``normalize_timeline`` dispatches
on which member of a timeline object is present:

| Raw entry | Record category | id | Representative point |
|-----------|-----------------|----|----------------------|
| activitySegment | ACTIVITY_SEGMENT | lastEditedTimestamp, else start | end location |
| placeVisit | VISIT | lastEditedTimestamp, else end | visit location |
| placeVisit.childVisits[] | CHILD_VISIT | lastEditedTimestamp, else end | child location |

Entries without a usable point or without a complete duration are dropped.
Nothing here talks to the network or resolves timezones.
"""

from __future__ import annotations

import logging
from typing import Collection

from timeline_ics.models.activity import select_activity_type
from timeline_ics.models.location import Coordinates
from timeline_ics.models.place import place_id_url
from timeline_ics.models.record import (
    Endpoint,
    NormalizedRecord,
    RecordCategory,
    SegmentDetail,
    TimeSpan,
)
from timeline_ics.models.timeline import (
    RawActivitySegment,
    RawChildVisit,
    RawDuration,
    RawLocation,
    RawPlaceVisit,
    RawTimeline,
)

logger = logging.getLogger(__name__)


def single_line_address(address: str | None) -> str:
    """Collapse a multi-line address into one comma separated line."""
    if not address:
        return ""
    lines = [line.strip() for line in address.splitlines()]
    return ", ".join(line for line in lines if line)


def _location_point(
    location: RawLocation | None,
    center_lat_e7: int | None = None,
    center_lng_e7: int | None = None,
) -> Coordinates | None:
    """Point of a raw location, falling back to the visit center."""
    if (
        location is not None
        and location.latitude_e7 is not None
        and location.longitude_e7 is not None
    ):
        return Coordinates.from_e7(location.latitude_e7, location.longitude_e7)
    if center_lat_e7 is not None and center_lng_e7 is not None:
        return Coordinates.from_e7(center_lat_e7, center_lng_e7)
    return None


def _time_span(duration: RawDuration | None) -> TimeSpan | None:
    if duration is None or not duration.start_timestamp or not duration.end_timestamp:
        return None
    return TimeSpan(start=duration.start_timestamp, end=duration.end_timestamp)


def _canonical_url(place_id: str | None, point: Coordinates) -> str:
    return place_id_url(place_id) if place_id else point.maps_url()


def _endpoint(location: RawLocation | None) -> Endpoint:
    if location is None:
        return Endpoint()
    return Endpoint(
        place_id=location.place_id or None,
        name=location.name or "",
        address=single_line_address(location.address),
        point=_location_point(location),
    )


def normalize_activity_segment(segment: RawActivitySegment) -> NormalizedRecord | None:
    """Normalize a movement segment, None when it has no end point or duration."""
    span = _time_span(segment.duration)
    end = _endpoint(segment.end_location)
    if span is None or end.point is None:
        logger.debug("Dropping activity segment without end location or duration")
        return None

    start = _endpoint(segment.start_location)

    distance = segment.distance
    if distance is None and segment.waypoint_path is not None:
        distance = segment.waypoint_path.distance_meters

    road_place_ids: list[str] = []
    if segment.waypoint_path is not None:
        road_place_ids = [
            road.place_id for road in segment.waypoint_path.road_segment if road.place_id
        ]

    activity_type = select_activity_type(
        segment.activity_type,
        [(a.activity_type, a.probability) for a in segment.activities],
    )

    return NormalizedRecord(
        id=segment.last_edited_timestamp or span.start,
        place_id=end.place_id,
        span=span,
        last_edited=segment.last_edited_timestamp or span.end,
        display_name=end.name,
        address=end.address,
        point=end.point,
        canonical_url=_canonical_url(end.place_id, end.point),
        category=RecordCategory.ACTIVITY_SEGMENT,
        segment=SegmentDetail(
            start=start,
            end=end,
            distance_meters=distance or 0.0,
            activity_type=activity_type,
            first_segment_place_id=road_place_ids[0] if road_place_ids else None,
            last_segment_place_id=road_place_ids[-1] if road_place_ids else None,
        ),
    )


def _normalize_stay(
    visit: RawPlaceVisit | RawChildVisit,
    category: RecordCategory,
) -> NormalizedRecord | None:
    span = _time_span(visit.duration)
    point = _location_point(visit.location, visit.center_lat_e7, visit.center_lng_e7)
    if span is None or point is None:
        logger.debug(f"Dropping {category.value} without location or duration")
        return None

    location = visit.location or RawLocation()
    place_id = location.place_id or None
    return NormalizedRecord(
        id=visit.last_edited_timestamp or span.end,
        place_id=place_id,
        span=span,
        last_edited=visit.last_edited_timestamp or span.end,
        display_name=location.name or "",
        address=single_line_address(location.address),
        point=point,
        canonical_url=_canonical_url(place_id, point),
        category=category,
    )


def normalize_place_visit(visit: RawPlaceVisit) -> NormalizedRecord | None:
    """Normalize the visit itself; child visits are handled separately."""
    return _normalize_stay(visit, RecordCategory.VISIT)


def normalize_child_visit(child: RawChildVisit) -> NormalizedRecord | None:
    """Normalize one nested child visit, None when it has no duration."""
    return _normalize_stay(child, RecordCategory.CHILD_VISIT)


def normalize_timeline(
    timeline: RawTimeline,
    ignored_activity_types: Collection[str] = (),
) -> list[NormalizedRecord]:
    """Normalize every entry of a timeline, keeping source order.

    A visit's child visits follow the visit itself. Child visits are kept
    even when their parent visit is dropped.

    Args:
        timeline: Parsed raw timeline
        ignored_activity_types: Activity type names whose segments are dropped

    Returns:
        Normalized records in source order
    """
    ignored = {name.upper() for name in ignored_activity_types}
    records: list[NormalizedRecord] = []

    for timeline_object in timeline.timeline_objects:
        if timeline_object.activity_segment is not None:
            record = normalize_activity_segment(timeline_object.activity_segment)
            if record is not None and record.segment is not None:
                if record.segment.activity_type.value in ignored:
                    logger.debug(
                        f"Dropping {record.segment.activity_type.value} segment {record.id}"
                    )
                else:
                    records.append(record)

        if timeline_object.place_visit is not None:
            visit = timeline_object.place_visit
            record = normalize_place_visit(visit)
            if record is not None:
                records.append(record)
            for child in visit.child_visits:
                child_record = normalize_child_visit(child)
                if child_record is not None:
                    records.append(child_record)

    return records
