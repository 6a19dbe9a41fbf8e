"""Location history input: reading and normalization."""

from timeline_ics.timeline.normalizer import (
    normalize_activity_segment,
    normalize_child_visit,
    normalize_place_visit,
    normalize_timeline,
    single_line_address,
)
from timeline_ics.timeline.reader import (
    TimelineParseError,
    list_timeline_files,
    parse_timeline,
    read_timeline,
)

__all__ = [
    "normalize_activity_segment",
    "normalize_child_visit",
    "normalize_place_visit",
    "normalize_timeline",
    "single_line_address",
    "TimelineParseError",
    "list_timeline_files",
    "parse_timeline",
    "read_timeline",
]
