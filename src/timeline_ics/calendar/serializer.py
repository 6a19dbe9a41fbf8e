"""iCalendar text output.

Each event becomes one VEVENT block with a fixed property order, built from
``ics`` content lines. The structured location and travel advisory
properties are Apple Calendar extensions; other clients ignore them.

Blocks are assembled as ``ics`` containers instead of ``ics.Event``
objects: ``Calendar`` keeps events in a set and ``Event`` writes its own
DTSTAMP and UID, so neither source order nor the stamps below would
survive. Lines end with CRLF and are not folded.

## Escaping

- LOCATION: newlines become ", " first, then every comma is escaped as
  "\\,". Running the steps in this order escapes each comma exactly once.
- X-TITLE: a quoted display string, so commas and newlines both become
  spaces instead of being escaped.
- URL: commas escaped.
- SUMMARY and DESCRIPTION are written as built (descriptions already use
  escaped line breaks).
"""

from __future__ import annotations

from typing import Iterable

from ics.grammar.parse import Container, ContentLine

from timeline_ics.models.event import CalendarEvent

PRODID = "-//timeline-ics//Location History Export//EN"
STRUCTURED_LOCATION_RADIUS = 147
FALLBACK_GEO = "0,0"
CRLF = "\r\n"


def escape_commas(value: str) -> str:
    return value.replace(",", "\\,")


def escape_location(location: str) -> str:
    """Escape a LOCATION value: newlines to ', ', then commas to '\\,'."""
    return escape_commas(location.replace("\n", ", "))


def format_title(title: str) -> str:
    """Make a string safe for the quoted X-TITLE parameter."""
    return title.replace("\n", " ").replace(",", " ")


def structured_location(event: CalendarEvent) -> ContentLine:
    geo_text = str(event.geo) if event.geo is not None else FALLBACK_GEO
    title = event.location or geo_text
    return ContentLine(
        "X-APPLE-STRUCTURED-LOCATION",
        params={
            "VALUE": ["URI"],
            "X-APPLE-RADIUS": [str(STRUCTURED_LOCATION_RADIUS)],
            "X-TITLE": [f'"{format_title(title)}"'],
        },
        value=f"geo:{geo_text}",
    )


def event_container(event: CalendarEvent) -> Container:
    """Build the VEVENT content lines for one event."""
    zone = {"TZID": [event.time_zone_id]}
    vevent = Container(
        "VEVENT",
        ContentLine("TRANSP", value="OPAQUE"),
        ContentLine("DTSTART", params=dict(zone), value=event.dt_start),
        ContentLine("DTEND", params=dict(zone), value=event.dt_end),
        structured_location(event),
        ContentLine("UID", value=event.uid),
        ContentLine("DTSTAMP", value=event.dt_stamp),
        ContentLine("LOCATION", value=escape_location(event.location)),
        ContentLine("SUMMARY", value=event.summary),
    )
    if event.description is not None:
        vevent.append(ContentLine("DESCRIPTION", value=event.description))
    if event.url is not None:
        vevent.append(
            ContentLine("URL", params={"VALUE": ["URI"]}, value=escape_commas(event.url))
        )
    vevent.extend(
        [
            ContentLine("STATUS", value="CONFIRMED"),
            ContentLine("SEQUENCE", value="1"),
            ContentLine("LAST-MODIFIED", value=event.last_modified),
            ContentLine("CREATED", value=event.last_modified),
            ContentLine("X-APPLE-TRAVEL-ADVISORY-BEHAVIOR", value="AUTOMATIC"),
        ]
    )
    return vevent


def serialize_event(event: CalendarEvent) -> str:
    """Render one event as a VEVENT block (CRLF terminated)."""
    return str(event_container(event)) + CRLF


def serialize_calendar(events: Iterable[CalendarEvent]) -> str:
    """Wrap VEVENT blocks, in the given order, into one VCALENDAR."""
    calendar = Container(
        "VCALENDAR",
        ContentLine("VERSION", value="2.0"),
        ContentLine("PRODID", value=PRODID),
        ContentLine("CALSCALE", value="GREGORIAN"),
    )
    calendar.extend(event_container(event) for event in events)
    return str(calendar) + CRLF
