"""Tests for iCalendar serialization."""

from timeline_ics.calendar.builder import build_event
from timeline_ics.calendar.serializer import (
    PRODID,
    escape_location,
    event_container,
    format_title,
    serialize_calendar,
    serialize_event,
)
from timeline_ics.models.event import CalendarEvent
from timeline_ics.models.location import Coordinates
from timeline_ics.models.place import Enrichment


EXPECTED_CHILD_VISIT_VEVENT = (
    "BEGIN:VEVENT\r\n"
    "TRANSP:OPAQUE\r\n"
    "DTSTART;TZID=Asia/Tokyo:20111111T201111\r\n"
    "DTEND;TZID=Asia/Tokyo:20111111T202222\r\n"
    "X-APPLE-STRUCTURED-LOCATION;VALUE=URI;X-APPLE-RADIUS=147;"
    'X-TITLE="some-place-details-formatted-address":geo:26.33833,127.8\r\n'
    "UID:2011-11-11T11:22:22.222Z\r\n"
    "DTSTAMP:2011-11-11T11:22:22.222Z\r\n"
    "LOCATION:some-place-details-formatted-address\r\n"
    "SUMMARY:🏞 some-place-details-name\r\n"
    "DESCRIPTION:Place ID:\\nsome-child-visit-place-id\\n\\n"
    "Google Maps URL:\\nhttps://maps.google.com/?cid=1021876599690425051\r\n"
    "URL;VALUE=URI:https://maps.google.com/?cid=1021876599690425051\r\n"
    "STATUS:CONFIRMED\r\n"
    "SEQUENCE:1\r\n"
    "LAST-MODIFIED:2011-11-11T11:22:22.222Z\r\n"
    "CREATED:2011-11-11T11:22:22.222Z\r\n"
    "X-APPLE-TRAVEL-ADVISORY-BEHAVIOR:AUTOMATIC\r\n"
    "END:VEVENT\r\n"
)

CALENDAR_HEADER = (
    f"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:{PRODID}\r\nCALSCALE:GREGORIAN\r\n"
)


def make_event(**overrides) -> CalendarEvent:
    fields = {
        "uid": "2020-01-01T01:00:00Z",
        "dt_stamp": "2020-01-01T01:00:00Z",
        "last_modified": "2020-01-01T01:00:00Z",
        "dt_start": "20200101T000000",
        "dt_end": "20200101T010000",
        "summary": "📍 Somewhere",
        "location": "Somewhere",
        "geo": Coordinates(latitude=1.5, longitude=2.5),
    }
    fields.update(overrides)
    return CalendarEvent(**fields)


class TestEscaping:
    """Tests for value escaping helpers."""

    def test_location_commas(self):
        assert escape_location("1 Main St, Springfield") == "1 Main St\\, Springfield"

    def test_location_newlines_then_commas(self):
        """Test that each comma is escaped exactly once."""
        assert escape_location("1 Main St,\nSpringfield\nUSA") == (
            "1 Main St\\,\\, Springfield\\, USA"
        )

    def test_title(self):
        assert format_title("1 Main St,\nSpringfield") == "1 Main St  Springfield"


class TestSerializeEvent:
    """Tests for VEVENT rendering."""

    def test_enriched_child_visit(self, child_visit_record, park_details):
        event = build_event(child_visit_record, Enrichment(place=park_details), "Asia/Tokyo")
        assert serialize_event(event) == EXPECTED_CHILD_VISIT_VEVENT

    def test_location_escaped(self):
        text = serialize_event(make_event(location="2 End Road\nOnna, Okinawa"))

        assert "LOCATION:2 End Road\\, Onna\\, Okinawa\r\n" in text
        assert 'X-TITLE="2 End Road Onna  Okinawa":geo:1.5,2.5\r\n' in text

    def test_url_commas_escaped(self):
        text = serialize_event(make_event(url="https://maps.google.com?q=1.5,2.5"))
        assert "URL;VALUE=URI:https://maps.google.com?q=1.5\\,2.5\r\n" in text

    def test_optional_properties_omitted(self):
        text = serialize_event(make_event())
        assert "DESCRIPTION:" not in text
        assert "URL;VALUE=URI:" not in text

    def test_title_falls_back_to_geo(self):
        """Test that the coordinate title gets its comma replaced too."""
        text = serialize_event(make_event(location=""))
        assert 'X-TITLE="1.5 2.5":geo:1.5,2.5\r\n' in text
        assert "LOCATION:\r\n" in text

    def test_missing_geo(self):
        text = serialize_event(make_event(geo=None, location=""))
        assert 'X-TITLE="0 0":geo:0,0\r\n' in text

    def test_utc(self):
        text = serialize_event(make_event())
        assert "DTSTART;TZID=UTC:20200101T000000\r\n" in text
        assert "DTEND;TZID=UTC:20200101T010000\r\n" in text

    def test_property_order(self):
        names = [line.name for line in event_container(make_event(url="https://example.com"))]
        assert names == [
            "TRANSP",
            "DTSTART",
            "DTEND",
            "X-APPLE-STRUCTURED-LOCATION",
            "UID",
            "DTSTAMP",
            "LOCATION",
            "SUMMARY",
            "URL",
            "STATUS",
            "SEQUENCE",
            "LAST-MODIFIED",
            "CREATED",
            "X-APPLE-TRAVEL-ADVISORY-BEHAVIOR",
        ]

    def test_lines_are_crlf_terminated(self):
        text = serialize_event(make_event(description="a\\nb"))
        assert text.endswith("END:VEVENT\r\n")
        assert "\n" not in text.replace("\r\n", "")


class TestSerializeCalendar:
    """Tests for VCALENDAR wrapping."""

    def test_wraps_events_in_order(self):
        first = make_event(uid="first")
        second = make_event(uid="second")
        text = serialize_calendar([first, second])

        assert text.startswith(CALENDAR_HEADER + "BEGIN:VEVENT\r\n")
        assert text.endswith("END:VEVENT\r\nEND:VCALENDAR\r\n")
        assert text.index("UID:first") < text.index("UID:second")
        assert text.count("BEGIN:VEVENT") == 2

    def test_event_blocks_embedded_unchanged(self):
        event = make_event()
        text = serialize_calendar([event])
        assert text == CALENDAR_HEADER + serialize_event(event) + "END:VCALENDAR\r\n"

    def test_empty_calendar(self):
        assert serialize_calendar([]) == CALENDAR_HEADER + "END:VCALENDAR\r\n"
