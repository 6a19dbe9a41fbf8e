"""Location history to iCalendar conversion.

## Conversion Process

1. List ``*.json`` files under the source directory
2. For each file:
   a. Read and validate the raw timeline (unreadable file: warn, skip)
   b. Normalize entries (entries without a location are dropped)
   c. Keep the categories selected for export
   d. Drop excluded places, optionally enrich the rest with place details
   e. Resolve each record's timezone (no match: UTC)
   f. Build one event per record (bad timestamp or zone: record error)
   g. Write all events, in source order, to ``<name>.ics``

A failure in one file or record never stops the others.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection

from timeline_ics.calendar.builder import BuildOptions, EventBuildError, build_event
from timeline_ics.calendar.serializer import serialize_calendar
from timeline_ics.config import Settings
from timeline_ics.models.event import CalendarEvent
from timeline_ics.models.place import Enrichment
from timeline_ics.models.record import NormalizedRecord
from timeline_ics.models.timeline import RawTimeline
from timeline_ics.places.enrichment import PlaceEnrichmentGate
from timeline_ics.places.google import GooglePlacesClient
from timeline_ics.timeline.normalizer import normalize_timeline
from timeline_ics.timeline.reader import (
    TimelineParseError,
    list_timeline_files,
    read_timeline,
)
from timeline_ics.timezones.resolver import TimeZoneResolver, load_timezone_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvertOptions:
    """What to export and how to present it."""

    export_places: bool = True
    export_activity_segments: bool = True
    show_miles: bool = False
    ignored_activity_types: frozenset[str] = frozenset()

    def wants(self, record: NormalizedRecord) -> bool:
        if record.category.is_visit:
            return self.export_places
        return self.export_activity_segments


@dataclass
class TimelineResult:
    """Events built from one timeline, plus per-record failures."""

    events: list[CalendarEvent] = field(default_factory=list)
    records_found: int = 0
    records_excluded: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class FileResult:
    """Result of converting one history file."""

    source: Path
    output: Path | None = None
    records_found: int = 0
    records_excluded: int = 0
    events_written: int = 0
    errors: list[str] = field(default_factory=list)
    parse_error: str | None = None
    write_error: str | None = None

    @property
    def success(self) -> bool:
        return (
            self.parse_error is None
            and self.write_error is None
            and len(self.errors) == 0
        )


class TimelineConverter:
    """Convert location history files to iCalendar files.

    Example:
        ```python
        converter = TimelineConverter.from_settings(get_settings())
        results = converter.run(Path("json"), Path("ical"))
        ```
    """

    def __init__(
        self,
        resolver: TimeZoneResolver,
        gate: PlaceEnrichmentGate | None = None,
        options: ConvertOptions | None = None,
    ):
        """Initialize the converter.

        Args:
            resolver: Timezone resolver over a preloaded index
            gate: Exclusion and enrichment gate (defaults to no lookups)
            options: Export selection and presentation options
        """
        self.resolver = resolver
        self.gate = gate or PlaceEnrichmentGate()
        self.options = options or ConvertOptions()
        self.build_options = BuildOptions(show_miles=self.options.show_miles)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        exclusions: Collection[str] | None = None,
    ) -> TimelineConverter:
        """Create a converter from settings, loading timezone data once.

        Raises:
            TimeZoneDataError: If the timezone boundary file cannot be loaded
        """
        resolver = TimeZoneResolver(load_timezone_index(settings.timezone_boundaries_path))

        lookup = None
        if settings.places_lookup_configured:
            lookup = GooglePlacesClient(
                api_key=settings.places_api_key or "",
                language=settings.places_language,
                timeout=settings.places_timeout_seconds,
            )

        gate = PlaceEnrichmentGate(
            lookup=lookup,
            enabled=settings.enable_places_api_lookup,
            exclusions=(
                exclusions if exclusions is not None else settings.ignored_visited_place_ids
            ),
            max_concurrency=settings.places_max_concurrency,
        )
        options = ConvertOptions(
            export_places=settings.export_places,
            export_activity_segments=settings.export_activity_segments,
            show_miles=settings.show_miles,
            ignored_activity_types=frozenset(settings.ignored_activity_types),
        )
        return cls(resolver=resolver, gate=gate, options=options)

    def build(
        self,
        record: NormalizedRecord,
        enrichment: Enrichment | None = None,
    ) -> CalendarEvent:
        """Resolve the record's timezone and build its event."""
        zone_id = self.resolver.resolve(record.point)
        return build_event(record, enrichment, zone_id, self.build_options)

    async def convert_timeline(self, timeline: RawTimeline) -> TimelineResult:
        """Turn one parsed timeline into events, in source order."""
        result = TimelineResult()

        records = [
            record
            for record in normalize_timeline(
                timeline, ignored_activity_types=self.options.ignored_activity_types
            )
            if self.options.wants(record)
        ]
        result.records_found = len(records)

        pairs = await self.gate.enrich_all(records)
        result.records_excluded = len(records) - len(pairs)

        for record, enrichment in pairs:
            try:
                result.events.append(self.build(record, enrichment))
            except EventBuildError as e:
                logger.error(f"Cannot build event for {record.category.value} {record.id}: {e}")
                result.errors.append(str(e))

        return result

    async def convert_file(self, path: Path, output: Path) -> FileResult:
        """Convert one history file into one iCal file."""
        file_result = FileResult(source=path)

        try:
            timeline = read_timeline(path)
        except TimelineParseError as e:
            logger.warning(f"Skipping {path}: {e}")
            file_result.parse_error = str(e)
            return file_result

        result = await self.convert_timeline(timeline)
        file_result.records_found = result.records_found
        file_result.records_excluded = result.records_excluded
        file_result.errors = result.errors

        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(serialize_calendar(result.events), encoding="utf-8", newline="")
        except OSError as e:
            logger.error(f"Cannot write {output}: {e}")
            file_result.write_error = str(e)
            return file_result
        file_result.output = output
        file_result.events_written = len(result.events)

        logger.info(f"{path.name}: {file_result.events_written} events written to {output}")
        return file_result

    async def convert_directory(self, source_dir: Path, dest_dir: Path) -> list[FileResult]:
        """Convert every history file under ``source_dir`` into ``dest_dir``.

        Output files keep their relative path and base name with ``.ics``.
        """
        results: list[FileResult] = []
        files = list_timeline_files(source_dir)
        logger.info(f"Found {len(files)} history files in {source_dir}")

        try:
            for path in files:
                output = dest_dir / path.relative_to(source_dir).with_suffix(".ics")
                logger.info(f"Processing {path}")
                results.append(await self.convert_file(path, output))
        finally:
            if self.gate.lookup is not None:
                await self.gate.lookup.aclose()

        return results

    def run(self, source_dir: Path, dest_dir: Path) -> list[FileResult]:
        """Synchronous entry point for ``convert_directory``."""
        return asyncio.run(self.convert_directory(source_dir, dest_dir))
