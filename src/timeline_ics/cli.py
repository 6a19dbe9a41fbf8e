"""Command-line interface for location history to iCal conversion."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from timeline_ics import __version__
from timeline_ics.config import Settings, get_settings
from timeline_ics.converter import FileResult, TimelineConverter
from timeline_ics.timezones.resolver import TimeZoneDataError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timeline-ics",
        description="Convert Google location history JSON exports to iCal files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser(
        "convert", help="Convert every JSON file in a directory"
    )
    convert_parser.add_argument(
        "--source",
        type=Path,
        help="Directory with location history JSON files",
    )
    convert_parser.add_argument(
        "--dest",
        type=Path,
        help="Directory for the generated iCal files",
    )
    convert_parser.add_argument(
        "--timezones",
        type=Path,
        help="Timezone boundary GeoJSON file",
    )
    convert_parser.add_argument(
        "--places-lookup",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enrich places using the Google Places API",
    )
    convert_parser.add_argument(
        "--miles",
        action="store_true",
        default=None,
        help="Show distances in miles instead of kilometres",
    )
    convert_parser.add_argument(
        "--no-places",
        action="store_true",
        help="Do not export place visits",
    )
    convert_parser.add_argument(
        "--no-activities",
        action="store_true",
        help="Do not export activity segments",
    )
    convert_parser.add_argument(
        "--ignore-place",
        action="append",
        default=[],
        metavar="PLACE_ID",
        help="Place id to skip (repeatable, added to configured ids)",
    )
    convert_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings updated with command-line values."""
    updates: dict[str, object] = {}
    if args.source is not None:
        updates["json_path"] = args.source
    if args.dest is not None:
        updates["ical_path"] = args.dest
    if args.timezones is not None:
        updates["timezone_boundaries_path"] = args.timezones
    if args.places_lookup is not None:
        updates["enable_places_api_lookup"] = args.places_lookup
    if args.miles:
        updates["show_miles"] = True
    if args.no_places:
        updates["export_places"] = False
    if args.no_activities:
        updates["export_activity_segments"] = False
    if args.ignore_place:
        updates["ignored_visited_place_ids"] = [
            *settings.ignored_visited_place_ids,
            *args.ignore_place,
        ]
    if args.verbose:
        updates["log_level"] = "DEBUG"

    # model_validate re-runs the validators (e.g. lookup without API key)
    return Settings.model_validate({**settings.model_dump(), **updates})


def print_summary(results: list[FileResult]) -> None:
    for result in results:
        failure = result.parse_error or result.write_error
        if failure is not None:
            print(f"✗ {result.source}: {failure}")
            continue
        marker = "✓" if result.success else "!"
        line = (
            f"{marker} {result.source.name}: {result.events_written} events "
            f"({result.records_excluded} excluded)"
        )
        print(line)
        for error in result.errors:
            print(f"    {error}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = apply_overrides(get_settings(), args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        converter = TimelineConverter.from_settings(settings)
    except TimeZoneDataError as e:
        print(f"Cannot load timezone data: {e}", file=sys.stderr)
        return 2

    results = converter.run(settings.json_path, settings.ical_path)
    print_summary(results)
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
