"""Reading location history files."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from timeline_ics.models.timeline import RawTimeline

logger = logging.getLogger(__name__)


class TimelineParseError(Exception):
    """Raised when a history file cannot be read or does not match the schema."""

    def __init__(self, message: str, source: str):
        super().__init__(message)
        self.source = source


def parse_timeline(text: str | bytes, source: str = "<string>") -> RawTimeline:
    """Validate JSON text against the raw timeline schema.

    Raises:
        TimelineParseError: If the text is not valid JSON or has the wrong shape
    """
    try:
        return RawTimeline.model_validate_json(text)
    except ValidationError as e:
        raise TimelineParseError(
            f"{source}: not a location history document ({e.error_count()} errors)",
            source=source,
        ) from e


def read_timeline(path: str | Path) -> RawTimeline:
    """Read and validate one history file.

    Args:
        path: Path to a ``*.json`` export

    Returns:
        Parsed raw timeline

    Raises:
        TimelineParseError: If the file is unreadable or malformed
    """
    p = Path(path)
    try:
        text = p.read_bytes()
    except OSError as e:
        raise TimelineParseError(f"{p}: cannot read file ({e})", source=str(p)) from e

    timeline = parse_timeline(text, source=str(p))
    logger.debug(f"{p}: {len(timeline.timeline_objects)} timeline objects")
    return timeline


def list_timeline_files(directory: str | Path, extension: str = ".json") -> list[Path]:
    """List history files under a directory (recursively), sorted by path."""
    root = Path(directory)
    if not root.is_dir():
        logger.warning(f"Source directory {root} does not exist")
        return []
    return sorted(p for p in root.rglob(f"*{extension}") if p.is_file())
