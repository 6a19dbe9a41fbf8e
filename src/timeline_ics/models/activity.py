"""Transport modes reported for activity segments."""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class ActivityType(str, Enum):
    """Activity types used by the location history export."""

    BOATING = "BOATING"
    CYCLING = "CYCLING"
    FLYING = "FLYING"
    HIKING = "HIKING"
    HORSEBACK_RIDING = "HORSEBACK_RIDING"
    IN_BUS = "IN_BUS"
    IN_CABLECAR = "IN_CABLECAR"
    IN_FERRY = "IN_FERRY"
    IN_FUNICULAR = "IN_FUNICULAR"
    IN_GONDOLA_LIFT = "IN_GONDOLA_LIFT"
    IN_PASSENGER_VEHICLE = "IN_PASSENGER_VEHICLE"
    IN_SUBWAY = "IN_SUBWAY"
    IN_TAXI = "IN_TAXI"
    IN_TRAIN = "IN_TRAIN"
    IN_TRAM = "IN_TRAM"
    IN_VEHICLE = "IN_VEHICLE"
    IN_WHEELCHAIR = "IN_WHEELCHAIR"
    KAYAKING = "KAYAKING"
    KITESURFING = "KITESURFING"
    MOTORCYCLING = "MOTORCYCLING"
    PARAGLIDING = "PARAGLIDING"
    ROWING = "ROWING"
    RUNNING = "RUNNING"
    SAILING = "SAILING"
    SKATEBOARDING = "SKATEBOARDING"
    SKATING = "SKATING"
    SKIING = "SKIING"
    SLEDDING = "SLEDDING"
    SNOWBOARDING = "SNOWBOARDING"
    SNOWMOBILE = "SNOWMOBILE"
    SNOWSHOEING = "SNOWSHOEING"
    STILL = "STILL"
    SURFING = "SURFING"
    SWIMMING = "SWIMMING"
    WALKING = "WALKING"
    WALKING_NORDIC = "WALKING_NORDIC"
    UNKNOWN = "UNKNOWN_ACTIVITY_TYPE"

    @property
    def emoji(self) -> str:
        """Marker shown in front of the event summary."""
        return ACTIVITY_EMOJI.get(self, "❓")

    @property
    def is_specific(self) -> bool:
        """False for the catch-all types that say little about the mode."""
        return self not in GENERIC_ACTIVITY_TYPES

    @classmethod
    def parse(cls, value: str | None) -> ActivityType | None:
        """Map an export string to a known type, None if unrecognized."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


GENERIC_ACTIVITY_TYPES = frozenset({ActivityType.IN_VEHICLE, ActivityType.UNKNOWN})

ACTIVITY_EMOJI: dict[ActivityType, str] = {
    ActivityType.BOATING: "🚤",
    ActivityType.CYCLING: "🚲",
    ActivityType.FLYING: "✈️",
    ActivityType.HIKING: "🥾",
    ActivityType.HORSEBACK_RIDING: "🏇",
    ActivityType.IN_BUS: "🚌",
    ActivityType.IN_CABLECAR: "🚡",
    ActivityType.IN_FERRY: "⛴",
    ActivityType.IN_FUNICULAR: "🚞",
    ActivityType.IN_GONDOLA_LIFT: "🚠",
    ActivityType.IN_PASSENGER_VEHICLE: "🚗",
    ActivityType.IN_SUBWAY: "🚇",
    ActivityType.IN_TAXI: "🚕",
    ActivityType.IN_TRAIN: "🚆",
    ActivityType.IN_TRAM: "🚊",
    ActivityType.IN_VEHICLE: "🚐",
    ActivityType.IN_WHEELCHAIR: "🦽",
    ActivityType.KAYAKING: "🛶",
    ActivityType.KITESURFING: "🪁",
    ActivityType.MOTORCYCLING: "🏍",
    ActivityType.PARAGLIDING: "🪂",
    ActivityType.ROWING: "🚣",
    ActivityType.RUNNING: "🏃",
    ActivityType.SAILING: "⛵",
    ActivityType.SKATEBOARDING: "🛹",
    ActivityType.SKATING: "⛸",
    ActivityType.SKIING: "⛷",
    ActivityType.SLEDDING: "🛷",
    ActivityType.SNOWBOARDING: "🏂",
    ActivityType.SNOWMOBILE: "🏔",
    ActivityType.SNOWSHOEING: "🥾",
    ActivityType.STILL: "🧍",
    ActivityType.SURFING: "🏄",
    ActivityType.SWIMMING: "🏊",
    ActivityType.WALKING: "🚶",
    ActivityType.WALKING_NORDIC: "🚶",
    ActivityType.UNKNOWN: "❓",
}


def select_activity_type(
    declared: str | None,
    candidates: Iterable[tuple[str | None, float | None]] = (),
) -> ActivityType:
    """Pick the most useful transport mode for a segment.

    The declared type wins when it is a known, specific mode. Otherwise the
    most probable specific candidate is used. A generic declared type
    (e.g. IN_VEHICLE) is only kept when no candidate is more specific.

    Args:
        declared: The segment's own ``activityType``
        candidates: ``(activityType, probability)`` pairs from ``activities``

    Returns:
        The selected ActivityType, UNKNOWN when nothing is recognized
    """
    declared_type = ActivityType.parse(declared)
    if declared_type is not None and declared_type.is_specific:
        return declared_type

    ranked = sorted(
        ((ActivityType.parse(name), probability or 0.0) for name, probability in candidates),
        key=lambda pair: pair[1],
        reverse=True,
    )
    for activity_type, _ in ranked:
        if activity_type is not None and activity_type.is_specific:
            return activity_type

    return declared_type or ActivityType.UNKNOWN
