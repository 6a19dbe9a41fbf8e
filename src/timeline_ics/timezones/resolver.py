"""Coordinate to IANA timezone resolution.

Timezones are resolved by testing which boundary polygon contains a point.
The boundaries come from a GeoJSON FeatureCollection in the layout
published by timezone-boundary-builder
(https://github.com/evansiroky/timezone-boundary-builder):

```json
{
  "type": "FeatureCollection",
  "features": [
    {
      "type": "Feature",
      "properties": {"tzid": "Asia/Tokyo"},
      "geometry": {"type": "MultiPolygon", "coordinates": [[[[lon, lat], ...]]]}
    }
  ]
}
```

## Overlapping polygons

Boundaries may overlap along borders and in disputed areas. The first
feature (in file order) containing the point wins. No attempt is made to
pick a "better" zone; results for points on an overlap depend on the data
set's ordering.

## Containment

Even-odd ray casting per ring. A polygon's first ring is its shell; later
rings are holes. Points exactly on an edge may fall either way.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

from timeline_ics.models.location import Coordinates

logger = logging.getLogger(__name__)

# (longitude, latitude) pairs, GeoJSON order
Ring = tuple[tuple[float, float], ...]


class TimeZoneDataError(Exception):
    """Raised when timezone boundary data cannot be loaded."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


def _point_in_ring(longitude: float, latitude: float, ring: Ring) -> bool:
    inside = False
    count = len(ring)
    j = count - 1
    for i in range(count):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > latitude) != (yj > latitude):
            x_cross = xi + (latitude - yi) * (xj - xi) / (yj - yi)
            if longitude < x_cross:
                inside = not inside
        j = i
    return inside


@dataclass(frozen=True, slots=True)
class Polygon:
    """A shell ring with optional holes, plus its bounding box."""

    shell: Ring
    holes: tuple[Ring, ...] = ()
    min_lon: float = 0.0
    min_lat: float = 0.0
    max_lon: float = 0.0
    max_lat: float = 0.0

    @classmethod
    def from_rings(cls, rings: Sequence[Sequence[Sequence[float]]]) -> Polygon:
        """Build from GeoJSON polygon coordinates (shell first, then holes)."""
        if not rings or not rings[0]:
            raise ValueError("Polygon needs at least one non-empty ring")
        parsed = [tuple((float(p[0]), float(p[1])) for p in ring) for ring in rings]
        shell = parsed[0]
        lons = [p[0] for p in shell]
        lats = [p[1] for p in shell]
        return cls(
            shell=shell,
            holes=tuple(parsed[1:]),
            min_lon=min(lons),
            min_lat=min(lats),
            max_lon=max(lons),
            max_lat=max(lats),
        )

    def contains(self, longitude: float, latitude: float) -> bool:
        """Check whether the point lies inside the shell and outside all holes."""
        if not (
            self.min_lon <= longitude <= self.max_lon
            and self.min_lat <= latitude <= self.max_lat
        ):
            return False
        if not _point_in_ring(longitude, latitude, self.shell):
            return False
        return not any(_point_in_ring(longitude, latitude, hole) for hole in self.holes)


@dataclass(frozen=True, slots=True)
class TimeZonePolygon:
    """All polygons belonging to one IANA zone."""

    zone_id: str
    polygons: tuple[Polygon, ...]

    def contains(self, point: Coordinates) -> bool:
        return any(p.contains(point.longitude, point.latitude) for p in self.polygons)


@dataclass(frozen=True, slots=True)
class TimeZoneIndex:
    """Immutable, ordered set of timezone boundaries.

    Load once per run and share; it is never modified after construction.
    """

    zones: tuple[TimeZonePolygon, ...] = ()

    def __len__(self) -> int:
        return len(self.zones)

    @classmethod
    def from_geojson(cls, data: dict[str, Any]) -> TimeZoneIndex:
        """Build an index from a parsed GeoJSON FeatureCollection.

        Features without a ``tzid`` property or with unsupported geometry
        are skipped with a warning.
        """
        features = data.get("features")
        if not isinstance(features, list):
            raise TimeZoneDataError("GeoJSON document has no 'features' list")

        zones: list[TimeZonePolygon] = []
        for position, feature in enumerate(features):
            if not isinstance(feature, dict):
                logger.warning(f"Skipping timezone feature #{position}: not an object")
                continue

            properties = feature.get("properties")
            if not isinstance(properties, dict):
                properties = {}
            geometry = feature.get("geometry")
            if not isinstance(geometry, dict):
                geometry = {}
            zone_id = properties.get("tzid")
            geometry_type = geometry.get("type")
            coordinates = geometry.get("coordinates") or []

            if not zone_id or not isinstance(zone_id, str):
                logger.warning(f"Skipping timezone feature #{position}: no tzid")
                continue

            try:
                if geometry_type == "Polygon":
                    polygons = (Polygon.from_rings(coordinates),)
                elif geometry_type == "MultiPolygon":
                    polygons = tuple(Polygon.from_rings(rings) for rings in coordinates)
                else:
                    logger.warning(
                        f"Skipping timezone {zone_id}: unsupported geometry {geometry_type}"
                    )
                    continue
            except (ValueError, TypeError, IndexError) as e:
                logger.warning(f"Skipping timezone {zone_id}: invalid geometry ({e})")
                continue

            zones.append(TimeZonePolygon(zone_id=zone_id, polygons=polygons))

        return cls(zones=tuple(zones))

    @classmethod
    def from_zones(cls, zones: Iterable[TimeZonePolygon]) -> TimeZoneIndex:
        return cls(zones=tuple(zones))


def load_timezone_index(path: str | Path) -> TimeZoneIndex:
    """Load timezone boundaries from a GeoJSON file.

    Args:
        path: Path to a timezone-boundary-builder GeoJSON file

    Returns:
        The loaded index

    Raises:
        TimeZoneDataError: If the file is missing or not valid GeoJSON
    """
    p = Path(path)
    logger.info(f"Loading timezone boundaries from {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TimeZoneDataError(f"Cannot read timezone data: {e}", source=str(p)) from e
    except json.JSONDecodeError as e:
        raise TimeZoneDataError(f"Invalid timezone JSON: {e}", source=str(p)) from e

    if not isinstance(data, dict):
        raise TimeZoneDataError("Timezone data is not a GeoJSON object", source=str(p))

    index = TimeZoneIndex.from_geojson(data)
    logger.info(f"Loaded {len(index)} timezones")
    return index


class TimeZoneResolver:
    """Resolve coordinates to IANA timezone identifiers.

    Example:
        ```python
        resolver = TimeZoneResolver(load_timezone_index("timezones.geojson"))
        resolver.resolve(Coordinates(latitude=35.68, longitude=139.69))
        # 'Asia/Tokyo'
        ```
    """

    def __init__(self, index: TimeZoneIndex):
        """Initialize the resolver.

        Args:
            index: Preloaded boundaries, shared read-only
        """
        self.index = index

    def resolve(self, point: Coordinates) -> str | None:
        """Return the zone containing the point, None when no polygon matches.

        None means "use UTC" to callers; it is not an error.
        """
        for zone in self.index.zones:
            if zone.contains(point):
                return zone.zone_id
        return None
