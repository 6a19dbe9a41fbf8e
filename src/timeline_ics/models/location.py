"""Coordinate models shared by the timeline, timezone and calendar layers."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field


# Location history stores degrees as integers scaled by 10^7 ("E7")
E7_SCALE = 10_000_000

GOOGLE_MAPS_COORDINATE_URL = "https://maps.google.com?q={latitude},{longitude}"


class Coordinates(BaseModel):
    """A WGS84 point in decimal degrees.

    Built from the export's E7 integers; also the representative point used
    for timezone lookup and the geo part of structured locations.

    Values outside -90..90 / -180..180 are kept as-is. Exports occasionally
    contain them and they only mean that no timezone polygon will match.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    @classmethod
    def from_e7(cls, latitude_e7: int, longitude_e7: int) -> Self:
        """Create coordinates from E7 fixed-point integers.

        Examples:
            (263383300, 1278000000) -> 26.33833,127.8
        """
        return cls(
            latitude=latitude_e7 / E7_SCALE,
            longitude=longitude_e7 / E7_SCALE,
        )

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def maps_url(self) -> str:
        """Google Maps URL pointing at these coordinates."""
        return GOOGLE_MAPS_COORDINATE_URL.format(
            latitude=self.latitude, longitude=self.longitude
        )
