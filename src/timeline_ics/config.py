"""Application configuration.

Configuration is loaded from environment variables (prefix ``TIMELINE_ICS_``)
and an optional ``.env`` file using pydantic-settings. Command-line options
override these values.

## Environment Variables

- TIMELINE_ICS_JSON_PATH: Directory with location history ``*.json`` files
- TIMELINE_ICS_ICAL_PATH: Directory for the generated ``*.ics`` files
- TIMELINE_ICS_TIMEZONE_BOUNDARIES_PATH: timezone-boundary-builder GeoJSON
- TIMELINE_ICS_EXPORT_PLACES: Export place visits (default: true)
- TIMELINE_ICS_EXPORT_ACTIVITY_SEGMENTS: Export activity segments (default: true)
- TIMELINE_ICS_ENABLE_PLACES_API_LOOKUP: Enrich places via Google Places (default: false)
- TIMELINE_ICS_PLACES_API_KEY: Google Places API key (required for lookups)
- TIMELINE_ICS_SHOW_MILES: Show distances in miles (default: false)
- TIMELINE_ICS_IGNORED_VISITED_PLACE_IDS: Comma separated place ids to skip
- TIMELINE_ICS_IGNORED_ACTIVITY_TYPES: Comma separated activity types to skip

## Example .env file

```
TIMELINE_ICS_JSON_PATH=./takeout/Semantic Location History/2022
TIMELINE_ICS_ICAL_PATH=./ical
TIMELINE_ICS_ENABLE_PLACES_API_LOOKUP=true
TIMELINE_ICS_PLACES_API_KEY=your-places-api-key
TIMELINE_ICS_IGNORED_VISITED_PLACE_IDS=ChIJhome,ChIJoffice
```
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal, Self

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMELINE_ICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Paths
    json_path: Path = Field(
        default=Path("./json"),
        description="Directory containing location history JSON files",
    )
    ical_path: Path = Field(
        default=Path("./ical"),
        description="Directory receiving the generated iCal files",
    )
    timezone_boundaries_path: Path = Field(
        default=Path("./data/timezones.geojson"),
        description="Timezone boundary GeoJSON (timezone-boundary-builder)",
    )

    # Export selection
    export_places: bool = True
    export_activity_segments: bool = True
    ignored_visited_place_ids: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Place ids whose visits are never exported",
    )
    ignored_activity_types: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Activity types (e.g. FLYING) whose segments are never exported",
    )

    # Presentation
    show_miles: bool = False

    # Google Places
    enable_places_api_lookup: bool = False
    places_api_key: str | None = None
    places_language: str = "en"
    places_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    places_max_concurrency: int = Field(default=8, ge=1, le=64)

    @field_validator("ignored_visited_place_ids", "ignored_activity_types", mode="before")
    @classmethod
    def split_comma_separated(cls, v: str | list[str] | None) -> list[str]:
        """Accept comma separated strings as well as lists."""
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("ignored_activity_types")
    @classmethod
    def normalize_activity_types(cls, v: list[str]) -> list[str]:
        return [item.upper() for item in v]

    @model_validator(mode="after")
    def validate_places_lookup(self) -> Self:
        """Place lookups need an API key."""
        if self.enable_places_api_lookup and not self.places_api_key:
            raise ValueError(
                "enable_places_api_lookup requires places_api_key to be set"
            )
        return self

    @property
    def places_lookup_configured(self) -> bool:
        """Check if Google Places lookups can be made."""
        return bool(self.enable_places_api_lookup and self.places_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
