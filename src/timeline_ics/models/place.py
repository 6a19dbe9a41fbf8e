"""Place details returned by the place lookup collaborator."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from timeline_ics.models.location import Coordinates


GOOGLE_MAPS_PLACE_ID_URL = "https://www.google.com/maps/place/?q=place_id:{place_id}"

DEFAULT_PLACE_EMOJI = "📍"

# Place type (Places API "types") -> summary marker. Keys are lowercase.
PLACE_TYPE_EMOJI: dict[str, str] = {
    "airport": "✈️",
    "amusement_park": "🎢",
    "aquarium": "🐠",
    "art_gallery": "🖼",
    "atm": "🏧",
    "bakery": "🥐",
    "bank": "🏦",
    "bar": "🍸",
    "beauty_salon": "💇",
    "bicycle_store": "🚲",
    "book_store": "📚",
    "bowling_alley": "🎳",
    "bus_station": "🚏",
    "cafe": "☕",
    "campground": "🏕",
    "car_rental": "🚙",
    "car_repair": "🔧",
    "car_wash": "🚿",
    "casino": "🎰",
    "cemetery": "🪦",
    "church": "⛪",
    "city_hall": "🏛",
    "clothing_store": "👕",
    "convenience_store": "🏪",
    "courthouse": "⚖️",
    "dentist": "🦷",
    "department_store": "🏬",
    "doctor": "🩺",
    "electronics_store": "🔌",
    "embassy": "🏳",
    "fire_station": "🚒",
    "florist": "💐",
    "gas_station": "⛽",
    "gym": "🏋",
    "hair_care": "💇",
    "hindu_temple": "🛕",
    "hospital": "🏥",
    "library": "📚",
    "light_rail_station": "🚈",
    "liquor_store": "🍷",
    "lodging": "🏨",
    "meal_takeaway": "🥡",
    "mosque": "🕌",
    "movie_theater": "🎬",
    "museum": "🏛",
    "natural_feature": "🏞",
    "night_club": "🪩",
    "park": "🏞",
    "parking": "🅿️",
    "pet_store": "🐾",
    "pharmacy": "💊",
    "police": "👮",
    "post_office": "🏤",
    "restaurant": "🍽",
    "school": "🏫",
    "shoe_store": "👟",
    "shopping_mall": "🛍",
    "spa": "💆",
    "stadium": "🏟",
    "subway_station": "🚇",
    "supermarket": "🛒",
    "synagogue": "🕍",
    "taxi_stand": "🚕",
    "tourist_attraction": "📸",
    "train_station": "🚉",
    "transit_station": "🚉",
    "university": "🎓",
    "veterinary_care": "🐕",
    "zoo": "🦁",
}


def place_type_emoji(types: Iterable[str]) -> str:
    """Marker for the first recognized place type, the pin otherwise."""
    for place_type in types:
        emoji = PLACE_TYPE_EMOJI.get(place_type.lower())
        if emoji is not None:
            return emoji
    return DEFAULT_PLACE_EMOJI


def place_id_url(place_id: str) -> str:
    """Google Maps URL for a place id."""
    return GOOGLE_MAPS_PLACE_ID_URL.format(place_id=place_id)


class PlaceDetails(BaseModel):
    """Richer data about a place, used as a read-only overlay."""

    model_config = ConfigDict(frozen=True)

    place_id: str
    name: str = ""
    formatted_address: str = ""
    geo: Coordinates | None = None
    types: tuple[str, ...] = Field(default_factory=tuple)
    url: str | None = None

    @property
    def emoji(self) -> str:
        return place_type_emoji(self.types)


class Enrichment(BaseModel):
    """Overlay attached to one normalized record.

    ``place`` serves visits. Activity segments use the four endpoint
    slots instead; any slot may be missing when its lookup failed.
    """

    model_config = ConfigDict(frozen=True)

    place: PlaceDetails | None = None
    start: PlaceDetails | None = None
    end: PlaceDetails | None = None
    first_segment: PlaceDetails | None = None
    last_segment: PlaceDetails | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            details is None
            for details in (
                self.place,
                self.start,
                self.end,
                self.first_segment,
                self.last_segment,
            )
        )
