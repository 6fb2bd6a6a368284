"""Core data models for Restaurant Roulette.

Pydantic models for coordinates, restaurants returned by the places provider,
and the cached record that ties a restaurant collection to the location it
was fetched at.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    Instances are immutable so they can be shared between the cache and
    the monitor without copying.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class Restaurant(BaseModel):
    """A nearby restaurant as returned by the places provider.

    Only ``name`` is required. Provider-specific fields (place_id, geometry,
    opening_hours, photos...) are kept as extra attributes and round-trip
    through the cache untouched.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Display name of the restaurant")
    vicinity: Optional[str] = Field(None, description="Short address")
    rating: Optional[float] = Field(None, ge=0, le=5, description="Average user rating")

    @property
    def dedup_key(self) -> str:
        """Identity used for deduplication: the lower-cased name."""
        return self.name.lower()


class CacheRecord(BaseModel):
    """Restaurants together with the location they were fetched at."""

    restaurants: list[Restaurant] = Field(default_factory=list)
    location: Optional[Coordinates] = None

    @property
    def is_empty(self) -> bool:
        return not self.restaurants
