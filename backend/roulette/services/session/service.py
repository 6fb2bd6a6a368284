"""Restaurant cache session.

Holds the in-memory mirror of the last fetched restaurant collection and the
location it was fetched at, backed by a ``CacheService``. This object is the
single writer for both records: the fetcher saves through it, the monitor
updates the location and clears through it, and the picker reads from it.

Both records are stored as JSON under fixed keys. Missing or malformed data
loads as an empty collection / no location. A collection without a location
(or a location without a collection from a completed fetch) is inconsistent
and is treated as a cache miss.
"""

import logging
from typing import Sequence

from pydantic import TypeAdapter, ValidationError

from roulette.models import CacheRecord, Coordinates, Restaurant
from roulette.services.cache import CacheService

logger = logging.getLogger(__name__)

RESTAURANTS_KEY = "cachedRestaurants"
LOCATION_KEY = "cachedLocation"

_restaurants_adapter = TypeAdapter(list[Restaurant])


def dump_restaurants(restaurants: Sequence[Restaurant]) -> list[dict]:
    return [r.model_dump(mode="json") for r in restaurants]


def load_restaurants(raw: object) -> list[Restaurant]:
    """Parse a stored restaurant list; anything unusable becomes ``[]``."""
    if raw is None:
        return []
    try:
        return _restaurants_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(f"[CACHE] Discarding malformed restaurant record: {e.error_count()} errors")
        return []


def load_location(raw: object) -> Coordinates | None:
    """Parse a stored location; anything unusable becomes ``None``."""
    if raw is None:
        return None
    try:
        return Coordinates.model_validate(raw)
    except ValidationError:
        logger.warning("[CACHE] Discarding malformed location record")
        return None


class RestaurantCache:
    """Session state shared by the monitor, fetcher and picker."""

    def __init__(self, store: CacheService) -> None:
        self._store = store
        self._restaurants: list[Restaurant] = []
        self._location: Coordinates | None = None
        self._generation = 0

    @property
    def restaurants(self) -> list[Restaurant]:
        return list(self._restaurants)

    @property
    def location(self) -> Coordinates | None:
        return self._location

    @property
    def generation(self) -> int:
        """Incremented on every clear; clients watch it to reset their view."""
        return self._generation

    @property
    def is_empty(self) -> bool:
        return not self._restaurants

    def snapshot(self) -> CacheRecord:
        return CacheRecord(restaurants=self.restaurants, location=self._location)

    async def load(self) -> CacheRecord:
        """Populate the in-memory mirror from the store."""
        restaurants = load_restaurants(await self._store.get(RESTAURANTS_KEY))
        location = load_location(await self._store.get(LOCATION_KEY))

        if restaurants and location is None:
            logger.warning("[CACHE] Restaurants cached without a location, treating as miss")
            restaurants = []

        self._restaurants = restaurants
        self._location = location
        return self.snapshot()

    async def save(self, restaurants: Sequence[Restaurant], location: Coordinates) -> None:
        """Write restaurants and the location they were fetched at together."""
        await self._store.set_many(
            {
                RESTAURANTS_KEY: dump_restaurants(restaurants),
                LOCATION_KEY: location.model_dump(mode="json"),
            }
        )
        self._restaurants = list(restaurants)
        self._location = location
        logger.info(
            f"[CACHE] Cached {len(self._restaurants)} restaurants at "
            f"({location.lat:.4f}, {location.lng:.4f})"
        )

    async def update_location(self, location: Coordinates) -> None:
        await self._store.set(LOCATION_KEY, location.model_dump(mode="json"))
        self._location = location

    async def clear(self) -> None:
        await self._store.delete_many(RESTAURANTS_KEY, LOCATION_KEY)
        self._restaurants = []
        self._location = None
        self._generation += 1
        logger.info("[CACHE] Cached data cleared due to startup or significant location change.")
