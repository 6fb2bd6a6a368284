"""Random restaurant picker."""

import logging
import random

from roulette.models import Restaurant
from roulette.services.fetcher import RestaurantFetcher, choose
from roulette.services.session import RestaurantCache

logger = logging.getLogger(__name__)


class Picker:
    """Serves a random restaurant from the cache, fetching when it is empty."""

    def __init__(
        self,
        cache: RestaurantCache,
        fetcher: RestaurantFetcher,
        rng: random.Random | None = None,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._rng = rng or random.Random()

    def pick_cached(self) -> Restaurant | None:
        """Random cached restaurant, or None when the cache is empty."""
        restaurants = self._cache.restaurants
        if not restaurants:
            return None
        return choose(restaurants, self._rng)

    async def pick_random(self) -> Restaurant:
        restaurant = self.pick_cached()
        if restaurant is not None:
            return restaurant
        logger.info("[PICK] No cached restaurants available, fetching")
        return await self._fetcher.fetch_nearby()
