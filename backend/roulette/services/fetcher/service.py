"""Restaurant fetcher: one full fetch cycle.

location -> paginated nearby search -> cap -> dedup -> atomic cache write -> pick

The cache is only written after every page has been gathered, so any failure
along the way leaves the previous cache contents untouched. Concurrent cycles
are not coordinated; the last one to finish wins.
"""

import logging
import random
from typing import Sequence

from roulette.config import MAX_RESULTS, SEARCH_CATEGORY, SEARCH_RADIUS_M
from roulette.models import (
    NoResultsFoundError,
    Restaurant,
    RouletteError,
    SearchFailedError,
)
from roulette.services.location import LocationProvider
from roulette.services.places import NearbySearchService
from roulette.services.session import RestaurantCache
from roulette.utils.dedup import unique_by_name

logger = logging.getLogger(__name__)


def choose(restaurants: Sequence[Restaurant], rng: random.Random) -> Restaurant:
    """Uniformly random element of a non-empty sequence."""
    if not restaurants:
        raise ValueError("cannot choose from an empty collection")
    return restaurants[rng.randrange(len(restaurants))]


class RestaurantFetcher:
    """Fetches nearby open restaurants and repopulates the cache."""

    def __init__(
        self,
        cache: RestaurantCache,
        location_provider: LocationProvider,
        search_service: NearbySearchService,
        rng: random.Random | None = None,
        max_results: int = MAX_RESULTS,
        radius_m: float = SEARCH_RADIUS_M,
        category: str = SEARCH_CATEGORY,
    ) -> None:
        self._cache = cache
        self._location_provider = location_provider
        self._search = search_service
        self._rng = rng or random.Random()
        self._max_results = max_results
        self._radius_m = radius_m
        self._category = category

    async def _collect(self, pages) -> list[Restaurant]:
        """Accumulate pages until the provider runs out or the cap is reached."""
        collected: list[Restaurant] = []
        page_number = 0
        async for page in pages:
            page_number += 1
            if not page.ok or not page.results:
                if page_number == 1:
                    raise NoResultsFoundError(f"First page returned status={page.status}")
                logger.info(f"[FETCH] Page {page_number} status={page.status}, stopping")
                break

            collected.extend(page.results)
            logger.info(f"[FETCH] Page {page_number}: {len(page.results)} results ({len(collected)} total)")
            if not page.has_next_page or len(collected) >= self._max_results:
                break

        if page_number == 0:
            raise NoResultsFoundError("Search returned no pages")
        return collected[: self._max_results]

    async def fetch_nearby(self) -> Restaurant:
        """Run one fetch cycle and return a random pick from the fresh results.

        Raises:
            LocationUnavailableError: The current position could not be read.
            NoResultsFoundError: The first page was empty or not OK.
            SearchFailedError: The provider failed.
        """
        location = await self._location_provider.get_current_location()

        pages = self._search.search(location, self._radius_m, self._category, open_now=True)
        try:
            collected = await self._collect(pages)
        except RouletteError:
            raise
        except Exception as e:
            logger.exception("[FETCH] Search failed")
            raise SearchFailedError(str(e) or type(e).__name__) from e
        finally:
            await pages.aclose()

        restaurants = unique_by_name(collected)
        logger.info(f"[FETCH] {len(collected)} results, {len(restaurants)} after dedup")

        await self._cache.save(restaurants, location)
        return choose(restaurants, self._rng)
