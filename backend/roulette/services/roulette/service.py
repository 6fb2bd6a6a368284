"""Roulette session facade.

Wires the cache, monitor, fetcher and picker together and exposes the entry
points the API calls:

- ``on_startup``: clear the cache, check the location once, start the monitor
- ``on_user_requests_pick``: one pick cycle, producing exactly one restaurant
  or one error
- ``shutdown``: stop the monitor and release clients

``ready`` mirrors the pick button: False while a cycle is running, restored
after success and after every error.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional

from roulette.config import Settings
from roulette.models import AppError, ErrorCode, Restaurant, RouletteError
from roulette.services.cache import CacheService, create_cache_service
from roulette.services.fetcher import RestaurantFetcher
from roulette.services.location import LocationProvider, ReportedLocationProvider
from roulette.services.monitor import LocationMonitor, ResetCallback
from roulette.services.picker import Picker
from roulette.services.places import GooglePlacesSearchService, NearbySearchService
from roulette.services.session import RestaurantCache

logger = logging.getLogger(__name__)


@dataclass
class PickOutcome:
    """Result of one pick cycle: a restaurant or an error, never both."""
    restaurant: Optional[Restaurant] = None
    error: Optional[AppError] = None
    from_cache: bool = False

    @property
    def success(self) -> bool:
        return self.restaurant is not None


class RouletteService:
    """Single session object owning all restaurant roulette state."""

    def __init__(
        self,
        store: CacheService,
        location_provider: LocationProvider,
        search_service: NearbySearchService,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        settings = settings or Settings()
        rng = rng or random.Random()
        self._store = store
        self._search = search_service
        self._pick_delay = settings.pick_delay_seconds
        self._ready = True

        self.location_provider = location_provider
        self.cache = RestaurantCache(store)
        self.fetcher = RestaurantFetcher(
            self.cache,
            location_provider,
            search_service,
            rng=rng,
            max_results=settings.max_results,
            radius_m=settings.search_radius_m,
            category=settings.search_category,
        )
        self.picker = Picker(self.cache, self.fetcher, rng=rng)
        self.monitor = LocationMonitor(
            self.cache,
            location_provider,
            threshold_m=settings.significant_distance_m,
            interval_seconds=settings.location_check_interval_seconds,
        )

    @property
    def ready(self) -> bool:
        return self._ready

    def on_reset(self, callback: ResetCallback) -> None:
        self.monitor.on_reset(callback)

    async def on_startup(self) -> None:
        previous = await self.cache.load()
        if not previous.is_empty:
            logger.info(f"[CACHE] Discarding {len(previous.restaurants)} restaurants from last run")
        await self.cache.clear()
        await self.monitor.check_for_significant_change()
        self.monitor.start()

    async def on_user_requests_pick(self) -> PickOutcome:
        self._ready = False
        try:
            if not self.cache.is_empty:
                await asyncio.sleep(self._pick_delay)
            # the monitor may have cleared the cache during the delay
            restaurant = self.picker.pick_cached()
            from_cache = restaurant is not None
            if restaurant is None:
                restaurant = await self.fetcher.fetch_nearby()
            logger.info(f"[PICK] {restaurant.name} ({'cache' if from_cache else 'fresh'})")
            return PickOutcome(restaurant=restaurant, from_cache=from_cache)
        except RouletteError as e:
            logger.info(f"[PICK] {e.code.value}: {e.message}")
            return PickOutcome(error=e.to_app_error())
        except Exception as e:
            logger.exception("[PICK] Unhandled error")
            return PickOutcome(
                error=AppError(
                    code=ErrorCode.API_ERROR,
                    message=str(e),
                    user_message="Something went wrong. Please try again.",
                )
            )
        finally:
            self._ready = True

    async def shutdown(self) -> None:
        await self.monitor.stop()
        await self._search.close()
        await self._store.close()


def create_roulette_service(settings: Settings) -> RouletteService:
    """Build the service from settings: Google Places search, client-reported location."""
    return RouletteService(
        store=create_cache_service(settings.redis_url),
        location_provider=ReportedLocationProvider(),
        search_service=GooglePlacesSearchService(
            api_key=settings.google_places_api_key,
            timeout=settings.places_timeout_seconds,
        ),
        settings=settings,
    )
