"""Restaurant Roulette services.

Service layer components:
- Cache: Redis or in-memory key/value store
- Session: restaurant collection and location mirrored over the store
- Location: client-reported geolocation
- Places: Google Places Nearby Search pagination
- Fetcher: one fetch cycle (search, cap, dedup, cache)
- Picker: uniform random pick from the cache
- Monitor: significant location change detection
- Roulette: facade wiring everything for the API
"""

from .cache import CacheService, InMemoryCacheService, RedisCacheService, create_cache_service
from .session import RestaurantCache
from .location import LocationProvider, ReportedLocationProvider
from .places import GooglePlacesSearchService, NearbySearchService, SearchPage
from .fetcher import RestaurantFetcher
from .picker import Picker
from .monitor import LocationCheckResult, LocationMonitor
from .roulette import PickOutcome, RouletteService, create_roulette_service

__all__ = [
    # Cache
    "CacheService",
    "InMemoryCacheService",
    "RedisCacheService",
    "create_cache_service",
    "RestaurantCache",
    # Collaborators
    "LocationProvider",
    "ReportedLocationProvider",
    "GooglePlacesSearchService",
    "NearbySearchService",
    "SearchPage",
    # Core
    "RestaurantFetcher",
    "Picker",
    "LocationCheckResult",
    "LocationMonitor",
    "PickOutcome",
    "RouletteService",
    "create_roulette_service",
]
