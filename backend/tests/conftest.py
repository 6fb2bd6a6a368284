import pytest

from roulette.services.cache import InMemoryCacheService
from roulette.services.session import RestaurantCache


@pytest.fixture
def store() -> InMemoryCacheService:
    return InMemoryCacheService()


@pytest.fixture
def cache(store: InMemoryCacheService) -> RestaurantCache:
    return RestaurantCache(store)
