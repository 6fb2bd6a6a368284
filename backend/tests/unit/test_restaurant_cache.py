"""Unit tests for the restaurant cache session."""

import pytest

from roulette.models import Coordinates
from roulette.services.cache import InMemoryCacheService
from roulette.services.session import (
    LOCATION_KEY,
    RESTAURANTS_KEY,
    RestaurantCache,
    load_location,
    load_restaurants,
)

from tests.unit.fakes import HOME, NEARBY, make_restaurant


class TestDeserialization:
    """Absent or malformed records load as empty state."""

    def test_restaurants_none(self) -> None:
        assert load_restaurants(None) == []

    def test_restaurants_not_a_list(self) -> None:
        assert load_restaurants("garbage") == []
        assert load_restaurants({"name": "A"}) == []

    def test_restaurants_missing_name(self) -> None:
        assert load_restaurants([{"vicinity": "1 Main St"}]) == []

    def test_restaurants_valid(self) -> None:
        result = load_restaurants([{"name": "A", "rating": 4.5, "place_id": "abc"}])
        assert result[0].name == "A"
        assert result[0].place_id == "abc"

    def test_location_none(self) -> None:
        assert load_location(None) is None

    def test_location_malformed(self) -> None:
        assert load_location({"lat": "north"}) is None
        assert load_location([1, 2]) is None
        assert load_location({"lat": 100.0, "lng": 0.0}) is None

    def test_location_valid(self) -> None:
        assert load_location({"lat": 1.0, "lng": 2.0}) == Coordinates(lat=1.0, lng=2.0)


class TestRestaurantCache:
    """Tests for RestaurantCache persistence and mirrors."""

    def test_starts_empty(self, cache: RestaurantCache) -> None:
        assert cache.is_empty
        assert cache.location is None
        assert cache.generation == 0

    @pytest.mark.asyncio
    async def test_save_writes_both_records(
        self, cache: RestaurantCache, store: InMemoryCacheService
    ) -> None:
        restaurants = [make_restaurant("A"), make_restaurant("B")]
        await cache.save(restaurants, HOME)

        assert [r.name for r in cache.restaurants] == ["A", "B"]
        assert cache.location == HOME
        assert await store.get(LOCATION_KEY) == {"lat": HOME.lat, "lng": HOME.lng}
        assert [r["name"] for r in await store.get(RESTAURANTS_KEY)] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_round_trip_through_store(self, store: InMemoryCacheService) -> None:
        restaurants = [make_restaurant("A", place_id="p1", types=["restaurant", "food"])]
        await RestaurantCache(store).save(restaurants, HOME)

        reloaded = RestaurantCache(store)
        record = await reloaded.load()
        assert record.location == HOME
        assert record.restaurants == restaurants
        assert reloaded.restaurants[0].types == ["restaurant", "food"]

    @pytest.mark.asyncio
    async def test_load_malformed_is_empty(self, store: InMemoryCacheService) -> None:
        await store.set(RESTAURANTS_KEY, "not json list")
        await store.set(LOCATION_KEY, {"lat": "bad"})
        record = await RestaurantCache(store).load()
        assert record.is_empty
        assert record.location is None

    @pytest.mark.asyncio
    async def test_restaurants_without_location_is_miss(self, store: InMemoryCacheService) -> None:
        await store.set(RESTAURANTS_KEY, [{"name": "A"}])
        record = await RestaurantCache(store).load()
        assert record.is_empty

    @pytest.mark.asyncio
    async def test_location_without_restaurants(self, store: InMemoryCacheService) -> None:
        await store.set(LOCATION_KEY, {"lat": 1.0, "lng": 2.0})
        record = await RestaurantCache(store).load()
        assert record.is_empty
        assert record.location == Coordinates(lat=1.0, lng=2.0)

    @pytest.mark.asyncio
    async def test_update_location_keeps_restaurants(self, cache: RestaurantCache) -> None:
        await cache.save([make_restaurant("A")], HOME)
        await cache.update_location(NEARBY)
        assert cache.location == NEARBY
        assert len(cache.restaurants) == 1

    @pytest.mark.asyncio
    async def test_clear(self, cache: RestaurantCache, store: InMemoryCacheService) -> None:
        await cache.save([make_restaurant("A")], HOME)
        await cache.clear()

        assert cache.is_empty
        assert cache.location is None
        assert cache.generation == 1
        assert await store.get(RESTAURANTS_KEY) is None
        assert await store.get(LOCATION_KEY) is None

    @pytest.mark.asyncio
    async def test_restaurants_property_is_a_copy(self, cache: RestaurantCache) -> None:
        await cache.save([make_restaurant("A")], HOME)
        cache.restaurants.append(make_restaurant("B"))
        assert len(cache.restaurants) == 1
