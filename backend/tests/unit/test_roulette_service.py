"""Unit tests for the roulette session facade, including the end-to-end pick flow."""

import asyncio
import random

import pytest

from roulette.config import Settings
from roulette.models import ErrorCode
from roulette.services.cache import InMemoryCacheService
from roulette.services.roulette import RouletteService, create_roulette_service
from roulette.services.session import LOCATION_KEY, RESTAURANTS_KEY

from tests.unit.fakes import (
    FAR_AWAY,
    HOME,
    FakeLocationProvider,
    FakeSearchService,
    make_page,
    make_restaurant,
)


def _service(
    store: InMemoryCacheService,
    provider: FakeLocationProvider,
    search: FakeSearchService,
    pick_delay: float = 0,
) -> RouletteService:
    return RouletteService(
        store=store,
        location_provider=provider,
        search_service=search,
        settings=Settings(pick_delay_seconds=pick_delay, location_check_interval_ms=3_600_000),
        rng=random.Random(3),
    )


class RecordingStore(InMemoryCacheService):
    def __init__(self) -> None:
        super().__init__()
        self.reads: list[str] = []

    async def get(self, key: str):
        self.reads.append(key)
        return await super().get(key)


class TestOnStartup:
    @pytest.mark.asyncio
    async def test_clears_persisted_state_and_checks_location(
        self, store: InMemoryCacheService
    ) -> None:
        await store.set(RESTAURANTS_KEY, [{"name": "Stale"}])
        await store.set(LOCATION_KEY, {"lat": 0.0, "lng": 0.0})
        provider = FakeLocationProvider(HOME)
        service = _service(store, provider, FakeSearchService())

        await service.on_startup()
        try:
            assert service.cache.is_empty
            assert service.cache.location == HOME
            assert await store.get(RESTAURANTS_KEY) is None
            assert provider.calls == 1
            assert service.monitor.is_running
        finally:
            await service.shutdown()

        assert not service.monitor.is_running

    @pytest.mark.asyncio
    async def test_reads_persisted_records_before_clearing(self) -> None:
        store = RecordingStore()
        await store.set_many(
            {RESTAURANTS_KEY: [{"name": "Stale"}], LOCATION_KEY: {"lat": 0.0, "lng": 0.0}}
        )
        service = _service(store, FakeLocationProvider(HOME), FakeSearchService())

        await service.on_startup()
        try:
            assert RESTAURANTS_KEY in store.reads
            assert LOCATION_KEY in store.reads
            assert service.cache.is_empty
            assert await store.get(RESTAURANTS_KEY) is None
        finally:
            await service.shutdown()

    @pytest.mark.asyncio
    async def test_startup_tolerates_malformed_records(self, store: InMemoryCacheService) -> None:
        await store.set(RESTAURANTS_KEY, "corrupted")
        await store.set(LOCATION_KEY, {"lat": "north"})
        service = _service(store, FakeLocationProvider(HOME), FakeSearchService())

        await service.on_startup()
        try:
            assert service.cache.is_empty
            assert service.cache.location == HOME
        finally:
            await service.shutdown()

    @pytest.mark.asyncio
    async def test_startup_survives_missing_location(self, store: InMemoryCacheService) -> None:
        service = _service(store, FakeLocationProvider(None), FakeSearchService())
        await service.on_startup()
        try:
            assert service.cache.location is None
        finally:
            await service.shutdown()


class TestOnUserRequestsPick:
    """Tests for RouletteService.on_user_requests_pick."""

    @pytest.mark.asyncio
    async def test_end_to_end_dedup_and_pick(self, store: InMemoryCacheService) -> None:
        search = FakeSearchService([make_page(["Pho House", "Burger Joint", "PHO HOUSE"])])
        service = _service(store, FakeLocationProvider(HOME), search)
        await service.on_startup()
        try:
            outcome = await service.on_user_requests_pick()
        finally:
            await service.shutdown()

        assert outcome.success
        assert outcome.error is None
        assert outcome.from_cache is False
        names = [r.name for r in service.cache.restaurants]
        assert names == ["Pho House", "Burger Joint"]
        assert outcome.restaurant.name in names
        assert service.ready is True

    @pytest.mark.asyncio
    async def test_second_pick_served_from_cache(self, store: InMemoryCacheService) -> None:
        search = FakeSearchService([make_page(["A", "B"])])
        service = _service(store, FakeLocationProvider(HOME), search)

        await service.on_user_requests_pick()
        outcome = await service.on_user_requests_pick()

        assert outcome.from_cache is True
        assert outcome.restaurant.name in {"A", "B"}
        assert len(search.calls) == 1

    @pytest.mark.asyncio
    async def test_cache_cleared_during_delay_fetches_fresh(
        self, store: InMemoryCacheService
    ) -> None:
        search = FakeSearchService([make_page(["Fresh"])])
        service = _service(store, FakeLocationProvider(HOME), search, pick_delay=0.1)
        await service.cache.save([make_restaurant("Old")], HOME)

        pick = asyncio.create_task(service.on_user_requests_pick())
        await asyncio.sleep(0.02)
        await service.cache.clear()
        outcome = await pick

        assert outcome.restaurant.name == "Fresh"
        assert outcome.from_cache is False
        assert len(search.calls) == 1

    @pytest.mark.asyncio
    async def test_location_error(self, store: InMemoryCacheService) -> None:
        service = _service(store, FakeLocationProvider(None), FakeSearchService())
        outcome = await service.on_user_requests_pick()

        assert outcome.restaurant is None
        assert outcome.error.code == ErrorCode.LOCATION_UNAVAILABLE
        assert outcome.error.user_message == "Failed to get your location."
        assert service.ready is True

    @pytest.mark.asyncio
    async def test_denied_location(self, store: InMemoryCacheService) -> None:
        service = _service(store, FakeLocationProvider(denied=True), FakeSearchService())
        outcome = await service.on_user_requests_pick()
        assert outcome.error.code == ErrorCode.LOCATION_DENIED

    @pytest.mark.asyncio
    async def test_no_results(self, store: InMemoryCacheService) -> None:
        search = FakeSearchService([make_page([], status="ZERO_RESULTS")])
        service = _service(store, FakeLocationProvider(HOME), search)
        outcome = await service.on_user_requests_pick()

        assert outcome.error.code == ErrorCode.NO_RESULTS_FOUND
        assert outcome.error.user_message == "No open restaurants found."
        assert service.cache.is_empty
        assert service.ready is True

    @pytest.mark.asyncio
    async def test_search_failure(self, store: InMemoryCacheService) -> None:
        search = FakeSearchService(error=RuntimeError("boom"))
        service = _service(store, FakeLocationProvider(HOME), search)
        outcome = await service.on_user_requests_pick()

        assert outcome.error.code == ErrorCode.SEARCH_FAILED
        assert outcome.error.user_message == "Failed to fetch restaurant. boom"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported(self, store: InMemoryCacheService) -> None:
        service = _service(store, FakeLocationProvider(HOME), FakeSearchService())

        async def broken_save(restaurants, location) -> None:
            raise OSError("disk full")

        service.cache.save = broken_save
        service._search.pages = [make_page(["A"])]
        outcome = await service.on_user_requests_pick()

        assert outcome.error.code == ErrorCode.API_ERROR
        assert service.ready is True

    @pytest.mark.asyncio
    async def test_significant_move_forces_refetch(self, store: InMemoryCacheService) -> None:
        provider = FakeLocationProvider(HOME)
        search = FakeSearchService([make_page(["A"])])
        service = _service(store, provider, search)

        await service.on_user_requests_pick()
        provider.location = FAR_AWAY
        check = await service.monitor.check_for_significant_change()
        assert check.reset is True
        assert service.cache.is_empty

        search.pages = [make_page(["Far Diner"])]
        outcome = await service.on_user_requests_pick()
        assert outcome.restaurant.name == "Far Diner"
        assert service.cache.location == FAR_AWAY
        assert len(search.calls) == 2

    @pytest.mark.asyncio
    async def test_reset_listener(self, store: InMemoryCacheService) -> None:
        provider = FakeLocationProvider(HOME)
        service = _service(store, provider, FakeSearchService())
        await service.cache.save([make_restaurant("A")], HOME)
        fired: list[bool] = []

        async def listener() -> None:
            fired.append(True)

        service.on_reset(listener)
        provider.location = FAR_AWAY
        await service.monitor.check_for_significant_change()
        assert fired == [True]


class TestCreateRouletteService:
    def test_defaults_to_in_memory_store(self) -> None:
        service = create_roulette_service(Settings(google_places_api_key="k"))
        assert isinstance(service._store, InMemoryCacheService)
        assert service.ready is True
