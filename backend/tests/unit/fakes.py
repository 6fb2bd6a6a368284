"""Test doubles for the location and search collaborators."""

from roulette.models import Coordinates, LocationUnavailableError, Restaurant
from roulette.services.location import LocationProvider
from roulette.services.places import NearbySearchService, SearchPage

HOME = Coordinates(lat=40.7128, lng=-74.0060)
# ~5.6 km north of HOME
NEARBY = Coordinates(lat=40.7628, lng=-74.0060)
# ~11 km north of HOME
FAR_AWAY = Coordinates(lat=40.8128, lng=-74.0060)


def make_restaurant(name: str, **extra) -> Restaurant:
    return Restaurant(name=name, vicinity=f"{len(name)} Main St", rating=4.2, **extra)


def make_page(names: list[str], has_next_page: bool = False, status: str = "OK") -> SearchPage:
    return SearchPage(
        status=status,
        results=[make_restaurant(name) for name in names],
        has_next_page=has_next_page,
    )


def numbered_pages(count: int, per_page: int = 20) -> list[SearchPage]:
    """``count`` pages of unique restaurants, each announcing a next page."""
    return [
        make_page(
            [f"Restaurant {p * per_page + i}" for i in range(per_page)],
            has_next_page=True,
        )
        for p in range(count)
    ]


class FakeLocationProvider(LocationProvider):
    def __init__(self, location: Coordinates | None = HOME, denied: bool = False) -> None:
        self.location = location
        self.denied = denied
        self.calls = 0

    async def get_current_location(self) -> Coordinates:
        self.calls += 1
        if self.denied:
            raise LocationUnavailableError("denied", denied=True)
        if self.location is None:
            raise LocationUnavailableError("unavailable")
        return self.location


class FakeSearchService(NearbySearchService):
    """Yields canned pages and records how many were pulled."""

    def __init__(
        self,
        pages: list[SearchPage] | None = None,
        error: Exception | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.pages = pages or []
        self.error = error
        self.fail_after = fail_after
        self.calls: list[tuple] = []
        self.pages_requested = 0
        self.closed = False

    async def search(self, center, radius_m, category, open_now=True):
        self.calls.append((center, radius_m, category, open_now))
        if self.error is not None and self.fail_after is None:
            raise self.error
        for page in self.pages:
            if self.fail_after is not None and self.pages_requested >= self.fail_after:
                raise self.error or RuntimeError("page failed")
            self.pages_requested += 1
            yield page

    async def close(self) -> None:
        self.closed = True
