"""API routes for Restaurant Roulette.

The browser owns geolocation and rendering; this API owns the cache policy.

- POST /location: client reports a geolocation fix (or a denial)
- POST /location/check: run one significant-change check now
- POST /pick: one pick cycle, returns a restaurant or an error
- GET /state: readiness, cache size and the reset generation
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, model_validator

from roulette.models import AppError, Coordinates, Restaurant
from roulette.services.location import ReportedLocationProvider
from roulette.services.roulette import RouletteService

logger = logging.getLogger(__name__)

router = APIRouter()

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="


def get_roulette_service(request: Request) -> RouletteService:
    return request.app.state.roulette


def maps_url_for(restaurant: Restaurant) -> Optional[str]:
    """Google Maps search link for the restaurant's address."""
    if not restaurant.vicinity:
        return None
    return MAPS_SEARCH_URL + quote(restaurant.vicinity, safe="")


class ReportLocationRequest(BaseModel):
    """Geolocation result from the client.

    Either coordinates, or ``denied``/``unsupported`` when the browser could
    not produce a position.
    """
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    denied: bool = False
    unsupported: bool = False

    @model_validator(mode="after")
    def _check_position(self) -> "ReportLocationRequest":
        if self.denied or self.unsupported:
            return self
        if self.lat is None or self.lng is None:
            raise ValueError("lat and lng are required unless denied or unsupported is set")
        return self


class ReportLocationResponse(BaseModel):
    success: bool
    location: Optional[Coordinates] = None


class LocationCheckResponse(BaseModel):
    """Result of a significant-change check."""
    success: bool
    location: Optional[Coordinates] = None
    distance_m: Optional[float] = None
    reset: bool = False
    generation: int


class PickResponse(BaseModel):
    """Response model for a pick cycle."""
    success: bool
    restaurant: Optional[Restaurant] = None
    maps_url: Optional[str] = None
    from_cache: bool = False
    error: Optional[AppError] = None


class StateResponse(BaseModel):
    ready: bool
    cached_count: int
    location: Optional[Coordinates] = None
    generation: int = Field(..., description="Changes whenever cached state was reset")


@router.post("/location", response_model=ReportLocationResponse)
async def report_location(
    request: ReportLocationRequest,
    service: RouletteService = Depends(get_roulette_service),
) -> ReportLocationResponse:
    provider = service.location_provider
    if not isinstance(provider, ReportedLocationProvider):
        return ReportLocationResponse(success=False)

    if request.denied:
        provider.report_denied()
        return ReportLocationResponse(success=True)
    if request.unsupported:
        provider.report_unsupported()
        return ReportLocationResponse(success=True)

    location = Coordinates(lat=request.lat, lng=request.lng)
    provider.report(location)
    return ReportLocationResponse(success=True, location=location)


@router.post("/location/check", response_model=LocationCheckResponse)
async def check_location(
    service: RouletteService = Depends(get_roulette_service),
) -> LocationCheckResponse:
    result = await service.monitor.check_for_significant_change()
    return LocationCheckResponse(
        success=result.error is None,
        location=result.location,
        distance_m=result.distance_m,
        reset=result.reset,
        generation=service.cache.generation,
    )


@router.post("/pick", response_model=PickResponse)
async def pick(service: RouletteService = Depends(get_roulette_service)) -> PickResponse:
    """Pick a random open restaurant nearby.

    Served from the cache when possible; otherwise runs a fetch cycle first.
    """
    outcome = await service.on_user_requests_pick()
    if outcome.restaurant is None:
        return PickResponse(success=False, error=outcome.error)
    return PickResponse(
        success=True,
        restaurant=outcome.restaurant,
        maps_url=maps_url_for(outcome.restaurant),
        from_cache=outcome.from_cache,
    )


@router.get("/state", response_model=StateResponse)
async def get_state(service: RouletteService = Depends(get_roulette_service)) -> StateResponse:
    return StateResponse(
        ready=service.ready,
        cached_count=len(service.cache.restaurants),
        location=service.cache.location,
        generation=service.cache.generation,
    )
