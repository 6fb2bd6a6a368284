"""Nearby search service for open restaurants.

Wraps the Google Places Nearby Search web endpoint as an async iterator of
result pages. Pages are fetched lazily: the next page is only requested when
the consumer asks for it, so a caller that stops iterating (for example after
reaching its result cap) never triggers another request.

Architecture:
- Shared httpx client (created on first use, closed by ``close()``)
- ``next_page_token`` pagination with a warm-up delay; Google rejects a
  fresh token with INVALID_REQUEST for a couple of seconds
- Transport errors and error statuses raise ``SearchFailedError``
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError

from roulette.models import Coordinates, Restaurant, SearchFailedError

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"
STATUS_INVALID_REQUEST = "INVALID_REQUEST"


@dataclass
class SearchPage:
    """One page of nearby search results."""
    status: str
    results: list[Restaurant] = field(default_factory=list)
    has_next_page: bool = False

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


class NearbySearchService(ABC):
    """Abstract base class for nearby search providers."""

    @abstractmethod
    def search(
        self,
        center: Coordinates,
        radius_m: float,
        category: str,
        open_now: bool = True,
    ) -> AsyncIterator[SearchPage]:
        """Iterate over result pages for places around ``center``."""
        pass

    async def close(self) -> None:
        pass


def parse_results(raw_results: list[dict[str, Any]]) -> list[Restaurant]:
    """Convert raw provider results to ``Restaurant`` models, skipping unusable ones."""
    restaurants: list[Restaurant] = []
    for raw in raw_results:
        try:
            restaurants.append(Restaurant.model_validate(raw))
        except ValidationError:
            logger.info(f"[PLACES] Skipping malformed result: {raw.get('name')!r}")
    return restaurants


class GooglePlacesSearchService(NearbySearchService):
    """Google Places Nearby Search implementation."""

    NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"

    def __init__(
        self,
        api_key: str | None,
        timeout: float = 10.0,
        page_token_delay: float = 2.0,
        page_token_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._page_token_delay = page_token_delay
        self._page_token_retries = page_token_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._get_client().get(self.NEARBY_SEARCH_URL, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning(f"[PLACES] Request failed: {e}")
            raise SearchFailedError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise SearchFailedError("Invalid response from places provider") from e

    async def _request_next_page(self, token: str) -> dict[str, Any]:
        params = {"pagetoken": token, "key": self._api_key}
        for attempt in range(self._page_token_retries + 1):
            await asyncio.sleep(self._page_token_delay)
            data = await self._request(params)
            if data.get("status") != STATUS_INVALID_REQUEST:
                return data
            logger.info(f"[PLACES] Page token not ready (attempt {attempt + 1})")
        return data

    async def search(
        self,
        center: Coordinates,
        radius_m: float,
        category: str,
        open_now: bool = True,
    ) -> AsyncIterator[SearchPage]:
        if not self._api_key:
            raise SearchFailedError("GOOGLE_PLACES_API_KEY is missing", status="CONFIG_ERROR")

        params: dict[str, Any] = {
            "location": f"{center.lat},{center.lng}",
            "radius": radius_m,
            "type": category,
            "key": self._api_key,
        }
        if open_now:
            params["opennow"] = "true"

        logger.info(
            f"[PLACES] Nearby search at ({center.lat:.4f}, {center.lng:.4f}), "
            f"radius={radius_m}m, type={category}"
        )
        data = await self._request(params)
        page_number = 1

        while True:
            status = data.get("status", "UNKNOWN")
            if status not in (STATUS_OK, STATUS_ZERO_RESULTS):
                logger.info(
                    f"[PLACES] Page {page_number} status={status}: {data.get('error_message', '')}"
                )
            token = data.get("next_page_token") if status == STATUS_OK else None
            page = SearchPage(
                status=status,
                results=parse_results(data.get("results") or []),
                has_next_page=bool(token),
            )
            yield page

            if not token:
                return
            data = await self._request_next_page(token)
            page_number += 1
