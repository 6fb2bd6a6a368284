"""Location monitor.

Periodically compares the user's current position with the cached one. A move
beyond the threshold clears the cache and fires the reset callbacks; either
way the new position becomes the cached location.

Failures to read the position are logged and leave cached state alone. They
are never shown to the user.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from roulette.config import LOCATION_CHECK_INTERVAL_MS, SIGNIFICANT_DISTANCE_THRESHOLD
from roulette.models import Coordinates, LocationUnavailableError
from roulette.services.location import LocationProvider
from roulette.services.session import RestaurantCache
from roulette.utils.geo import distance_between

logger = logging.getLogger(__name__)

ResetCallback = Callable[[], Awaitable[None]]


@dataclass
class LocationCheckResult:
    """Outcome of a single location check."""
    location: Optional[Coordinates] = None
    distance_m: Optional[float] = None
    reset: bool = False
    error: Optional[str] = None


class LocationMonitor:
    """Invalidates the restaurant cache when the user moves far enough."""

    def __init__(
        self,
        cache: RestaurantCache,
        location_provider: LocationProvider,
        threshold_m: float = SIGNIFICANT_DISTANCE_THRESHOLD,
        interval_seconds: float = LOCATION_CHECK_INTERVAL_MS / 1000,
    ) -> None:
        self._cache = cache
        self._location_provider = location_provider
        self._threshold_m = threshold_m
        self._interval = interval_seconds
        self._reset_callbacks: list[ResetCallback] = []
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_reset(self, callback: ResetCallback) -> None:
        self._reset_callbacks.append(callback)

    async def check_for_significant_change(self) -> LocationCheckResult:
        try:
            current = await self._location_provider.get_current_location()
        except LocationUnavailableError as e:
            logger.info(f"[MONITOR] {e.user_message} ({e.message})")
            return LocationCheckResult(error=e.message)

        result = LocationCheckResult(location=current)
        previous = self._cache.location
        if previous is not None:
            result.distance_m = distance_between(current, previous)
            if result.distance_m > self._threshold_m:
                logger.info(
                    f"[MONITOR] Moved {result.distance_m:.0f}m "
                    f"(threshold {self._threshold_m:.0f}m), resetting"
                )
                await self._cache.clear()
                await self._signal_reset()
                result.reset = True

        await self._cache.update_location(current)
        return result

    async def _signal_reset(self) -> None:
        for callback in self._reset_callbacks:
            try:
                await callback()
            except Exception:
                logger.exception("[MONITOR] Reset callback failed")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.check_for_significant_change()
            except Exception:
                logger.exception("[MONITOR] Location check failed")

    def start(self) -> None:
        """Schedule the recurring check. The first run happens after one interval."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"[MONITOR] Checking location every {self._interval:.0f}s")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
