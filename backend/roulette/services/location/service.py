"""Location provider service.

The user's position comes from the browser's geolocation API, which only the
client can read. The client reports each fix (or a permission denial) to the
backend, and ``ReportedLocationProvider`` hands the latest one to the monitor
and fetcher.
"""

import logging
from abc import ABC, abstractmethod

from roulette.models import Coordinates, LocationUnavailableError

logger = logging.getLogger(__name__)


class LocationProvider(ABC):
    """Abstract base class for location providers."""

    @abstractmethod
    async def get_current_location(self) -> Coordinates:
        """Return the user's current position.

        Raises:
            LocationUnavailableError: No position is available or the user
                denied access.
        """
        pass


class ReportedLocationProvider(LocationProvider):
    """Serves the most recent position reported by the client."""

    def __init__(self) -> None:
        self._location: Coordinates | None = None
        self._denied = False
        self._unsupported = False

    @property
    def location(self) -> Coordinates | None:
        return self._location

    def report(self, location: Coordinates) -> None:
        self._location = location
        self._denied = False
        self._unsupported = False
        logger.info(f"[LOCATION] Reported ({location.lat:.4f}, {location.lng:.4f})")

    def report_denied(self) -> None:
        self._location = None
        self._denied = True
        logger.info("[LOCATION] Client reported permission denied")

    def report_unsupported(self) -> None:
        self._location = None
        self._unsupported = True
        logger.info("[LOCATION] Client has no geolocation support")

    async def get_current_location(self) -> Coordinates:
        if self._denied:
            raise LocationUnavailableError("Location permission denied", denied=True)
        if self._unsupported:
            raise LocationUnavailableError(
                "Geolocation unsupported",
                user_message="Geolocation is not supported by this browser.",
            )
        if self._location is None:
            raise LocationUnavailableError("No location reported by client")
        return self._location
