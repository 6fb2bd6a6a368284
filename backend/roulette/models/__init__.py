"""Restaurant Roulette models."""

from .core import CacheRecord, Coordinates, Restaurant
from .errors import (
    AppError,
    ErrorCode,
    LocationUnavailableError,
    NoResultsFoundError,
    RouletteError,
    SearchFailedError,
)

__all__ = [
    "CacheRecord",
    "Coordinates",
    "Restaurant",
    "AppError",
    "ErrorCode",
    "LocationUnavailableError",
    "NoResultsFoundError",
    "RouletteError",
    "SearchFailedError",
]
