"""Location change monitor module."""

from .service import LocationCheckResult, LocationMonitor, ResetCallback

__all__ = [
    "LocationCheckResult",
    "LocationMonitor",
    "ResetCallback",
]
