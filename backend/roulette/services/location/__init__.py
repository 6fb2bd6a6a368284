"""Location provider module."""

from .service import LocationProvider, ReportedLocationProvider

__all__ = [
    "LocationProvider",
    "ReportedLocationProvider",
]
