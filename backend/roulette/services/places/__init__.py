"""Nearby places search module."""

from .service import (
    GooglePlacesSearchService,
    NearbySearchService,
    SearchPage,
    parse_results,
)

__all__ = [
    "GooglePlacesSearchService",
    "NearbySearchService",
    "SearchPage",
    "parse_results",
]
