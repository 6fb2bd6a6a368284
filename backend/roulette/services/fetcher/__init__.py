"""Restaurant fetch cycle module."""

from .service import RestaurantFetcher, choose

__all__ = [
    "RestaurantFetcher",
    "choose",
]
