"""Restaurant cache session module."""

from .service import (
    LOCATION_KEY,
    RESTAURANTS_KEY,
    RestaurantCache,
    load_location,
    load_restaurants,
)

__all__ = [
    "LOCATION_KEY",
    "RESTAURANTS_KEY",
    "RestaurantCache",
    "load_location",
    "load_restaurants",
]
