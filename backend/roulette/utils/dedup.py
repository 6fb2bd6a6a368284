from typing import Iterable

from roulette.models import Restaurant


def unique_by_name(restaurants: Iterable[Restaurant]) -> list[Restaurant]:
    """Drop restaurants whose lower-cased name was already seen, keeping order."""
    seen: set[str] = set()
    unique: list[Restaurant] = []
    for restaurant in restaurants:
        key = restaurant.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(restaurant)
    return unique
