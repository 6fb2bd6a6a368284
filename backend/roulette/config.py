"""Runtime configuration read from the environment (and ``.env`` if present)."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

# 5 miles in meters
SIGNIFICANT_DISTANCE_THRESHOLD = 8046.72
MAX_RESULTS = 60
# 10 minutes
LOCATION_CHECK_INTERVAL_MS = 600_000
# 10 miles in meters
SEARCH_RADIUS_M = 16093.4
SEARCH_CATEGORY = "restaurant"
PICK_DELAY_SECONDS = 0.5


def _as_float(val: str | None, default: float) -> float:
    if val is None or val.strip() == "":
        return default
    return float(val)


def _as_int(val: str | None, default: int) -> int:
    if val is None or val.strip() == "":
        return default
    return int(val)


def _as_list(val: str | None, default: list[str]) -> list[str]:
    if not val:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


@dataclass
class Settings:
    google_places_api_key: str | None = None
    redis_url: str | None = None
    significant_distance_m: float = SIGNIFICANT_DISTANCE_THRESHOLD
    max_results: int = MAX_RESULTS
    location_check_interval_ms: int = LOCATION_CHECK_INTERVAL_MS
    search_radius_m: float = SEARCH_RADIUS_M
    search_category: str = SEARCH_CATEGORY
    pick_delay_seconds: float = PICK_DELAY_SECONDS
    places_timeout_seconds: float = 10.0
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def location_check_interval_seconds(self) -> float:
        return self.location_check_interval_ms / 1000

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            google_places_api_key=os.getenv("GOOGLE_PLACES_API_KEY") or None,
            redis_url=os.getenv("REDIS_URL") or None,
            significant_distance_m=_as_float(
                os.getenv("SIGNIFICANT_DISTANCE_M"), defaults.significant_distance_m
            ),
            max_results=_as_int(os.getenv("MAX_RESULTS"), defaults.max_results),
            location_check_interval_ms=_as_int(
                os.getenv("LOCATION_CHECK_INTERVAL_MS"), defaults.location_check_interval_ms
            ),
            search_radius_m=_as_float(os.getenv("SEARCH_RADIUS_M"), defaults.search_radius_m),
            pick_delay_seconds=_as_float(
                os.getenv("PICK_DELAY_SECONDS"), defaults.pick_delay_seconds
            ),
            places_timeout_seconds=_as_float(
                os.getenv("PLACES_TIMEOUT_SECONDS"), defaults.places_timeout_seconds
            ),
            cors_origins=_as_list(os.getenv("CORS_ORIGINS"), defaults.cors_origins),
        )


settings = Settings.from_env()
