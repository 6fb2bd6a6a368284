"""Key/value cache service module."""

from .service import (
    CacheService,
    InMemoryCacheService,
    RedisCacheService,
    create_cache_service,
)

__all__ = [
    "CacheService",
    "InMemoryCacheService",
    "RedisCacheService",
    "create_cache_service",
]
