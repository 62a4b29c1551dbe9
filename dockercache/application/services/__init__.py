"""Application services: cache key generation and the cache strategy engine."""

from dockercache.application.services.cache_key_service import (
    CacheKeyService,
    HashAlgorithm,
    SHA1Algorithm,
    SHA256Algorithm,
)
from dockercache.application.services.cache_strategy_service import (
    CacheStrategyEngine,
)

__all__ = [
    "CacheKeyService",
    "CacheStrategyEngine",
    "HashAlgorithm",
    "SHA1Algorithm",
    "SHA256Algorithm",
]
