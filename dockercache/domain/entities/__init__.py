"""Domain entities: run configuration and cache run records."""

from dockercache.domain.entities.build import BuildRequest
from dockercache.domain.entities.cache import (
    CacheOutcome,
    CacheRunResult,
    LocalImageReferences,
    ProviderIdentity,
    keyed_tag,
)
from dockercache.domain.entities.config import (
    AcrConfig,
    ArtifactoryConfig,
    BuildkiteConfig,
    CacheConfig,
    EcrConfig,
    GarConfig,
)

__all__ = [
    "BuildRequest",
    "AcrConfig",
    "ArtifactoryConfig",
    "BuildkiteConfig",
    "CacheConfig",
    "CacheOutcome",
    "CacheRunResult",
    "EcrConfig",
    "GarConfig",
    "LocalImageReferences",
    "ProviderIdentity",
    "keyed_tag",
]
