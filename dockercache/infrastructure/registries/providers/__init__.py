"""Registry provider implementations (one per backend)."""

from dockercache.infrastructure.registries.providers.acr import AcrProvider
from dockercache.infrastructure.registries.providers.artifactory import ArtifactoryProvider
from dockercache.infrastructure.registries.providers.buildkite import BuildkiteProvider
from dockercache.infrastructure.registries.providers.ecr import EcrProvider
from dockercache.infrastructure.registries.providers.gar import GarProvider

__all__ = [
    "AcrProvider",
    "ArtifactoryProvider",
    "BuildkiteProvider",
    "EcrProvider",
    "GarProvider",
]
