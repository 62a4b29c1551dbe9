"""Registries: ECR, ACR, GAR/GCR, Artifactory and Buildkite Packages.

RegistryProviderFactory maps the configured provider id to its
implementation. Every implementation satisfies IRegistryProvider
(setup_environment, compute_cache_image_name, fallback_tag,
ensure_repository).
"""

from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.infrastructure.registries.factory import RegistryProviderFactory

__all__ = [
    "RegistryProvider",
    "RegistryProviderFactory",
]
