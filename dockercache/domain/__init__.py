"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure. Used by the application and
infrastructure layers.
"""

from dockercache.domain.enums import BuildkiteAuthMethod, CacheStrategy, ProviderType
from dockercache.domain.exceptions import (
    AuthenticationException,
    BuildException,
    CacheRestoreException,
    CacheSaveException,
    ConfigurationException,
    ContainerEngineException,
    DockerCacheException,
    RepositoryException,
)

__all__ = [
    "AuthenticationException",
    "BuildException",
    "BuildkiteAuthMethod",
    "CacheRestoreException",
    "CacheSaveException",
    "CacheStrategy",
    "ConfigurationException",
    "ContainerEngineException",
    "DockerCacheException",
    "ProviderType",
    "RepositoryException",
]
