"""Ports for the application layer (container engine, registry providers)."""

from dockercache.application.interfaces.services import (
    IContainerEngine,
    IRegistryProvider,
)

__all__ = [
    "IContainerEngine",
    "IRegistryProvider",
]
