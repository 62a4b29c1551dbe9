"""Application use cases: one entry point per workflow."""

from dockercache.application.use_cases.run_docker_cache import (
    ProviderFactory,
    RunDockerCacheUseCase,
)

__all__ = [
    "ProviderFactory",
    "RunDockerCacheUseCase",
]
