"""Run one cache step: authenticate, restore, build, save."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from typing import TYPE_CHECKING

from dockercache.application.services.cache_key_service import CacheKeyService
from dockercache.application.services.cache_strategy_service import (
    CacheStrategyEngine,
)
from dockercache.domain.entities import (
    BuildRequest,
    CacheConfig,
    CacheOutcome,
    CacheRunResult,
    LocalImageReferences,
)
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import (
    BuildException,
    CacheRestoreException,
    ConfigurationException,
    ContainerEngineException,
    DockerCacheException,
)
from dockercache.shared.telemetry.logging import get_logger, log_success

if TYPE_CHECKING:
    from dockercache.application.interfaces import (
        IContainerEngine,
        IRegistryProvider,
    )

logger = get_logger(__name__)

# Selects the registry backend for a provider id.
ProviderFactory = Callable[[ProviderType], "IRegistryProvider"]


class RunDockerCacheUseCase:
    """Orchestrates a cache run for the configured provider and strategy.

    Fatal conditions (configuration, authentication, artifact restore, build)
    raise. A failed save does not: the image is still available locally, so
    the failure is recorded on the result and turns into a non-zero exit.
    """

    def __init__(
        self,
        engine: "IContainerEngine",
        provider_factory: ProviderFactory,
        key_service: CacheKeyService | None = None,
    ) -> None:
        self._engine = engine
        self._provider_factory = provider_factory
        self._key_service = key_service or CacheKeyService()

    def execute(self, config: CacheConfig) -> CacheRunResult:
        """Run the cache step for config.

        Returns:
            CacheRunResult for downstream steps.

        Raises:
            ConfigurationException: Invalid provider parameters.
            AuthenticationException: Registry login failed.
            CacheRestoreException: Artifact strategy found the image but
                could not pull it.
            BuildException: The image build failed.
        """
        provider = self._provider_factory(config.provider)
        logger.info("Setting up %s environment", provider.display_name)
        identity = provider.setup_environment(config)

        cache_key = self._key_service.generate_cache_key(config)
        if config.cache_key:
            logger.info("Using provided cache key: %s", cache_key)
        else:
            logger.info("Generated cache key: %s", cache_key)

        strategy = CacheStrategyEngine(self._engine, provider)
        outcome = strategy.restore(config, identity, cache_key)
        if outcome.error:
            raise CacheRestoreException(
                strategy.keyed_reference(config, identity, cache_key), outcome.error
            )

        local = LocalImageReferences.for_run(config, cache_key)
        result_kwargs = {
            "image_ref": local.keyed,
            "cache_key": cache_key,
            "strategy": config.strategy,
            "export_env_variable": config.export_env_variable,
            "cache_hit": outcome.hit,
            "cache_from": outcome.cache_from,
        }

        if config.skip_pull_from_cache and outcome.hit:
            logger.info("Cache hit and skip-pull-from-cache set, skipping build")
            return CacheRunResult(build_skipped=True, **result_kwargs)

        if outcome.hit:
            self._ensure_local_tags(
                strategy.keyed_reference(config, identity, cache_key), local
            )
            logger.info("Using cached image: %s", local.keyed)
            return CacheRunResult(build_skipped=True, **result_kwargs)

        self._build(config, local, outcome)
        self._engine.tag(local.keyed, local.fallback)

        save_error = None
        try:
            strategy.save(config, identity, cache_key, outcome)
        except DockerCacheException as e:
            logger.error("Cache save failed: %s", e.message)
            save_error = e.message
        return CacheRunResult(save_error=save_error, **result_kwargs)

    def _ensure_local_tags(
        self, cache_image: str, local: LocalImageReferences
    ) -> None:
        """Tag the pulled image under both local names where either is missing."""
        for ref in (local.keyed, local.fallback):
            if not self._engine.image_exists_locally(ref):
                self._engine.tag(cache_image, ref)

    def _build(
        self, config: CacheConfig, local: LocalImageReferences, outcome: CacheOutcome
    ) -> None:
        try:
            extra_args = tuple(shlex.split(config.additional_build_args or ""))
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid additional-build-args: {e}",
                parameter="additional-build-args",
            ) from e
        request = BuildRequest(
            tag=local.keyed,
            context=config.context,
            dockerfile=config.dockerfile,
            dockerfile_content=config.dockerfile_inline,
            target=config.target,
            build_args=config.build_args,
            secrets=config.secrets,
            cache_from=outcome.cache_from,
            extra_args=extra_args,
        )
        if outcome.cache_from:
            logger.info("Building image with cache from: %s", outcome.cache_from)
        else:
            logger.info("Building image: %s", local.keyed)
        try:
            self._engine.build(request)
        except ContainerEngineException as e:
            raise BuildException(local.keyed, e.message) from e
        log_success(logger, "Image built successfully: %s", local.keyed)
