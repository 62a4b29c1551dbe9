"""Cache strategy engine: restore and save decisions for any provider.

restore() checks the registry for the keyed image and, depending on the
strategy, pulls it (artifact, hybrid) or only records it as a layer-cache
hint (build). Hybrid falls back to the provider's fallback tag when the keyed
image is missing. A missing manifest is the expected miss signal, never an
error.

save() pushes the locally built image under the keyed reference and the
fallback reference. Only the keyed push can fail the step.
"""

from __future__ import annotations

from dockercache.application.interfaces import IContainerEngine, IRegistryProvider
from dockercache.domain.entities import (
    CacheConfig,
    CacheOutcome,
    LocalImageReferences,
    ProviderIdentity,
    keyed_tag,
)
from dockercache.domain.enums import CacheStrategy
from dockercache.domain.exceptions import CacheSaveException, ContainerEngineException
from dockercache.shared.telemetry.logging import get_logger, log_success

logger = get_logger(__name__)


class CacheStrategyEngine:
    """Provider-agnostic restore/save state machine."""

    def __init__(self, engine: IContainerEngine, provider: IRegistryProvider) -> None:
        self._engine = engine
        self._provider = provider

    def keyed_reference(
        self, config: CacheConfig, identity: ProviderIdentity, cache_key: str
    ) -> str:
        return self._provider.compute_cache_image_name(
            config, identity, keyed_tag(config, cache_key)
        )

    def fallback_reference(self, config: CacheConfig, identity: ProviderIdentity) -> str:
        return self._provider.compute_cache_image_name(
            config, identity, self._provider.fallback_tag(config)
        )

    def restore(
        self, config: CacheConfig, identity: ProviderIdentity, cache_key: str
    ) -> CacheOutcome:
        """Try to restore the cache for cache_key according to config.strategy.

        Returns:
            CacheOutcome. error is set only for an artifact-strategy pull
            failure, which the caller treats as fatal.
        """
        if not config.restore:
            logger.info("Cache restore disabled, skipping")
            return CacheOutcome()

        name = self._provider.display_name
        logger.info(
            "Restoring cache from %s using %s strategy", name, config.strategy.value
        )
        cache_image = self.keyed_reference(config, identity, cache_key)
        exists = self._engine.manifest_exists(cache_image)

        if config.strategy is CacheStrategy.BUILD:
            if exists:
                logger.info("Build cache available: %s", cache_image)
                return CacheOutcome(cache_from=cache_image)
            logger.info("No build cache found for key %s in %s.", cache_key, name)
            return CacheOutcome()

        if config.strategy is CacheStrategy.ARTIFACT:
            if not exists:
                logger.info(
                    "Cache miss. No cached image found for key %s in %s.", cache_key, name
                )
                return CacheOutcome()
            logger.info("Complete cache hit! Restoring from %s", cache_image)
            error = self._pull_and_tag(config, cache_image, cache_key)
            if error:
                logger.warning("Failed to pull cache image from %s", name)
                return CacheOutcome(error=error)
            log_success(logger, "Cache restored successfully from %s", name)
            return CacheOutcome(hit=True)

        # Hybrid
        if exists:
            logger.info("Complete cache hit! Restoring from %s", cache_image)
            error = self._pull_and_tag(config, cache_image, cache_key)
            if error:
                logger.warning(
                    "Failed to pull complete cache image, falling back to build caching"
                )
                return CacheOutcome(cache_from=cache_image)
            log_success(
                logger, "Cache restored successfully from %s - build can be skipped", name
            )
            return CacheOutcome(hit=True)

        logger.info("No cache found for key %s - will build from scratch", cache_key)
        fallback_image = self.fallback_reference(config, identity)
        if self._engine.manifest_exists(fallback_image):
            logger.info("Using %s cache for layer caching: %s",
                        self._provider.fallback_tag(config), fallback_image)
            return CacheOutcome(cache_from=fallback_image)
        logger.warning("No fallback cache found for layer caching")
        return CacheOutcome()

    def save(
        self,
        config: CacheConfig,
        identity: ProviderIdentity,
        cache_key: str,
        outcome: CacheOutcome,
    ) -> None:
        """Push the built image under the keyed and fallback references.

        Raises:
            CacheSaveException: Artifact strategy and the built image is
                missing locally, or the keyed tag/push failed.
            RepositoryException: The provider could not ensure the repository.
        """
        if not config.save:
            logger.info("Cache save disabled, skipping")
            return
        if outcome.hit:
            logger.info("Cache was restored from complete image - no need to save")
            return

        name = self._provider.display_name
        local = LocalImageReferences.for_run(config, cache_key)
        if not self._engine.image_exists_locally(local.keyed):
            if config.strategy is CacheStrategy.ARTIFACT:
                raise CacheSaveException(
                    local.keyed, "Source image not found locally"
                )
            logger.warning(
                "Source image not found locally: %s - this is expected if build was "
                "skipped or failed",
                local.keyed,
            )
            return

        logger.info("Saving cache to %s using %s strategy", name, config.strategy.value)
        self._provider.ensure_repository(config, identity)

        cache_image = self.keyed_reference(config, identity, cache_key)
        try:
            self._engine.tag(local.keyed, cache_image)
            self._engine.push(cache_image)
        except ContainerEngineException as e:
            raise CacheSaveException(cache_image, e.message) from e
        log_success(logger, "Cache saved successfully to %s: %s", name, cache_image)

        fallback_image = self.fallback_reference(config, identity)
        try:
            self._engine.tag(local.keyed, fallback_image)
            self._engine.push(fallback_image)
        except ContainerEngineException as e:
            logger.warning(
                "Failed to push %s (cache still saved): %s", fallback_image, e.message
            )
            return
        log_success(logger, "Fallback tag saved for layer caching: %s", fallback_image)

    def _pull_and_tag(
        self, config: CacheConfig, cache_image: str, cache_key: str
    ) -> str | None:
        """Pull cache_image and tag it as the canonical local image.

        Returns:
            None on success, else the failure reason.
        """
        try:
            self._engine.pull(cache_image)
            self._engine.tag(
                cache_image, LocalImageReferences.for_run(config, cache_key).keyed
            )
        except ContainerEngineException as e:
            return e.message
        return None
