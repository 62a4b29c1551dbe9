"""Registry provider factory: creates the backend for the configured provider id."""

from typing import ClassVar

from dockercache.application.interfaces import IContainerEngine, IRegistryProvider
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import ConfigurationException
from dockercache.infrastructure.process import CommandRunner
from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.infrastructure.registries.providers import (
    AcrProvider,
    ArtifactoryProvider,
    BuildkiteProvider,
    EcrProvider,
    GarProvider,
)
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class RegistryProviderFactory:
    """Factory for registry provider instances by provider type."""

    _providers: ClassVar[dict[ProviderType, type[RegistryProvider]]] = {
        ProviderType.ECR: EcrProvider,
        ProviderType.ACR: AcrProvider,
        ProviderType.GAR: GarProvider,
        ProviderType.ARTIFACTORY: ArtifactoryProvider,
        ProviderType.BUILDKITE: BuildkiteProvider,
    }

    @classmethod
    def create_provider(
        cls,
        provider_type: ProviderType,
        engine: IContainerEngine,
        *,
        runner: CommandRunner | None = None,
    ) -> IRegistryProvider:
        """Create provider instance for provider_type.

        Args:
            provider_type: Configured provider.
            engine: Container engine shared with the strategy engine.
            runner: Optional command runner for CLI-backed providers.

        Returns:
            The provider implementation.

        Raises:
            ConfigurationException: Provider not supported.
        """
        provider_class = cls._providers.get(provider_type)
        if not provider_class:
            raise ConfigurationException(
                f"Unknown provider: {provider_type}. "
                f"Supported: {cls.list_supported_providers()}",
                parameter="provider",
            )
        logger.debug("Creating %s", provider_class.__name__)
        return provider_class(engine, runner)

    @classmethod
    def list_supported_providers(cls) -> list[str]:
        """Return list of supported provider ids."""
        return [p.value for p in cls._providers]
