"""JFrog Artifactory (generic Docker v2 registry) provider.

Needs an explicit registry URL, username and identity token. Each may be a
'$NAME' reference to an allow-listed variable. No repository create step.
"""

from __future__ import annotations

from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import ConfigurationException
from dockercache.domain.value_objects import RegistryHost
from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ArtifactoryProvider(RegistryProvider):
    """Artifactory: '<host>/<repository>/<image>:<suffix>'."""

    provider_type = ProviderType.ARTIFACTORY
    display_name = "Artifactory"
    env_allowed_prefixes = ("ARTIFACTORY_", "BUILDKITE_PLUGIN_")

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Resolve and validate credentials, then log in.

        Raises:
            ConfigurationException: Missing parameter, empty referenced
                variable, or invalid registry hostname.
            AuthenticationException: docker login failed.
        """
        self._require_commands()
        art = config.artifactory
        registry_url = self._resolved(
            art.registry_url, "artifactory.registry-url", "Artifactory registry URL"
        )
        username = self._resolved(
            art.username, "artifactory.username", "Artifactory username"
        )
        identity_token = self._resolved(
            art.identity_token, "artifactory.identity-token", "Artifactory identity token"
        )

        try:
            host = RegistryHost(registry_url).value
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid Artifactory registry URL: {e}",
                parameter="artifactory.registry-url",
            ) from e

        logger.info("Artifactory registry URL: %s", host)
        logger.info("Artifactory username: %s", username)
        self._login(
            host,
            username,
            identity_token,
            [
                "Verify your username and identity token are correct",
                "Ensure the registry URL is accessible and supports Docker registry API",
            ],
        )

        repository = art.repository or config.image
        return ProviderIdentity(registry=host, namespace=repository, repository=repository)

    def _resolved(self, raw: str | None, parameter: str, label: str) -> str:
        """Required value with '$NAME' references expanded."""
        value = self._env.resolve(self._require(raw, parameter, label))
        if not value:
            raise ConfigurationException(
                f"{label} references an unset variable: {raw}",
                parameter=parameter,
            )
        return value
