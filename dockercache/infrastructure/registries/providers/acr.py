"""Azure Container Registry provider.

Exchanges the Azure CLI session for a short-lived ACR access token and logs
docker in with the fixed token username. ACR creates repositories on first
push, so there is no create step.
"""

from __future__ import annotations

from dockercache.core.constants import ACR_TOKEN_USERNAME
from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import AuthenticationException, ConfigurationException
from dockercache.domain.value_objects import AcrRegistryName
from dockercache.infrastructure.registries.base import RegistryProvider, mask_token
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_PERMISSION_HINT = (
    "Ensure you have the required permissions (AcrPull, AcrPush) "
    "and are authenticated with Azure"
)


class AcrProvider(RegistryProvider):
    """ACR: '<name>.azurecr.io/<repository>/<image>:<suffix>'."""

    provider_type = ProviderType.ACR
    display_name = "ACR"
    required_commands = ("docker", "az")

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Validate registry name, fetch an access token, and log in.

        Raises:
            ConfigurationException: Registry name missing or malformed.
            AuthenticationException: Token request or docker login failed.
        """
        self._require_commands()
        name = self._require(
            config.acr.registry_name, "acr.registry-name", "ACR registry name"
        )
        try:
            AcrRegistryName(name)
        except ValueError as e:
            raise ConfigurationException(str(e), parameter="acr.registry-name") from e

        registry = f"{name}.azurecr.io"
        logger.info("ACR registry URL: %s", registry)

        token = self._access_token(name, verbose=config.verbose)
        self._login(registry, ACR_TOKEN_USERNAME, token, [_PERMISSION_HINT])

        repository = config.acr.repository or config.image
        return ProviderIdentity(
            registry=registry, namespace=repository, repository=repository
        )

    def ensure_repository(
        self, config: CacheConfig, identity: ProviderIdentity
    ) -> None:
        logger.info("Saving cache to ACR (repository will be auto-created if needed)")

    def _access_token(self, name: str, verbose: bool = False) -> str:
        result = self._runner.run(
            [
                "az", "acr", "login",
                "--name", name,
                "--expose-token",
                "--output", "tsv",
                "--query", "accessToken",
            ]
        )
        if not result.ok:
            raise AuthenticationException(
                self.provider_type.value,
                f"Failed to get ACR access token: {result.stderr.strip()}",
                [_PERMISSION_HINT],
            )
        # Warnings may precede the token; the token is the last line.
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        token = lines[-1] if lines else ""
        if not token:
            raise AuthenticationException(
                self.provider_type.value,
                "ACR access token is empty",
                [_PERMISSION_HINT],
            )
        if verbose:
            logger.info("Access token retrieved (masked): %s", mask_token(token))
        return token
