"""Shared behaviour for registry providers (DRY).

Subclasses implement setup_environment and, where the backend needs one,
ensure_repository. Naming defaults to 'registry/namespace/image:suffix'.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from dockercache.application.interfaces import IContainerEngine
from dockercache.core.constants import DEFAULT_FALLBACK_TAG
from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    ContainerEngineException,
)
from dockercache.infrastructure.exceptions import CommandNotFoundError
from dockercache.infrastructure.process import CommandRunner
from dockercache.shared.telemetry.logging import get_logger, log_success
from dockercache.shared.utils.env_lookup import AllowListedEnvLookup

logger = get_logger(__name__)

# Install hints for CLI dependencies
INSTALL_HINTS: dict[str, str] = {
    "docker": "Install Docker: https://docs.docker.com/engine/install/",
    "az": "Install from: https://docs.microsoft.com/en-us/cli/azure/install-azure-cli",
    "gcloud": "Install the Google Cloud SDK: https://cloud.google.com/sdk/docs/install",
    "buildkite-agent": "Run this step on a Buildkite agent",
}


class RegistryProvider(ABC):
    """Base class implementing IRegistryProvider."""

    provider_type: ClassVar[ProviderType]
    display_name: ClassVar[str]
    required_commands: ClassVar[tuple[str, ...]] = ("docker",)
    # Names and prefixes that '$NAME' credential values may reference
    env_allowed_names: ClassVar[tuple[str, ...]] = ()
    env_allowed_prefixes: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        engine: IContainerEngine,
        runner: CommandRunner | None = None,
        env_lookup: AllowListedEnvLookup | None = None,
    ) -> None:
        self._engine = engine
        self._runner = runner or CommandRunner()
        self._env = env_lookup or AllowListedEnvLookup(
            names=self.env_allowed_names,
            prefixes=self.env_allowed_prefixes,
        )

    @abstractmethod
    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Validate parameters, resolve defaults, and authenticate."""

    def compute_cache_image_name(
        self, config: CacheConfig, identity: ProviderIdentity, tag_suffix: str
    ) -> str:
        parts = [identity.registry]
        if identity.namespace:
            parts.append(identity.namespace)
        parts.append(config.image)
        return f"{'/'.join(parts)}:{tag_suffix}"

    def fallback_tag(self, config: CacheConfig) -> str:
        return DEFAULT_FALLBACK_TAG

    def ensure_repository(
        self, config: CacheConfig, identity: ProviderIdentity
    ) -> None:
        """No-op for registries that create repositories on push."""

    def _require_commands(self, *extra: str) -> None:
        """Raise CommandNotFoundError for the first missing CLI dependency."""
        for name in (*self.required_commands, *extra):
            if not self._runner.which(name):
                raise CommandNotFoundError(name, INSTALL_HINTS.get(name))

    def _require(self, value: str | None, parameter: str, label: str) -> str:
        """Return value or raise ConfigurationException naming parameter."""
        if not value:
            raise ConfigurationException(
                f"{label} is required",
                parameter=parameter,
                hints=[f"Set it via the '{parameter}' parameter"],
            )
        return value

    def _login(
        self,
        registry: str,
        username: str,
        password: str,
        hints: list[str] | None = None,
    ) -> None:
        """docker login; any failure is an AuthenticationException."""
        logger.info("Authenticating with %s...", self.display_name)
        try:
            self._engine.login(registry, username, password)
        except ContainerEngineException as e:
            reason = str(e.details.get("stderr") or e.message).strip()
            raise AuthenticationException(
                self.provider_type.value,
                f"Failed to authenticate with {self.display_name}: {reason}",
                hints,
            ) from e
        log_success(logger, "Successfully authenticated with %s", self.display_name)


def mask_token(token: str) -> str:
    """Preview for verbose logs: first and last 10 chars, or only the length."""
    if len(token) > 20:
        return f"{token[:10]}...{token[-10:]}"
    return f"<{len(token)} chars>"
