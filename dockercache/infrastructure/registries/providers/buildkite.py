"""Buildkite Packages container registry provider.

Two auth methods: a static API token (optionally a reference to an
allow-listed variable) or a short-lived OIDC token from the agent.
"""

from __future__ import annotations

from dockercache.core.constants import (
    BUILDKITE_LOGIN_USERNAME,
    BUILDKITE_OIDC_LIFETIME_SECONDS,
    BUILDKITE_PACKAGES_HOST,
    ENV_BUILDKITE_API_TOKEN,
)
from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import BuildkiteAuthMethod, ProviderType
from dockercache.domain.exceptions import AuthenticationException, ConfigurationException
from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_SCOPES_HINT = "Ensure your token has Read Packages and Write Packages scopes"


class BuildkiteProvider(RegistryProvider):
    """Buildkite Packages: 'packages.buildkite.com/<org>/<registry>/<image>:<suffix>'."""

    provider_type = ProviderType.BUILDKITE
    display_name = "Buildkite Packages"
    env_allowed_names = ("CONTAINER_PACKAGE_REGISTRY_TOKEN", ENV_BUILDKITE_API_TOKEN)
    env_allowed_prefixes = ("BUILDKITE_PLUGIN_",)

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Resolve org and registry slugs, then authenticate.

        Raises:
            ConfigurationException: No organization slug or no API token.
            AuthenticationException: OIDC token request or docker login failed.
        """
        bk = config.buildkite
        if bk.auth_method is BuildkiteAuthMethod.OIDC:
            self._require_commands("buildkite-agent")
        else:
            self._require_commands()

        org_slug = bk.org_slug
        if not org_slug:
            org_slug = config.organization_slug
            if not org_slug:
                raise ConfigurationException(
                    "Buildkite organization slug is required",
                    parameter="buildkite.org-slug",
                    hints=[
                        "Set it in configuration or the BUILDKITE_ORGANIZATION_SLUG "
                        "environment variable"
                    ],
                )
            logger.info("Using organization slug from environment: %s", org_slug)

        registry_slug = bk.registry_slug
        if not registry_slug:
            registry_slug = config.image
            logger.info("Registry slug defaulting to image name: %s", registry_slug)

        registry = f"{BUILDKITE_PACKAGES_HOST}/{org_slug}/{registry_slug}"
        logger.info("Buildkite registry URL: %s", registry)
        logger.info("Authentication method: %s", bk.auth_method.value)

        if bk.auth_method is BuildkiteAuthMethod.OIDC:
            self._login(
                registry,
                BUILDKITE_LOGIN_USERNAME,
                self._oidc_token(registry),
                [
                    "Verify your pipeline has access to the registry and meets "
                    "OIDC policy requirements"
                ],
            )
        else:
            self._login(
                registry,
                BUILDKITE_LOGIN_USERNAME,
                self._api_token(bk.api_token),
                [f"Verify your API token: {_SCOPES_HINT}"],
            )
        return ProviderIdentity(registry=registry, repository=registry_slug)

    def fallback_tag(self, config: CacheConfig) -> str:
        return config.buildkite.fallback_tag

    def _api_token(self, raw: str | None) -> str:
        token = self._env.resolve(raw)
        if not token:
            token = self._env(ENV_BUILDKITE_API_TOKEN) or ""
        if not token:
            raise ConfigurationException(
                "API token is required for api-token authentication",
                parameter="buildkite.api-token",
                hints=[
                    "Set it via the 'buildkite.api-token' parameter or the "
                    "BUILDKITE_API_TOKEN environment variable",
                    _SCOPES_HINT,
                ],
            )
        return token

    def _oidc_token(self, registry: str) -> str:
        audience = f"https://{registry}"
        logger.info("Requesting OIDC token for audience: %s", audience)
        result = self._runner.run(
            [
                "buildkite-agent", "oidc", "request-token",
                "--audience", audience,
                "--lifetime", str(BUILDKITE_OIDC_LIFETIME_SECONDS),
            ]
        )
        token = result.stdout.strip()
        if not result.ok or not token:
            raise AuthenticationException(
                self.provider_type.value,
                f"Failed to request OIDC token: {result.stderr.strip()}",
                [
                    "Verify your pipeline has access to the registry and meets "
                    "OIDC policy requirements"
                ],
            )
        return token
