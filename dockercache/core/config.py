"""Plugin configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings over the
BUILDKITE_PLUGIN_DOCKER_CACHE_* variables the CI agent exports for the step,
with no implicit .env file: the working directory is the checked-out
repository, so a dotenv file is read only when passed explicitly
(Settings(_env_file=...)) for local runs. Nested provider keys arrive
flattened (ecr.account-id -> ..._ECR_ACCOUNT_ID) and array keys arrive
indexed (build-args -> ..._BUILD_ARGS_0, ..._BUILD_ARGS_1, ...).

Settings holds raw values; to_cache_config() validates them and returns the
immutable CacheConfig used by the rest of the run.
"""

import os
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from dockercache.core.constants import (
    DEFAULT_CACHE_TAG,
    DEFAULT_CONTEXT,
    DEFAULT_DOCKERFILE,
    DEFAULT_EXPORT_ENV_VARIABLE,
    DEFAULT_FALLBACK_TAG,
    DEFAULT_MAX_AGE_DAYS,
    ENV_COMMIT,
    ENV_ORGANIZATION_SLUG,
    ENV_PREFIX,
    GAR_DEFAULT_REGION,
)
from dockercache.domain.entities.config import (
    AcrConfig,
    ArtifactoryConfig,
    BuildkiteConfig,
    CacheConfig,
    EcrConfig,
    GarConfig,
)
from dockercache.domain.enums import BuildkiteAuthMethod, CacheStrategy, ProviderType
from dockercache.domain.exceptions import ConfigurationException
from dockercache.domain.value_objects import ImageName, ImageTag


class IndexedListSettingsSource(PydanticBaseSettingsSource):
    """Collect array options exported as PREFIX_NAME_0, PREFIX_NAME_1, ...

    Stops at the first missing or empty index. An array cache-key is joined
    with commas so it reads as a file list.
    """

    LIST_FIELDS = ("build_args", "secrets", "cache_key")
    JOINED_FIELDS = ("cache_key",)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name in self.LIST_FIELDS:
            values: list[str] = []
            index = 0
            while value := os.environ.get(f"{ENV_PREFIX}{name.upper()}_{index}"):
                values.append(value)
                index += 1
            if values:
                data[name] = ",".join(values) if name in self.JOINED_FIELDS else values
        return data


class Settings(BaseSettings):
    """Plugin settings loaded from the step environment.

    Everything is optional here; required values (provider, image) and
    formats are checked in to_cache_config so the error names the plugin
    parameter instead of an env variable.
    """

    # Core
    provider: str = ""
    image: str = ""
    strategy: str = CacheStrategy.HYBRID.value
    tag: str = DEFAULT_CACHE_TAG
    cache_key: str | None = None
    save: bool = True
    restore: bool = True
    verbose: bool = False
    max_age_days: int = DEFAULT_MAX_AGE_DAYS
    export_env_variable: str = DEFAULT_EXPORT_ENV_VARIABLE
    # File that receives KEY=value lines for downstream steps (optional)
    output_file: str | None = None

    # Build
    dockerfile: str = DEFAULT_DOCKERFILE
    dockerfile_inline: str | None = None
    context: str = DEFAULT_CONTEXT
    target: str | None = None
    build_args: list[str] = Field(default_factory=list)
    secrets: list[str] = Field(default_factory=list)
    additional_build_args: str | None = None
    skip_pull_from_cache: bool = False

    # ECR
    ecr_region: str | None = None
    ecr_account_id: str | None = None
    ecr_registry_url: str | None = None

    # ACR
    acr_registry_name: str | None = None
    acr_repository: str | None = None

    # GAR / GCR
    gar_project: str | None = None
    gar_region: str = GAR_DEFAULT_REGION
    gar_repository: str | None = None

    # Artifactory
    artifactory_registry_url: str | None = None
    artifactory_username: str | None = None
    artifactory_identity_token: SecretStr | None = None
    artifactory_repository: str | None = None

    # Buildkite Packages
    buildkite_org_slug: str | None = None
    buildkite_registry_slug: str | None = None
    buildkite_auth_method: str = BuildkiteAuthMethod.API_TOKEN.value
    buildkite_api_token: SecretStr | None = None
    buildkite_fallback_tag: str = DEFAULT_FALLBACK_TAG

    # Ambient CI environment (not prefixed)
    commit: str | None = Field(
        default=None, validation_alias=AliasChoices(ENV_COMMIT)
    )
    organization_slug: str | None = Field(
        default=None, validation_alias=AliasChoices(ENV_ORGANIZATION_SLUG)
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Indexed array variables sit between init kwargs and plain env."""
        return (
            init_settings,
            IndexedListSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    def to_cache_config(self) -> CacheConfig:
        """Validate raw settings and build the immutable run configuration.

        Returns:
            CacheConfig for this run.

        Raises:
            ConfigurationException: Missing provider or image, unknown
                provider/strategy/auth method, malformed image name or tag,
                or max-age-days below 1.
        """
        provider = _parse_enum(ProviderType, self.provider, "provider")
        strategy = _parse_enum(CacheStrategy, self.strategy, "strategy")
        auth_method = _parse_enum(
            BuildkiteAuthMethod, self.buildkite_auth_method, "buildkite.auth-method"
        )

        if not self.image:
            raise ConfigurationException(
                "Image name is required", parameter="image"
            )
        try:
            ImageName(self.image)
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid image name {self.image!r}: {e}", parameter="image"
            ) from e
        for value, parameter in (
            (self.tag, "tag"),
            (self.buildkite_fallback_tag, "buildkite.fallback-tag"),
        ):
            try:
                ImageTag(value)
            except ValueError as e:
                raise ConfigurationException(
                    f"Invalid {parameter} {value!r}: {e}", parameter=parameter
                ) from e
        if self.max_age_days < 1:
            raise ConfigurationException(
                "max-age-days must be at least 1", parameter="max-age-days"
            )

        return CacheConfig(
            provider=provider,
            image=self.image,
            strategy=strategy,
            tag=self.tag,
            cache_key=self.cache_key or None,
            save=self.save,
            restore=self.restore,
            dockerfile=self.dockerfile,
            dockerfile_inline=self.dockerfile_inline or None,
            context=self.context,
            target=self.target or None,
            build_args=tuple(self.build_args),
            secrets=tuple(self.secrets),
            additional_build_args=self.additional_build_args or None,
            skip_pull_from_cache=self.skip_pull_from_cache,
            export_env_variable=self.export_env_variable,
            max_age_days=self.max_age_days,
            verbose=self.verbose,
            commit=self.commit or None,
            organization_slug=self.organization_slug or None,
            ecr=EcrConfig(
                region=self.ecr_region or None,
                account_id=self.ecr_account_id or None,
                registry_url=self.ecr_registry_url or None,
            ),
            acr=AcrConfig(
                registry_name=self.acr_registry_name or None,
                repository=self.acr_repository or None,
            ),
            gar=GarConfig(
                project=self.gar_project or None,
                region=self.gar_region or GAR_DEFAULT_REGION,
                repository=self.gar_repository or None,
            ),
            artifactory=ArtifactoryConfig(
                registry_url=self.artifactory_registry_url or None,
                username=self.artifactory_username or None,
                identity_token=_secret(self.artifactory_identity_token),
                repository=self.artifactory_repository or None,
            ),
            buildkite=BuildkiteConfig(
                org_slug=self.buildkite_org_slug or None,
                registry_slug=self.buildkite_registry_slug or None,
                auth_method=auth_method,
                api_token=_secret(self.buildkite_api_token),
                fallback_tag=self.buildkite_fallback_tag,
            ),
        )


def _parse_enum(enum_cls: Any, value: str, parameter: str) -> Any:
    """Return enum_cls(value) or raise ConfigurationException listing valid values."""
    if not value:
        raise ConfigurationException(
            f"{parameter} is required. Supported: {', '.join(enum_cls.values())}",
            parameter=parameter,
        )
    try:
        return enum_cls(value.strip().lower())
    except ValueError as e:
        raise ConfigurationException(
            f"Invalid {parameter} {value!r}. Supported: {', '.join(enum_cls.values())}",
            parameter=parameter,
        ) from e


def _secret(value: SecretStr | None) -> str | None:
    if value is None:
        return None
    return value.get_secret_value() or None


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded Settings instance.
    """
    return Settings()
