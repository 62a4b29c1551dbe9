"""Per-run cache configuration (immutable).

CacheConfig is built once at the start of a run (see
Settings.to_cache_config) and is read-only afterwards. Each provider reads
only its own nested section.
"""

from dataclasses import dataclass, field

from dockercache.core.constants import (
    DEFAULT_CACHE_TAG,
    DEFAULT_CONTEXT,
    DEFAULT_DOCKERFILE,
    DEFAULT_EXPORT_ENV_VARIABLE,
    DEFAULT_FALLBACK_TAG,
    DEFAULT_MAX_AGE_DAYS,
    GAR_DEFAULT_REGION,
)
from dockercache.domain.enums import BuildkiteAuthMethod, CacheStrategy, ProviderType


@dataclass(frozen=True)
class EcrConfig:
    """AWS ECR parameters. Unset region/account are auto-detected."""

    region: str | None = None
    account_id: str | None = None
    registry_url: str | None = None


@dataclass(frozen=True)
class AcrConfig:
    """Azure Container Registry parameters."""

    registry_name: str | None = None
    repository: str | None = None


@dataclass(frozen=True)
class GarConfig:
    """Google Artifact Registry / Container Registry parameters.

    region is either a short location ('us', 'eu') or a full Artifact
    Registry host ('europe-west10-docker.pkg.dev').
    """

    project: str | None = None
    region: str = GAR_DEFAULT_REGION
    repository: str | None = None


@dataclass(frozen=True)
class ArtifactoryConfig:
    """Artifactory parameters. Values may reference allow-listed env vars ($NAME)."""

    registry_url: str | None = None
    username: str | None = None
    identity_token: str | None = None
    repository: str | None = None


@dataclass(frozen=True)
class BuildkiteConfig:
    """Buildkite Packages parameters."""

    org_slug: str | None = None
    registry_slug: str | None = None
    auth_method: BuildkiteAuthMethod = BuildkiteAuthMethod.API_TOKEN
    api_token: str | None = None
    fallback_tag: str = DEFAULT_FALLBACK_TAG


@dataclass(frozen=True)
class CacheConfig:
    """Immutable configuration for one cache run.

    max_age_days is validated and carried but not used for eviction.
    """

    provider: ProviderType
    image: str
    strategy: CacheStrategy = CacheStrategy.HYBRID
    tag: str = DEFAULT_CACHE_TAG
    cache_key: str | None = None
    save: bool = True
    restore: bool = True
    dockerfile: str = DEFAULT_DOCKERFILE
    dockerfile_inline: str | None = None
    context: str = DEFAULT_CONTEXT
    target: str | None = None
    build_args: tuple[str, ...] = ()
    secrets: tuple[str, ...] = ()
    additional_build_args: str | None = None
    skip_pull_from_cache: bool = False
    export_env_variable: str = DEFAULT_EXPORT_ENV_VARIABLE
    max_age_days: int = DEFAULT_MAX_AGE_DAYS
    verbose: bool = False

    # Ambient CI values
    commit: str | None = None
    organization_slug: str | None = None

    ecr: EcrConfig = field(default_factory=EcrConfig)
    acr: AcrConfig = field(default_factory=AcrConfig)
    gar: GarConfig = field(default_factory=GarConfig)
    artifactory: ArtifactoryConfig = field(default_factory=ArtifactoryConfig)
    buildkite: BuildkiteConfig = field(default_factory=BuildkiteConfig)
