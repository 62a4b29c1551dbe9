"""Run-scoped cache entities: provider identity, image references, outcomes.

None of these are persisted. References are always recomputed from the
current CacheConfig and ProviderIdentity.
"""

from dataclasses import dataclass

from dockercache.core.constants import (
    ENV_CACHE_FROM,
    ENV_CACHE_HIT,
    ENV_CACHE_KEY,
    ENV_EXPORT_IMAGE,
    ENV_EXPORT_TAG,
    TAG_KEY_SEP,
)
from dockercache.domain.entities.config import CacheConfig
from dockercache.domain.enums import CacheStrategy


@dataclass(frozen=True)
class ProviderIdentity:
    """Resolved registry identity for one run (host plus repository path).

    Attributes:
        registry: Registry host (may include a path for Buildkite Packages).
        namespace: Repository path between registry and image; '' when none.
        region: Resolved region or location, where the backend has one.
        account_id: Resolved account id (ECR).
        project: Cloud project (GAR).
        repository: Remote repository name used by ensure_repository.
    """

    registry: str
    namespace: str = ""
    region: str | None = None
    account_id: str | None = None
    project: str | None = None
    repository: str | None = None


def keyed_tag(config: CacheConfig, cache_key: str) -> str:
    """Tag suffix that identifies a cache entry: '<tag>-<cache_key>'."""
    return f"{config.tag}{TAG_KEY_SEP}{cache_key}"


@dataclass(frozen=True)
class LocalImageReferences:
    """Local image store names for the current run.

    keyed is the canonical local tag ('image:cache-<key>'); a restore hit
    guarantees it exists. fallback is 'image:<tag>'.
    """

    keyed: str
    fallback: str

    @classmethod
    def for_run(cls, config: CacheConfig, cache_key: str) -> "LocalImageReferences":
        return cls(
            keyed=f"{config.image}:{keyed_tag(config, cache_key)}",
            fallback=f"{config.image}:{config.tag}",
        )


@dataclass(frozen=True)
class CacheOutcome:
    """Result of a restore attempt.

    hit=True means the keyed image was pulled and tagged locally.
    cache_from is a layer-cache hint for the build. error is set only when
    the restore failed in a way the strategy treats as fatal.
    """

    hit: bool = False
    cache_from: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class CacheRunResult:
    """Output record of a cache run, projected by the caller into env vars."""

    image_ref: str
    cache_key: str
    strategy: CacheStrategy
    export_env_variable: str
    cache_hit: bool = False
    cache_from: str | None = None
    build_skipped: bool = False
    save_error: str | None = None

    @property
    def image(self) -> str:
        """Image part of image_ref."""
        return self.image_ref.rpartition(":")[0]

    @property
    def tag(self) -> str:
        """Tag part of image_ref."""
        return self.image_ref.rpartition(":")[2]

    @property
    def exit_code(self) -> int:
        """0 unless the save step failed after the image was produced."""
        return 1 if self.save_error else 0

    def as_env(self) -> dict[str, str]:
        """Variables for downstream pipeline steps."""
        env = {
            self.export_env_variable: self.image_ref,
            ENV_EXPORT_IMAGE: self.image,
            ENV_EXPORT_TAG: self.tag,
            ENV_CACHE_HIT: "true" if self.cache_hit else "false",
            ENV_CACHE_KEY: self.cache_key,
        }
        if self.strategy in (CacheStrategy.BUILD, CacheStrategy.HYBRID):
            env[ENV_CACHE_FROM] = self.cache_from or ""
        return env
