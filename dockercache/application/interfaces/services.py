"""Service interfaces (ports) for the application layer.

Protocols define the contracts the strategy engine and the run use case
depend on (DIP). Implementations live in the infrastructure layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dockercache.domain.entities import BuildRequest, CacheConfig, ProviderIdentity
    from dockercache.domain.enums import ProviderType


class IContainerEngine(Protocol):
    """Container build tool capabilities (local image store + registry transfer).

    Existence checks return bool and never raise for a missing image.
    Mutating operations raise ContainerEngineException on failure.
    """

    def image_exists_locally(self, image_ref: str) -> bool:
        """Return True if image_ref resolves in the local image store."""

    def manifest_exists(self, image_ref: str) -> bool:
        """Return True if the registry has a manifest for image_ref."""

    def pull(self, image_ref: str) -> None:
        """Pull image_ref into the local store."""

    def push(self, image_ref: str) -> None:
        """Push image_ref to its registry."""

    def tag(self, source_ref: str, target_ref: str) -> None:
        """Add target_ref as a local tag of source_ref."""

    def build(self, request: BuildRequest) -> None:
        """Build an image and tag it as request.tag."""

    def login(self, registry: str, username: str, password: str) -> None:
        """Store registry credentials in the engine's credential store."""


class IRegistryProvider(Protocol):
    """One registry backend: authentication and cache image naming."""

    provider_type: ProviderType
    display_name: str

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Validate parameters, resolve defaults, and log in.

        Raises ConfigurationException or AuthenticationException; both are fatal.
        """

    def compute_cache_image_name(
        self, config: CacheConfig, identity: ProviderIdentity, tag_suffix: str
    ) -> str:
        """Return 'registry/namespace/image:tag_suffix' (pure)."""

    def fallback_tag(self, config: CacheConfig) -> str:
        """Tag used for the layer-cache fallback reference."""

    def ensure_repository(
        self, config: CacheConfig, identity: ProviderIdentity
    ) -> None:
        """Make sure the remote repository exists before pushing."""
