"""Domain enumerations for docker cache.

Enums represent the fixed sets of values accepted in configuration.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ProviderType(_ValuesMixin, str, Enum):
    """Registry backend that stores cache images. Exactly one is active per run."""

    ECR = "ecr"
    ACR = "acr"
    GAR = "gar"
    ARTIFACTORY = "artifactory"
    BUILDKITE = "buildkite"


class CacheStrategy(_ValuesMixin, str, Enum):
    """How a cached image is reused.

    ARTIFACT reuses the whole image or nothing. BUILD only primes layer cache.
    HYBRID tries the whole image first and degrades to layer cache.
    """

    ARTIFACT = "artifact"
    BUILD = "build"
    HYBRID = "hybrid"


class BuildkiteAuthMethod(_ValuesMixin, str, Enum):
    """Authentication flow for Buildkite Packages."""

    API_TOKEN = "api-token"
    OIDC = "oidc"
