"""Domain exceptions for docker cache.

Every fatal condition of a cache run is one of these. The entry point maps
them to a logged reason, remediation hints, and a non-zero exit code.
Cache lookup misses are not exceptions; they drive the strategy fallbacks.
"""

from typing import Any


class DockerCacheException(Exception):
    """Base exception for all docker cache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. parameter, provider).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    @property
    def hints(self) -> list[str]:
        """Remediation guidance shown after the error message."""
        return list(self.details.get("hints", []))


class ConfigurationException(DockerCacheException):
    """Raised when a required parameter is missing or malformed.

    Always raised before any registry or network call that depends on it.
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        hints: list[str] | None = None,
    ) -> None:
        """Initialize with message, offending parameter, and optional hints.

        Args:
            message: Description of the configuration problem.
            parameter: Name of the offending parameter (e.g. 'ecr.account-id').
            hints: Remediation lines (expected format, where to set it).
        """
        details: dict[str, Any] = {}
        if parameter:
            details["parameter"] = parameter
        if hints:
            details["hints"] = hints
        super().__init__(message, "CONFIGURATION_ERROR", details)


class AuthenticationException(DockerCacheException):
    """Raised when logging in to a registry fails. Never retried automatically."""

    def __init__(
        self,
        provider: str,
        message: str = "Authentication failed",
        hints: list[str] | None = None,
    ) -> None:
        """Initialize with provider id, message, and optional hints.

        Args:
            provider: Provider id (e.g. 'ecr').
            message: Description of the authentication failure.
            hints: Remediation lines (required permission scopes etc.).
        """
        details: dict[str, Any] = {"provider": provider}
        if hints:
            details["hints"] = hints
        super().__init__(message, "AUTHENTICATION_ERROR", details)


class RepositoryException(DockerCacheException):
    """Raised when the remote repository cannot be found or created."""

    def __init__(self, repository: str, reason: str) -> None:
        super().__init__(
            f"Failed to ensure repository exists: {repository}",
            "REPOSITORY_ERROR",
            {"repository": repository, "reason": reason},
        )


class CacheRestoreException(DockerCacheException):
    """Raised when an artifact-strategy restore finds the image but cannot pull it."""

    def __init__(self, image_ref: str, reason: str) -> None:
        super().__init__(
            f"Failed to restore cache image: {image_ref}",
            "CACHE_RESTORE_ERROR",
            {"image_ref": image_ref, "reason": reason},
        )


class CacheSaveException(DockerCacheException):
    """Raised when the keyed cache image cannot be tagged or pushed."""

    def __init__(self, image_ref: str, reason: str) -> None:
        super().__init__(
            f"Failed to save cache image: {image_ref}",
            "CACHE_SAVE_ERROR",
            {"image_ref": image_ref, "reason": reason},
        )


class BuildException(DockerCacheException):
    """Raised when the image build fails. Always fatal."""

    def __init__(self, image_ref: str, reason: str) -> None:
        super().__init__(
            f"Failed to build image: {image_ref}",
            "BUILD_ERROR",
            {"image_ref": image_ref, "reason": reason},
        )


class ContainerEngineException(DockerCacheException):
    """A container engine operation (pull, push, tag, build, login) failed.

    Raised by IContainerEngine implementations; callers decide whether the
    failure is fatal for the current strategy.
    """
