"""Domain value objects for docker cache.

Value objects are immutable types that validate themselves on construction.
Validation failures raise ValueError naming the violated rule; callers turn
them into ConfigurationException with the offending parameter.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

_IMAGE_SEPARATORS = "._/-"
_IMAGE_CHARS_RE = re.compile(r"^[a-z0-9._/-]+$")
_TAG_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")
_HOSTNAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9.-]*[a-zA-Z0-9]$")


@dataclass(frozen=True)
class ImageName:
    """Local image name (e.g. 'my-app', 'team/my-app').

    Lowercase alphanumerics and the separators '.', '_', '/', '-'. Separators
    may not lead, trail, or repeat. At most 255 characters.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 255

    def __post_init__(self) -> None:
        """Validate each rule in turn and report the first violation.

        Raises:
            ValueError: If any rule is violated.
        """
        if not self.value:
            raise ValueError("Image name must be a non-empty string")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Image name must not exceed {self.MAX_LENGTH} characters"
            )
        if not _IMAGE_CHARS_RE.match(self.value):
            raise ValueError(
                "Image name must contain only lowercase letters, digits, "
                "'.', '_', '/' and '-'"
            )
        if self.value[0] in _IMAGE_SEPARATORS:
            raise ValueError("Image name must not start with a separator")
        if self.value[-1] in _IMAGE_SEPARATORS:
            raise ValueError("Image name must not end with a separator")
        for prev, cur in zip(self.value, self.value[1:]):
            if prev in _IMAGE_SEPARATORS and cur in _IMAGE_SEPARATORS:
                raise ValueError(
                    "Image name must not contain consecutive separators"
                )


@dataclass(frozen=True)
class ImageTag:
    """Docker tag: up to 128 of [A-Za-z0-9_.-], not starting with '.' or '-'."""

    value: str

    def __post_init__(self) -> None:
        if not _TAG_RE.match(self.value):
            raise ValueError(
                "Tag must be 1-128 characters of letters, digits, '_', '.', '-' "
                "and must not start with '.' or '-'"
            )


@dataclass(frozen=True)
class RegistryHost:
    """Registry hostname with optional port (e.g. 'acme.jfrog.io').

    A leading http:// or https:// scheme is stripped. The host part must be
    3-253 characters and match the hostname grammar.
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 3
    MAX_LENGTH: ClassVar[int] = 253

    def __post_init__(self) -> None:
        host = self.strip_scheme(self.value).rstrip("/")
        object.__setattr__(self, "value", host)
        name, _, port = host.partition(":")
        if port and not port.isdigit():
            raise ValueError(f"Registry host {host!r} has an invalid port")
        if len(name) < self.MIN_LENGTH or len(name) > self.MAX_LENGTH:
            raise ValueError(
                f"Registry host {host!r} must be "
                f"{self.MIN_LENGTH}-{self.MAX_LENGTH} characters"
            )
        if not _HOSTNAME_RE.match(name):
            raise ValueError(f"Registry host {host!r} must be a valid hostname")

    @staticmethod
    def strip_scheme(url: str) -> str:
        """Remove a leading https:// or http:// from url."""
        for scheme in ("https://", "http://"):
            if url.startswith(scheme):
                return url[len(scheme):]
        return url


@dataclass(frozen=True)
class AwsAccountId:
    """AWS account id: exactly 12 digits."""

    value: str

    def __post_init__(self) -> None:
        if not re.fullmatch(r"\d{12}", self.value):
            raise ValueError("AWS account ID must be exactly 12 digits")


@dataclass(frozen=True)
class AwsRegion:
    """AWS region code (e.g. 'us-east-1', 'us-gov-west-1')."""

    value: str

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[a-z]{2}(-[a-z]+)+-\d+", self.value):
            raise ValueError(
                "AWS region must look like 'us-east-1' (lowercase, ends with a digit)"
            )


@dataclass(frozen=True)
class AcrRegistryName:
    """Azure Container Registry name: 5-50 alphanumeric characters."""

    value: str

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[a-zA-Z0-9]{5,50}", self.value):
            raise ValueError(
                "ACR registry name must be 5-50 alphanumeric characters"
            )


@dataclass(frozen=True)
class GcpProjectId:
    """Google Cloud project id, optionally domain-scoped ('example.com:my-proj')."""

    value: str

    def __post_init__(self) -> None:
        if not re.fullmatch(
            r"([a-z0-9.-]+:)?[a-z][a-z0-9-]{4,28}[a-z0-9]", self.value
        ):
            raise ValueError(
                "GCP project ID must be 6-30 characters of lowercase letters, "
                "digits and hyphens, starting with a letter"
            )
