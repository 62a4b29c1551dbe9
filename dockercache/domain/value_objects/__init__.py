"""Domain value objects (image name, tag, registry identifiers)."""

from dockercache.domain.value_objects.core import (
    AcrRegistryName,
    AwsAccountId,
    AwsRegion,
    GcpProjectId,
    ImageName,
    ImageTag,
    RegistryHost,
)

__all__ = [
    "AcrRegistryName",
    "AwsAccountId",
    "AwsRegion",
    "GcpProjectId",
    "ImageName",
    "ImageTag",
    "RegistryHost",
]
