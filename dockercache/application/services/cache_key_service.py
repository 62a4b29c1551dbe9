"""Cache key generation from build inputs.

Keys are SHA-1 hex digests (40 chars), compatible with keys produced by
`sha1sum` in earlier shell-based releases so existing cache images stay
valid. Identical inputs always give the identical key.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from pathlib import Path

from dockercache.core.constants import DEPENDENCY_MANIFESTS
from dockercache.domain.entities import CacheConfig
from dockercache.shared.telemetry.logging import get_logger
from dockercache.shared.utils.datetime import utc_date_stamp

logger = get_logger(__name__)


class HashAlgorithm(ABC):
    """Abstract hash algorithm (OCP)."""

    @abstractmethod
    def hash_bytes(self, data: bytes) -> str:
        """Compute hex digest of data."""
        ...

    def hash(self, data: str) -> str:
        return self.hash_bytes(data.encode())


class SHA1Algorithm(HashAlgorithm):
    """SHA-1 implementation (default; matches sha1sum)."""

    def hash_bytes(self, data: bytes) -> str:
        return hashlib.sha1(data).hexdigest()


class SHA256Algorithm(HashAlgorithm):
    """SHA-256 implementation."""

    def hash_bytes(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()


class CacheKeyService:
    """Derives the cache key for a run.

    Explicit key with '/': comma-separated file list; each existing file adds
    a sha1sum-style line '<digest>  <path>\\n' and the key is the digest of
    all lines. Explicit key without '/': digest of the literal string.
    No key: digest of Dockerfile digest + dependency manifest digests +
    commit. Nothing available: digest of the UTC date (YYYYMMDD).

    The digest is SHA-1 by default so keys match earlier sha1sum-based
    releases. Pass another HashAlgorithm (e.g. SHA256Algorithm()) to start a
    fresh key space; existing cache images will no longer match.
    """

    def __init__(
        self,
        algorithm: HashAlgorithm | None = None,
        base_dir: Path | str | None = None,
    ) -> None:
        self.algorithm = algorithm or SHA1Algorithm()
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def generate_cache_key(self, config: CacheConfig) -> str:
        """Return the cache key for config."""
        if config.cache_key:
            if "/" in config.cache_key:
                return self.key_from_files(config.cache_key.split(","))
            return self.algorithm.hash(config.cache_key)
        return self.key_from_build_inputs(config)

    def key_from_files(self, paths: list[str]) -> str:
        """Digest of per-file digest lines, in the given order."""
        lines: list[str] = []
        for raw in paths:
            path = raw.strip()
            if not path:
                continue
            file_path = self._resolve(path)
            if not file_path.is_file():
                logger.warning("Cache key file not found %s", path)
                continue
            lines.append(f"{self.file_digest(file_path)}  {path}\n")
        return self.algorithm.hash("".join(lines))

    def key_from_build_inputs(self, config: CacheConfig) -> str:
        """Digest of Dockerfile, dependency manifests and commit."""
        components: list[str] = []

        if config.dockerfile_inline:
            components.append(self.algorithm.hash(config.dockerfile_inline))
        else:
            dockerfile = self._resolve(config.dockerfile)
            if dockerfile.is_file():
                components.append(self.file_digest(dockerfile))

        for name in DEPENDENCY_MANIFESTS:
            manifest = self._resolve(name)
            if manifest.is_file():
                components.append(self.file_digest(manifest))

        if config.commit:
            components.append(config.commit)

        if components:
            return self.algorithm.hash("".join(components))

        logger.warning(
            "No cache key inputs found (Dockerfile, dependency files, commit); "
            "falling back to a date-based key"
        )
        return self.algorithm.hash(utc_date_stamp())

    def file_digest(self, path: Path) -> str:
        return self.algorithm.hash_bytes(path.read_bytes())

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.base_dir / p
