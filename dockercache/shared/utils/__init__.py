"""Shared utilities: datetime and allow-listed environment lookup."""

from dockercache.shared.utils.datetime import utc_now
from dockercache.shared.utils.env_lookup import AllowListedEnvLookup, EnvLookup

__all__ = [
    "AllowListedEnvLookup",
    "EnvLookup",
    "utc_now",
]
