"""Shared telemetry: logging setup and the SUCCESS log level."""

from dockercache.shared.telemetry.logging import (
    SUCCESS,
    get_logger,
    log_success,
    setup_logging,
)

__all__ = [
    "SUCCESS",
    "get_logger",
    "log_success",
    "setup_logging",
]
