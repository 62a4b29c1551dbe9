"""Logging configuration for docker cache.

CI logs show four severities: INFO, SUCCESS, WARNING and ERROR. Records
below ERROR go to stdout; ERROR and above go to stderr.
"""

import logging
import sys

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_CI_FORMAT = "[%(levelname)s]: %(message)s"
_VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _BelowLevelFilter(logging.Filter):
    """Pass only records strictly below a level."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(verbose: bool = False) -> None:
    """Configure process-wide logging for a cache run.

    Level is DEBUG when verbose is True, otherwise INFO. Verbose output also
    carries timestamps and logger names.

    Args:
        verbose: Value of the plugin's verbose option.
    """
    fmt = logging.Formatter(_VERBOSE_FORMAT if verbose else _CI_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_BelowLevelFilter(logging.ERROR))
    stdout_handler.setFormatter(fmt)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(fmt)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log msg at the SUCCESS level."""
    logger.log(SUCCESS, msg, *args)
