"""Tests for logging setup (SUCCESS level, stdout/stderr split)."""

import logging
from collections.abc import Iterator

import pytest

from dockercache.shared.telemetry.logging import (
    SUCCESS,
    get_logger,
    log_success,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


def test_success_level_name() -> None:
    assert logging.getLevelName(SUCCESS) == "SUCCESS"


def test_info_and_success_go_to_stdout_errors_to_stderr(
    capsys: pytest.CaptureFixture[str],
) -> None:
    setup_logging()
    logger = get_logger("dockercache.test")
    logger.info("restoring")
    log_success(logger, "saved %s", "image")
    logger.error("failed")

    captured = capsys.readouterr()
    assert "[INFO]: restoring" in captured.out
    assert "[SUCCESS]: saved image" in captured.out
    assert "failed" not in captured.out
    assert "[ERROR]: failed" in captured.err


def test_verbose_enables_debug(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(verbose=True)
    get_logger("dockercache.test").debug("details")
    assert "details" in capsys.readouterr().out
    assert logging.getLogger().level == logging.DEBUG
