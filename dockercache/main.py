"""Command-line entry point for the docker cache step.

Loads settings from the step environment, runs the cache workflow, and
writes the output variables for downstream steps. Any DockerCacheException
ends the step with exit code 1 after logging its reason and hints.
"""

from __future__ import annotations

import sys
from functools import partial
from pathlib import Path

from pydantic import ValidationError

from dockercache.application.services import CacheKeyService
from dockercache.application.use_cases import RunDockerCacheUseCase
from dockercache.core.config import get_settings
from dockercache.domain.entities import CacheConfig, CacheRunResult
from dockercache.domain.exceptions import DockerCacheException
from dockercache.infrastructure.docker import DockerCLI
from dockercache.infrastructure.process import CommandRunner
from dockercache.infrastructure.registries import RegistryProviderFactory
from dockercache.shared.telemetry.logging import get_logger, log_success, setup_logging

logger = get_logger(__name__)


def build_use_case(runner: CommandRunner | None = None) -> RunDockerCacheUseCase:
    """Wire the docker CLI engine, provider factory and key service."""
    runner = runner or CommandRunner()
    engine = DockerCLI(runner)
    factory = partial(
        RegistryProviderFactory.create_provider, engine=engine, runner=runner
    )
    return RunDockerCacheUseCase(engine, factory, CacheKeyService())


def run(config: CacheConfig) -> CacheRunResult:
    """Run the cache step for config with the default wiring."""
    logger.info("Docker cache: provider=%s strategy=%s image=%s",
                config.provider.value, config.strategy.value, config.image)
    return build_use_case().execute(config)


def write_outputs(env: dict[str, str], output_file: str | None) -> None:
    """Log env and append it as KEY=value lines to output_file when set."""
    for key, value in env.items():
        logger.info("Exported %s=%s", key, value)
    if not output_file:
        return
    path = Path(output_file)
    with path.open("a", encoding="utf-8") as f:
        for key, value in env.items():
            f.write(f"{key}={value}\n")
    logger.debug("Wrote %d variables to %s", len(env), path)


def report_error(exc: DockerCacheException) -> None:
    """Log exc and its remediation hints at ERROR level."""
    logger.error(exc.message)
    parameter = exc.details.get("parameter")
    if parameter:
        logger.error("Parameter: %s", parameter)
    reason = exc.details.get("reason") or exc.details.get("stderr")
    if reason:
        logger.error("Reason: %s", str(reason).strip())
    for hint in exc.hints:
        logger.error(hint)


def main() -> None:
    """Console script entry point (docker-cache)."""
    setup_logging()
    try:
        settings = get_settings()
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            logger.error("Invalid configuration %s: %s", location, error["msg"])
        sys.exit(1)

    setup_logging(settings.verbose)
    try:
        config = settings.to_cache_config()
        result = run(config)
    except DockerCacheException as e:
        report_error(e)
        sys.exit(1)

    try:
        write_outputs(result.as_env(), settings.output_file)
    except OSError as e:
        logger.error("Failed to write output file %s: %s", settings.output_file, e)
        sys.exit(1)

    if result.exit_code:
        logger.error("Docker cache step finished with errors: %s", result.save_error)
        sys.exit(result.exit_code)
    log_success(logger, "Docker cache step completed")


if __name__ == "__main__":
    main()
