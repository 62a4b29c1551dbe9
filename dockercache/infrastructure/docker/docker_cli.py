"""Container engine backed by the docker CLI.

Probes (image inspect, manifest inspect) capture output and only report
True/False. Pull, push and build stream their output to the CI log.
"""

from __future__ import annotations

from dockercache.domain.entities import BuildRequest
from dockercache.infrastructure.process import CommandRunner
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class DockerCLI:
    """IContainerEngine over `docker`."""

    def __init__(self, runner: CommandRunner | None = None, binary: str = "docker") -> None:
        self._runner = runner or CommandRunner()
        self._binary = binary

    def image_exists_locally(self, image_ref: str) -> bool:
        return self._runner.run([self._binary, "image", "inspect", image_ref]).ok

    def manifest_exists(self, image_ref: str) -> bool:
        logger.debug("Checking if image exists in registry: %s", image_ref)
        return self._runner.run([self._binary, "manifest", "inspect", image_ref]).ok

    def pull(self, image_ref: str) -> None:
        self._runner.run_checked([self._binary, "pull", image_ref], capture=False)

    def push(self, image_ref: str) -> None:
        self._runner.run_checked([self._binary, "push", image_ref], capture=False)

    def tag(self, source_ref: str, target_ref: str) -> None:
        self._runner.run_checked([self._binary, "tag", source_ref, target_ref])

    def login(self, registry: str, username: str, password: str) -> None:
        self._runner.run_checked(
            [self._binary, "login", registry, "--username", username, "--password-stdin"],
            input=password,
        )

    def build(self, request: BuildRequest) -> None:
        self._runner.run_checked(
            self.build_args(request),
            input=request.dockerfile_content,
            capture=False,
        )

    def build_args(self, request: BuildRequest) -> list[str]:
        """Assemble the `docker build` argument list for request."""
        args = [self._binary, "build"]
        if request.dockerfile_content is not None:
            args += ["--file", "-"]
        else:
            args += ["--file", request.dockerfile]
        if request.target:
            args += ["--target", request.target]
        for build_arg in request.build_args:
            args += ["--build-arg", build_arg]
        for secret in request.secrets:
            args += ["--secret", secret]
        if request.cache_from:
            args += ["--cache-from", request.cache_from]
        args += list(request.extra_args)
        args += ["--tag", request.tag, request.context]
        return args
