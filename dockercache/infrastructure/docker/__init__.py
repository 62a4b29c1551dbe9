"""Docker CLI implementation of the container engine port."""

from dockercache.infrastructure.docker.docker_cli import DockerCLI

__all__ = ["DockerCLI"]
