"""Build request passed to the container engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BuildRequest:
    """Arguments for one image build.

    dockerfile_content, when set, is sent on stdin instead of reading
    dockerfile from disk. extra_args are already shell-split.
    """

    tag: str
    context: str
    dockerfile: str
    dockerfile_content: str | None = None
    target: str | None = None
    build_args: tuple[str, ...] = ()
    secrets: tuple[str, ...] = ()
    cache_from: str | None = None
    extra_args: tuple[str, ...] = ()
