"""Infrastructure exceptions for external command execution.

Command errors extend DockerCacheException so the entry point maps them to
an exit code the same way as domain errors.
"""

from dockercache.domain.exceptions import ContainerEngineException, DockerCacheException


class CommandException(DockerCacheException):
    """Base exception for external command execution."""


class CommandNotFoundError(CommandException):
    """Required executable is not on PATH."""

    def __init__(self, command: str, install_hint: str | None = None) -> None:
        details: dict = {"command": command}
        if install_hint:
            details["hints"] = [install_hint]
        super().__init__(
            f"Required command not found: {command}",
            "COMMAND_NOT_FOUND",
            details,
        )


class CommandFailedError(CommandException, ContainerEngineException):
    """External command exited non-zero."""

    # Characters of stderr kept in details
    STDERR_TAIL = 2000

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        super().__init__(
            f"Command failed ({returncode}): {command}",
            "COMMAND_FAILED",
            {
                "command": command,
                "returncode": returncode,
                "stderr": stderr[-self.STDERR_TAIL:],
            },
        )
        self.returncode = returncode
        self.stderr = stderr
