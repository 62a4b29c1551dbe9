"""Blocking external command execution (docker, az, gcloud, buildkite-agent).

No timeouts are imposed here; the CI runner's step timeout applies.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

from dockercache.infrastructure.exceptions import (
    CommandFailedError,
    CommandNotFoundError,
)
from dockercache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of one command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return shlex.join(self.args)


class CommandRunner:
    """Run commands with subprocess.

    capture=True collects stdout/stderr (for existence checks and token output);
    capture=False lets output stream to the CI log (build, pull, push).
    Secrets are passed through input (stdin), never as arguments.
    """

    def which(self, name: str) -> bool:
        """Return True if name is an executable on PATH."""
        return shutil.which(name) is not None

    def run(
        self,
        args: Sequence[str],
        *,
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """Run args and return the result without raising on non-zero exit.

        Raises:
            CommandNotFoundError: Executable does not exist.
        """
        logger.debug("Running: %s", shlex.join(args))
        try:
            proc = subprocess.run(
                list(args),
                input=input,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
                text=True,
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(args[0]) from e
        return CommandResult(
            args=tuple(args),
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def run_checked(
        self,
        args: Sequence[str],
        *,
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """Run args and raise CommandFailedError on non-zero exit."""
        result = self.run(args, input=input, capture=capture)
        if not result.ok:
            raise CommandFailedError(
                result.command, result.returncode, result.stderr or result.stdout
            )
        return result
