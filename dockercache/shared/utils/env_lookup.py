"""Allow-listed environment lookup for credential values.

A configuration value written as '$NAME' is dereferenced only when NAME is
in the allow list (exact names or name prefixes). Any other value, including
a '$NAME' reference outside the list, is used literally. This keeps pipeline
configuration from reading arbitrary variables out of the agent environment.
"""

import os
import re
from collections.abc import Callable, Iterable

EnvLookup = Callable[[str], str | None]

_REFERENCE_RE = re.compile(r"^\$\{?([A-Za-z_][A-Za-z0-9_]*)\}?$")


class AllowListedEnvLookup:
    """Resolve '$NAME' references against a closed set of variable names."""

    def __init__(
        self,
        names: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        source: EnvLookup | None = None,
    ) -> None:
        """Initialize the lookup.

        Args:
            names: Exact variable names that may be read.
            prefixes: Variable name prefixes that may be read.
            source: Underlying lookup; defaults to os.environ.get.
        """
        self._names = frozenset(names)
        self._prefixes = tuple(prefixes)
        self._source = source or os.environ.get

    def is_allowed(self, name: str) -> bool:
        """Return True if name may be read."""
        return name in self._names or any(
            name.startswith(prefix) for prefix in self._prefixes
        )

    def __call__(self, name: str) -> str | None:
        """Return the variable's value, or None if unset or not allowed."""
        if not self.is_allowed(name):
            return None
        return self._source(name)

    def resolve(self, raw: str | None) -> str:
        """Expand raw if it is an allowed '$NAME' reference, else return it as is.

        Args:
            raw: Configured value (literal or '$NAME' / '${NAME}').

        Returns:
            The referenced variable's value ('' when unset), or raw unchanged.
        """
        if not raw:
            return ""
        match = _REFERENCE_RE.match(raw)
        if match and self.is_allowed(match.group(1)):
            return self(match.group(1)) or ""
        return raw
