"""
environment sink used by the activation step.

activation never touches `os.environ` directly; it writes through an
`EnvironmentSink` so tests and the cli can use a private mapping instead.
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from typing import Final, Protocol, final

VIRTUAL_ENV_VAR: Final[str] = "VIRTUAL_ENV"
SEARCH_PATH_VAR: Final[str] = "PATH"


class EnvironmentSink(Protocol):
    """read and write access to an environment variable table."""

    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...

    def unset(self, name: str) -> None: ...


@final
class MappingEnvironment:
    """
    environment sink backed by a mutable mapping.

    attributes:
        `variables: MutableMapping[str, str]`
            the underlying table (default: `os.environ`)
    """

    variables: MutableMapping[str, str]

    def __init__(self, variables: MutableMapping[str, str] | None = None) -> None:
        self.variables = os.environ if variables is None else variables

    def get(self, name: str) -> str | None:
        return self.variables.get(name)

    def set(self, name: str, value: str) -> None:
        self.variables[name] = value

    def unset(self, name: str) -> None:
        _ = self.variables.pop(name, None)

    def snapshot(self) -> dict[str, str]:
        """copy of the current table."""
        return dict(self.variables)
