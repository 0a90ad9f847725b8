"""
models for pyselect.
"""

from __future__ import annotations

import ntpath
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import final


class InterpreterKind(Enum):
    """
    where an interpreter was discovered.
    """

    VENV = "venv"
    SYSTEM = "system"


class MessageLevel(Enum):
    """
    severity of a user-visible message.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@final
@dataclass(frozen=True)
class Interpreter:
    """
    a discovered python interpreter.

    two interpreters are equal when their paths are equal, regardless of kind.

    attributes:
        `path: str`
            absolute path to the interpreter executable
        `kind: InterpreterKind`
            whether it came from a project venv or the system search path
    """

    path: str
    kind: InterpreterKind = field(compare=False)

    @property
    def name(self) -> str:
        """basename of the executable, for either path flavour."""
        return ntpath.basename(posixpath.basename(self.path))

    @property
    def is_venv(self) -> bool:
        return self.kind is InterpreterKind.VENV

    def display(self) -> str:
        """
        format the interpreter for a picker.

        returns: `str`
            e.g. "python (venv) — /proj/.venv/bin/python"
        """
        name = self.name
        if self.is_venv:
            name = f"{name} (venv)"
        return f"{name} — {self.path}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "kind": self.kind.value}


@final
@dataclass(frozen=True)
class ActivationResult:
    """
    the environment state written by an activation.

    attributes:
        `interpreter: Interpreter`
            the activated interpreter
        `venv_root: str | None`
            virtual environment root, none for system interpreters
        `search_path: str | None`
            value of the search path variable after activation
    """

    interpreter: Interpreter
    venv_root: str | None
    search_path: str | None
