"""
exceptions raised by pyselect.
"""

from __future__ import annotations

NO_INTERPRETERS_MESSAGE = "No Python interpreters found in project venvs or system PATH"


class PySelectError(Exception):
    """base class for pyselect errors."""


class NoInterpretersFoundError(PySelectError):
    """neither the project venv scan nor the search path yielded an interpreter."""

    def __init__(self, message: str = NO_INTERPRETERS_MESSAGE) -> None:
        super().__init__(message)
