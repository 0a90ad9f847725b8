"""
pyselect: python interpreter selection for editors.

finds the interpreter of a project's virtual environment and the python
interpreters on the system search path, lets the user pick one, and
activates it for the process environment and a python language server.
"""

from __future__ import annotations

from .activation import activate, resolve_project_root, venv_root_for
from .command import CommandResult, SelectionOutcome, run_select_command
from .config import Config, LspConfig, ScanConfig
from .errors import NoInterpretersFoundError, PySelectError
from .models import ActivationResult, Interpreter, InterpreterKind, MessageLevel
from .selector import merge_and_select, merge_interpreters
from .system_scanner import find_system_interpreters
from .venv_scanner import find_venv_interpreter

__version__ = "0.1.0"
__all__ = [
    "ActivationResult",
    "CommandResult",
    "Config",
    "Interpreter",
    "InterpreterKind",
    "LspConfig",
    "MessageLevel",
    "NoInterpretersFoundError",
    "PySelectError",
    "ScanConfig",
    "SelectionOutcome",
    "activate",
    "find_system_interpreters",
    "find_venv_interpreter",
    "merge_and_select",
    "merge_interpreters",
    "resolve_project_root",
    "run_select_command",
    "venv_root_for",
]
