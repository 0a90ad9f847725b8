"""
activation of a selected interpreter.

writes the virtual environment marker, the search path and the default
interpreter marker, then tells the language server and the user.
"""

from __future__ import annotations

import logging
import os

from .collaborators import LanguageServerNotifier, MessageSink, ProjectRootProvider
from .environment import SEARCH_PATH_VAR, VIRTUAL_ENV_VAR, EnvironmentSink
from .models import ActivationResult, Interpreter, MessageLevel
from .paths import CURRENT, Platform, prepend_search_path

logger = logging.getLogger(__name__)

DEFAULT_INTERPRETER_VAR = "PYTHON3_HOST_PROG"


def resolve_project_root(provider: ProjectRootProvider, cwd: str | None = None) -> str:
    """
    pick the directory to scan for virtual environments.

    arguments:
        `provider: ProjectRootProvider`
            reports the root of an active language-analysis session
        `cwd: str | None`
            fallback directory (default: the process working directory)

    returns: `str`
        the provider's root if it has one, the working directory otherwise
    """
    if root := provider.project_root():
        return root
    return cwd if cwd is not None else os.getcwd()


def venv_root_for(interpreter: Interpreter, platform: Platform = CURRENT) -> str | None:
    """
    compute the virtual environment root of an interpreter.

    the root is two levels above the executable (`<root>/bin/python`).

    returns: `str | None`
        venv root for venv interpreters, none for system interpreters
    """
    if not interpreter.is_venv:
        return None
    return str(platform.pure_path(interpreter.path).parent.parent)


def activation_message(result: ActivationResult) -> str:
    if result.venv_root is not None:
        return f"Venv python selected: {result.venv_root}"
    return f"System Python selected: {result.interpreter.path}"


def activate(
    selected: Interpreter,
    *,
    environment: EnvironmentSink,
    notifier: LanguageServerNotifier,
    messages: MessageSink,
    platform: Platform = CURRENT,
    default_interpreter_var: str = DEFAULT_INTERPRETER_VAR,
) -> ActivationResult:
    """
    make an interpreter the current one.

    steps, in order:
    1. compute the venv root (venv interpreters only)
    2. set `VIRTUAL_ENV` to it, or remove `VIRTUAL_ENV` for system ones
    3. prepend the venv's executable directory to `PATH` (venv only)
    4. record the interpreter in the default interpreter variable
    5. notify the language server
    6. tell the user what was selected

    arguments:
        `selected: Interpreter`
            interpreter picked by the user
        `environment: EnvironmentSink`
            environment variable table to update
        `notifier: LanguageServerNotifier`
            language server to point at the interpreter
        `messages: MessageSink`
            where the confirmation goes
        `platform: Platform`
            platform whose path conventions apply
        `default_interpreter_var: str`
            variable holding the editor's default interpreter

    returns: `ActivationResult`
        the resulting activation state
    """
    venv_root = venv_root_for(selected, platform)

    if venv_root is not None:
        environment.set(VIRTUAL_ENV_VAR, venv_root)
        # keep the interpreter's own layout: bin on posix venvs, Scripts on windows ones
        exe_dir = platform.pure_path(selected.path).parent
        venv_bin = str(platform.pure_path(venv_root).joinpath(exe_dir.name))
        environment.set(
            SEARCH_PATH_VAR,
            prepend_search_path(venv_bin, environment.get(SEARCH_PATH_VAR), platform),
        )
    else:
        environment.unset(VIRTUAL_ENV_VAR)

    environment.set(default_interpreter_var, selected.path)
    notifier.notify_interpreter(selected.path)

    result = ActivationResult(
        interpreter=selected,
        venv_root=venv_root,
        search_path=environment.get(SEARCH_PATH_VAR),
    )
    logger.debug("activated %s (venv root: %s)", selected.path, venv_root)
    messages.show(activation_message(result), MessageLevel.INFO)
    return result
