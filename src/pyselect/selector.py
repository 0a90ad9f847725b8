"""
merging of discovery results and delegation to the picker.
"""

from __future__ import annotations

from collections.abc import Sequence

from .collaborators import Picker
from .errors import NoInterpretersFoundError
from .models import Interpreter, InterpreterKind

DEFAULT_PROMPT = "Select Python interpreter:"


def merge_interpreters(venv: str | None, system: Sequence[str]) -> list[Interpreter]:
    """
    combine the venv and system scan results into one ordered list.

    the venv interpreter (if any) comes first, followed by the system
    interpreters in scanner order. the first occurrence of a path wins.

    arguments:
        `venv: str | None`
            interpreter found by the venv scanner
        `system: Sequence[str]`
            interpreters found on the search path

    returns: `list[Interpreter]`
        merged candidates
    """
    combined: list[Interpreter] = []
    seen: set[str] = set()

    if venv is not None:
        combined.append(Interpreter(venv, InterpreterKind.VENV))
        seen.add(venv)

    for path in system:
        if path in seen:
            continue
        combined.append(Interpreter(path, InterpreterKind.SYSTEM))
        seen.add(path)

    return combined


async def merge_and_select(
    venv: str | None,
    system: Sequence[str],
    picker: Picker,
    *,
    prompt: str = DEFAULT_PROMPT,
) -> Interpreter | None:
    """
    merge discovery results and let the user pick one.

    arguments:
        `venv: str | None`
            interpreter found by the venv scanner
        `system: Sequence[str]`
            interpreters found on the search path
        `picker: Picker`
            interactive picker
        `prompt: str`
            prompt shown by the picker

    returns: `Interpreter | None`
        the picked interpreter, none if the user cancelled

    raises:
        `NoInterpretersFoundError`
            both scans came back empty; the picker is not invoked
    """
    candidates = merge_interpreters(venv, system)
    if not candidates:
        raise NoInterpretersFoundError()

    return await picker.pick(candidates, prompt)
