"""
helpers for building fake interpreters, venvs and collaborators.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from pathlib import Path

import pytest
from typing_extensions import override

from pyselect.collaborators import LoggingMessageSink
from pyselect.models import Interpreter, MessageLevel


def make_file(path: Path, executable: bool = True) -> Path:
    """create a file, optionally with the executable bit set.

    arguments:
        `path: Path`
            file to create (parents are created too)
        `executable: bool`
            whether to mark the file executable

    returns: `Path`
        the created path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text("#!/bin/sh\n")
    path.chmod(0o755 if executable else 0o644)
    return path


def make_venv(root: Path, name: str = ".venv") -> Path:
    """create a posix-style venv below root and return its interpreter."""
    return make_file(root / name / "bin" / "python")


def search_path(*dirs: Path) -> str:
    return os.pathsep.join(str(d) for d in dirs)


class FakePicker:
    """picker returning a fixed choice and recording its calls."""

    def __init__(self, choice: int | None = 0) -> None:
        self.choice = choice
        self.calls: list[tuple[list[Interpreter], str]] = []

    async def pick(self, candidates: Sequence[Interpreter], prompt: str) -> Interpreter | None:
        self.calls.append((list(candidates), prompt))
        if self.choice is None:
            return None
        return candidates[self.choice]


class FakeNotifier:
    """language server notifier recording every interpreter path."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    def notify_interpreter(self, python_path: str) -> None:
        self.paths.append(python_path)


class RecordingMessageSink(LoggingMessageSink):
    """message sink that also keeps every message it was given, oldest first."""

    def __init__(self) -> None:
        self.messages: list[tuple[MessageLevel, str]] = []

    @override
    def show(self, message: str, level: MessageLevel) -> None:
        self.messages.append((level, message))
        super().show(message, level)


# filesystem tests rely on posix executable bits
requires_posix = pytest.mark.skipif(sys.platform == "win32", reason="posix permissions required")
