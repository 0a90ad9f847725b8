"""
interfaces for the host collaborators pyselect depends on.

the editor (or terminal) supplies concrete implementations: where the project
root is, how the user picks an interpreter, how a language server is told
about it, and how messages reach the user.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, final

from .models import Interpreter, MessageLevel

logger = logging.getLogger("pyselect")


class ProjectRootProvider(Protocol):
    """root directory of the active language-analysis session, if any."""

    def project_root(self) -> str | None: ...


class Picker(Protocol):
    """lets the user choose one interpreter, or none to cancel."""

    async def pick(self, candidates: Sequence[Interpreter], prompt: str) -> Interpreter | None: ...


class LanguageServerNotifier(Protocol):
    """tells a language server which interpreter to analyse with."""

    def notify_interpreter(self, python_path: str) -> None: ...


class MessageSink(Protocol):
    """shows a message to the user."""

    def show(self, message: str, level: MessageLevel) -> None: ...


@final
class StaticRootProvider:
    """
    root provider returning a fixed directory.

    attributes:
        `root: str | None`
            directory to report, none to defer to the working directory
    """

    root: str | None

    def __init__(self, root: str | None = None) -> None:
        self.root = root

    def project_root(self) -> str | None:
        return self.root


@final
class FirstCandidatePicker:
    """picker used when no interactive ui is available: takes the first candidate."""

    async def pick(self, candidates: Sequence[Interpreter], prompt: str) -> Interpreter | None:
        _ = prompt
        return candidates[0] if candidates else None


@final
class NullNotifier:
    """notifier for hosts without a language server."""

    def notify_interpreter(self, python_path: str) -> None:
        logger.debug("no language server to notify about %s", python_path)


class LoggingMessageSink:
    """sends user messages to the `pyselect` logger at the matching level."""

    _levels: dict[MessageLevel, int] = {
        MessageLevel.ERROR: logging.ERROR,
        MessageLevel.WARNING: logging.WARNING,
        MessageLevel.INFO: logging.INFO,
    }

    def show(self, message: str, level: MessageLevel) -> None:
        logger.log(self._levels[level], message)
