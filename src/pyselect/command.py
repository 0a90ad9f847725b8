"""
the "select python interpreter" command.

ties root resolution, discovery, selection and activation together and turns
every failure path into a user message.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import final

from .activation import activate, resolve_project_root
from .collaborators import LanguageServerNotifier, MessageSink, Picker, ProjectRootProvider
from .config import Config
from .environment import SEARCH_PATH_VAR, EnvironmentSink
from .errors import NoInterpretersFoundError
from .models import ActivationResult, MessageLevel
from .paths import CURRENT, Platform
from .selector import merge_and_select
from .system_scanner import find_system_interpreters
from .venv_scanner import find_venv_interpreter

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "No Python interpreter selected"


class SelectionOutcome(Enum):
    """terminal state of a select command run."""

    SELECTED = "selected"
    CANCELLED = "cancelled"
    NOT_FOUND = "not_found"


@final
@dataclass(frozen=True)
class CommandResult:
    outcome: SelectionOutcome
    activation: ActivationResult | None = None


@final
@dataclass(frozen=True)
class Discovery:
    """
    raw results of both scans.

    attributes:
        `root: str`
            directory that was scanned for venvs
        `venv: str | None`
            interpreter of the first venv found below root
        `system: list[str]`
            interpreters found on the search path
    """

    root: str
    venv: str | None
    system: list[str] = field(default_factory=list)


async def discover(
    root: str,
    *,
    config: Config,
    search_path: str | None,
    platform: Platform = CURRENT,
) -> Discovery:
    """
    run the venv scan and the search path scan.

    with `config.scan.concurrent` both run on worker threads at the same
    time; the result is the same as running them one after the other.

    arguments:
        `root: str`
            project root to scan for venvs
        `config: Config`
            scan settings
        `search_path: str | None`
            search path value to scan
        `platform: Platform`
            platform whose conventions apply

    returns: `Discovery`
        results of both scans
    """
    scan = config.scan

    def scan_venv() -> str | None:
        return find_venv_interpreter(
            root,
            max_depth=scan.max_depth,
            follow_symlinks=scan.follow_symlinks,
            sort_entries=scan.sort_entries,
        )

    def scan_system() -> list[str]:
        return find_system_interpreters(search_path, platform=platform)

    if scan.concurrent:
        venv, system = await asyncio.gather(
            asyncio.to_thread(scan_venv),
            asyncio.to_thread(scan_system),
        )
    else:
        venv = scan_venv()
        system = scan_system()

    logger.debug("discovered venv=%s system=%s under %s", venv, system, root)
    return Discovery(root=root, venv=venv, system=system)


async def run_select_command(
    *,
    root_provider: ProjectRootProvider,
    picker: Picker,
    notifier: LanguageServerNotifier,
    messages: MessageSink,
    environment: EnvironmentSink,
    config: Config | None = None,
    platform: Platform = CURRENT,
) -> CommandResult:
    """
    discover interpreters, let the user pick one and activate it.

    nothing is written to the environment unless the user picks an
    interpreter.

    arguments:
        `root_provider: ProjectRootProvider`
            source of the project root
        `picker: Picker`
            interactive picker
        `notifier: LanguageServerNotifier`
            language server to point at the interpreter
        `messages: MessageSink`
            where user messages go
        `environment: EnvironmentSink`
            environment variable table read for the search path and written
            on activation
        `config: Config | None`
            settings (default: loaded for the resolved project root)
        `platform: Platform`
            platform whose conventions apply

    returns: `CommandResult`
        outcome and, when selected, the activation state
    """
    root = resolve_project_root(root_provider)
    if config is None:
        config = Config.load(root)

    found = await discover(
        root,
        config=config,
        search_path=environment.get(SEARCH_PATH_VAR) or "",
        platform=platform,
    )

    try:
        selected = await merge_and_select(found.venv, found.system, picker, prompt=config.prompt)
    except NoInterpretersFoundError as e:
        messages.show(str(e), MessageLevel.ERROR)
        return CommandResult(SelectionOutcome.NOT_FOUND)

    if selected is None:
        messages.show(CANCELLED_MESSAGE, MessageLevel.WARNING)
        return CommandResult(SelectionOutcome.CANCELLED)

    result = activate(
        selected,
        environment=environment,
        notifier=notifier,
        messages=messages,
        platform=platform,
        default_interpreter_var=config.default_interpreter_var,
    )
    return CommandResult(SelectionOutcome.SELECTED, result)
