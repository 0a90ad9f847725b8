"""
language server protocol surface for pyselect.

exposes the `pyselect.selectInterpreter` command to editors. the picker is
a `window/showMessageRequest`, user messages are `window/showMessage`
notifications, and the selected interpreter is relayed to the editor so it
can reconfigure its python language server.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Any, Final, final

from lsprotocol import types
from pygls.lsp.server import LanguageServer
from typing_extensions import override

from .collaborators import LoggingMessageSink
from .command import CommandResult, run_select_command
from .config import Config
from .environment import MappingEnvironment
from .lsp_notifier import with_python_path
from .models import Interpreter, MessageLevel

logger = logging.getLogger(__name__)

SELECT_INTERPRETER_COMMAND: Final[str] = "pyselect.selectInterpreter"
DID_CHANGE_CONFIGURATION_NOTIFICATION: Final[str] = "pyselect/didChangeConfiguration"

_MESSAGE_TYPES: Final[dict[MessageLevel, types.MessageType]] = {
    MessageLevel.ERROR: types.MessageType.Error,
    MessageLevel.WARNING: types.MessageType.Warning,
    MessageLevel.INFO: types.MessageType.Info,
}


@final
class WorkspaceRootProvider:
    """project root taken from the editor's workspace."""

    def __init__(self, server: LanguageServer) -> None:
        self.server = server

    def project_root(self) -> str | None:
        try:
            root = self.server.workspace.root_path
        except RuntimeError:
            # workspace does not exist before initialize
            return None
        return root or None


@final
class MessageRequestPicker:
    """
    picker backed by `window/showMessageRequest`.

    each candidate becomes one action; dismissing the request cancels.
    """

    def __init__(self, server: LanguageServer) -> None:
        self.server = server

    async def pick(self, candidates: Sequence[Interpreter], prompt: str) -> Interpreter | None:
        by_title = {candidate.display(): candidate for candidate in candidates}
        response = await self.server.window_show_message_request_async(
            types.ShowMessageRequestParams(
                type=types.MessageType.Info,
                message=prompt,
                actions=[types.MessageActionItem(title=title) for title in by_title],
            )
        )
        if response is None:
            return None
        return by_title.get(response.title)


@final
class ShowMessageSink(LoggingMessageSink):
    """message sink backed by `window/showMessage`, also logged server-side."""

    def __init__(self, server: LanguageServer) -> None:
        self.server = server

    @override
    def show(self, message: str, level: MessageLevel) -> None:
        super().show(message, level)
        self.server.window_show_message(
            types.ShowMessageParams(type=_MESSAGE_TYPES[level], message=message)
        )


@final
class EditorRelayNotifier:
    """
    notifier asking the editor to reconfigure a named language server.

    sends `pyselect/didChangeConfiguration` with the target server name and
    the settings object; editors without a matching server ignore it.
    """

    def __init__(self, server: LanguageServer, server_name: str) -> None:
        self.server = server
        self.server_name = server_name

    def notify_interpreter(self, python_path: str) -> None:
        self.server.protocol.notify(
            DID_CHANGE_CONFIGURATION_NOTIFICATION,
            {
                "server": self.server_name,
                "settings": with_python_path({}, python_path),
            },
        )


def result_payload(result: CommandResult) -> dict[str, Any]:
    """
    convert a command result into a json-compatible command response.

    arguments:
        `result: CommandResult`
            outcome of the select command

    returns: `dict[str, Any]`
        response returned from `workspace/executeCommand`
    """
    payload: dict[str, Any] = {"outcome": result.outcome.value}
    if result.activation is not None:
        payload["interpreter"] = result.activation.interpreter.to_dict()
        payload["venv_root"] = result.activation.venv_root
    return payload


@final
class PySelectLanguageServer(LanguageServer):
    """
    lsp server exposing interpreter selection.

    attributes:
        `config: Config | None`
            configuration settings (none: load for the workspace root)
        `environment: MappingEnvironment`
            environment written on activation (the server process' own)
    """

    config: Config | None
    environment: MappingEnvironment

    def __init__(
        self,
        config: Config | None = None,
        environment: MappingEnvironment | None = None,
    ) -> None:
        super().__init__("pyselect", "0.1.0")  # pyright: ignore[reportUnknownMemberType]

        self.config = config
        self.environment = environment or MappingEnvironment()

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register lsp command handlers."""

        @self.command(SELECT_INTERPRETER_COMMAND)
        async def on_select_interpreter(*args: Any) -> dict[str, Any]:
            """Handle the select interpreter command."""
            _ = args  # the command takes no arguments
            return await self.select_interpreter()

        _ = on_select_interpreter  # registered via decorator

    async def select_interpreter(self) -> dict[str, Any]:
        """
        run the select command against the connected editor.

        failures are reported to the editor as messages and never escape
        the command.

        returns: `dict[str, Any]`
            command response payload
        """
        messages = ShowMessageSink(self)
        root_provider = WorkspaceRootProvider(self)

        try:
            config = self.config or Config.load(root_provider.project_root() or os.getcwd())
            result = await run_select_command(
                root_provider=root_provider,
                picker=MessageRequestPicker(self),
                notifier=EditorRelayNotifier(self, config.lsp.server_name),
                messages=messages,
                environment=self.environment,
                config=config,
            )
        except Exception as e:
            logger.exception("interpreter selection failed")
            messages.show(f"Python interpreter selection failed: {e}", MessageLevel.ERROR)
            return {"outcome": "error", "error": str(e)}

        payload = result_payload(result)
        logger.debug("selection result: %s", payload)
        return payload


def create_server(config: Config | None = None) -> PySelectLanguageServer:
    """
    create and configure the lsp server.

    arguments:
        `config: Config | None`
            configuration settings

    returns: `PySelectLanguageServer`
        configured lsp server
    """
    return PySelectLanguageServer(config)


def run_server_stdio(config: Config | None = None) -> None:
    """
    run the lsp server over stdio.

    arguments:
        `config: Config | None`
            configuration settings
    """
    server = create_server(config)
    server.start_io()


def run_server_tcp(host: str = "127.0.0.1", port: int = 2087, config: Config | None = None) -> None:
    """
    run the lsp server over tcp.

    arguments:
        `host: str`
            host address to bind
        `port: int`
            port to listen on
        `config: Config | None`
            configuration settings
    """
    server = create_server(config)
    server.start_tcp(host, port)
