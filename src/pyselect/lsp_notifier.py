"""
language client notifier.

keeps track of running language clients by server name and pushes the
selected interpreter to one of them through
`workspace/didChangeConfiguration`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, final

from lsprotocol import types

logger = logging.getLogger(__name__)


class ConfigurationClient(Protocol):
    """
    the part of a language client pyselect needs.

    `pygls.lsp.client.LanguageClient` satisfies this protocol.
    """

    def workspace_did_change_configuration(
        self, params: types.DidChangeConfigurationParams
    ) -> None: ...


@final
@dataclass
class RegisteredClient:
    """
    a running language client and the settings it was configured with.

    attributes:
        `name: str`
            server name, e.g. "pyright"
        `client: ConfigurationClient`
            connection to the server
        `settings: dict[str, Any]`
            settings last sent to the server
    """

    name: str
    client: ConfigurationClient
    settings: dict[str, Any] = field(default_factory=dict)


@final
class ClientRegistry:
    """running language clients keyed by server name."""

    _clients: dict[str, RegisteredClient]

    def __init__(self) -> None:
        self._clients = {}

    def register(
        self,
        name: str,
        client: ConfigurationClient,
        settings: dict[str, Any] | None = None,
    ) -> RegisteredClient:
        entry = RegisteredClient(name=name, client=client, settings=settings or {})
        self._clients[name] = entry
        return entry

    def unregister(self, name: str) -> None:
        _ = self._clients.pop(name, None)

    def get(self, name: str) -> RegisteredClient | None:
        return self._clients.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._clients

    def __len__(self) -> int:
        return len(self._clients)


def with_python_path(settings: dict[str, Any], python_path: str) -> dict[str, Any]:
    """
    return a copy of a settings object with `python.pythonPath` set.

    other keys, including other entries of the `python` section, are kept.

    arguments:
        `settings: dict[str, Any]`
            current settings
        `python_path: str`
            interpreter path to set

    returns: `dict[str, Any]`
        updated settings
    """
    updated = copy.deepcopy(settings)
    python_section = updated.get("python")
    if not isinstance(python_section, dict):
        python_section = {}
        updated["python"] = python_section
    python_section["pythonPath"] = python_path
    return updated


@final
class ClientNotifier:
    """
    notifier that reconfigures a named language server.

    attributes:
        `registry: ClientRegistry`
            running clients
        `server_name: str`
            name of the server to notify
    """

    registry: ClientRegistry
    server_name: str

    def __init__(self, registry: ClientRegistry, server_name: str = "pyright") -> None:
        self.registry = registry
        self.server_name = server_name

    def notify_interpreter(self, python_path: str) -> None:
        """
        send the new interpreter path to the server, if it is running.

        arguments:
            `python_path: str`
                interpreter path
        """
        entry = self.registry.get(self.server_name)
        if entry is None:
            logger.debug("language server %s is not running, not notifying", self.server_name)
            return

        entry.settings = with_python_path(entry.settings, python_path)
        entry.client.workspace_did_change_configuration(
            types.DidChangeConfigurationParams(settings=entry.settings)
        )
        logger.debug("sent pythonPath=%s to %s", python_path, self.server_name)
