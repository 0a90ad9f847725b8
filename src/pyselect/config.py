"""
configuration loading for pyselect.

this module handles loading of configuration from pyproject.toml,
.pyselect.toml, and environment variables.
"""

from __future__ import annotations

import logging
import os
import tomllib
from contextlib import suppress
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, TypeVar

from .activation import DEFAULT_INTERPRETER_VAR
from .selector import DEFAULT_PROMPT

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")

_Section = TypeVar("_Section", "ScanConfig", "LspConfig")


@dataclass
class ScanConfig:
    """
    discovery configuration settings.

    attributes:
        `max_depth: int | None`
            deepest directory level below the project root inspected for
            venvs (none for no limit)
        `follow_symlinks: bool`
            descend into symlinked directories while looking for venvs
        `sort_entries: bool`
            visit directories in name order instead of filesystem order
        `concurrent: bool`
            run the venv and search path scans on worker threads at once
    """

    max_depth: int | None = None
    follow_symlinks: bool = False
    sort_entries: bool = False
    concurrent: bool = True


@dataclass
class LspConfig:
    """
    language server settings.

    attributes:
        `server_name: str`
            name of the language server told about the selected interpreter
    """

    server_name: str = "pyright"


@dataclass
class Config:
    """
    main configuration class for pyselect.

    attributes:
        `project_root: Path`
            directory the configuration was loaded for
        `prompt: str`
            prompt shown by the interpreter picker
        `default_interpreter_var: str`
            environment variable recording the selected interpreter
        `scan: ScanConfig`
            discovery configuration
        `lsp: LspConfig`
            language server configuration
    """

    project_root: Path = field(default_factory=lambda: Path(".").resolve())
    prompt: str = DEFAULT_PROMPT
    default_interpreter_var: str = DEFAULT_INTERPRETER_VAR
    scan: ScanConfig = field(default_factory=ScanConfig)
    lsp: LspConfig = field(default_factory=LspConfig)

    def __post_init__(self) -> None:
        """Ensure project_root is a path object."""
        if isinstance(self.project_root, str):
            self.project_root = Path(self.project_root)

    @classmethod
    def from_pyproject_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from the [tool.pyselect] table of pyproject.toml.

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        project_path = Path(project_root)
        data = _read_toml(project_path.joinpath("pyproject.toml"))
        if data is None:
            return None

        tool_config = _table(_table(data, "tool"), "pyselect")
        if not tool_config:
            return None
        return cls._from_dict(tool_config, project_path)

    @classmethod
    def from_pyselect_toml(cls, project_root: str | Path) -> Config | None:
        """
        Load configuration from .pyselect.toml.

        returns: `Config | None`
            configuration object if found, none otherwise
        """
        project_path = Path(project_root)
        data = _read_toml(project_path.joinpath(".pyselect.toml"))
        if data is None:
            return None
        return cls._from_dict(data, project_path)

    @classmethod
    def from_environment(cls) -> Config:
        """
        Load configuration from environment variables.

        returns: `Config`
            configuration with values from environment
        """
        config = cls()

        if max_depth := os.environ.get("PYSELECT_MAX_DEPTH"):
            with suppress(ValueError):
                config.scan.max_depth = int(max_depth)

        if follow := os.environ.get("PYSELECT_FOLLOW_SYMLINKS"):
            config.scan.follow_symlinks = follow.lower() in _TRUTHY

        if sort_entries := os.environ.get("PYSELECT_SORT_ENTRIES"):
            config.scan.sort_entries = sort_entries.lower() in _TRUTHY

        if server_name := os.environ.get("PYSELECT_SERVER_NAME"):
            config.lsp.server_name = server_name

        if default_var := os.environ.get("PYSELECT_DEFAULT_INTERPRETER_VAR"):
            config.default_interpreter_var = default_var

        return config

    @classmethod
    def load(cls, project_root: str | Path = ".") -> Config:
        """
        Load configuration from all available sources.

        sources are loaded in order of priority (later overrides earlier):
        1. default values
        2. pyproject.toml
        3. .pyselect.toml
        4. environment variables

        arguments:
            `project_root: str | Path`
                project root directory

        returns: `Config`
            merged configuration from all sources
        """
        project_path = Path(project_root).resolve()
        config = cls(project_root=project_path)

        if pyproject_config := cls.from_pyproject_toml(project_path):
            config = config.merge(pyproject_config)

        if pyselect_config := cls.from_pyselect_toml(project_path):
            config = config.merge(pyselect_config)

        config = config.merge(cls.from_environment())
        config.project_root = project_path
        return config

    def merge(self, other: Config) -> Config:
        """
        merge another configuration into this one.

        values from 'other' take precedence where they differ from the
        defaults.

        arguments:
            `other: Config`
                configuration to merge

        returns: `Config`
            new merged configuration
        """
        return Config(
            project_root=other.project_root
            if other.project_root != Path(".").resolve()
            else self.project_root,
            prompt=other.prompt if other.prompt != DEFAULT_PROMPT else self.prompt,
            default_interpreter_var=other.default_interpreter_var
            if other.default_interpreter_var != DEFAULT_INTERPRETER_VAR
            else self.default_interpreter_var,
            scan=_merge_section(self.scan, other.scan),
            lsp=_merge_section(self.lsp, other.lsp),
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any], project_root: Path) -> Config:
        """
        Create configuration from a dictionary.

        arguments:
            `data: dict[str, Any]`
                configuration dictionary
            `project_root: Path`
                project root path

        returns: `Config`
            configuration object
        """
        config = cls(project_root=project_root)

        if "prompt" in data:
            config.prompt = str(data["prompt"])  # pyright: ignore[reportAny]
        if "default_interpreter_var" in data:
            config.default_interpreter_var = str(data["default_interpreter_var"])  # pyright: ignore[reportAny]

        scan_data = _table(data, "scan")
        if "max_depth" in scan_data:
            with suppress(ValueError, TypeError):
                config.scan.max_depth = int(scan_data["max_depth"])  # pyright: ignore[reportAny]
        config.scan.follow_symlinks = _as_bool(
            scan_data.get("follow_symlinks"), config.scan.follow_symlinks
        )
        config.scan.sort_entries = _as_bool(scan_data.get("sort_entries"), config.scan.sort_entries)
        config.scan.concurrent = _as_bool(scan_data.get("concurrent"), config.scan.concurrent)

        lsp_data = _table(data, "lsp")
        if isinstance(server_name := lsp_data.get("server_name"), str) and server_name:
            config.lsp.server_name = server_name

        return config


def _merge_section(base: _Section, other: _Section) -> _Section:
    """take each field of `other` that differs from its default, else keep `base`'s."""
    default = type(other)()
    changed = {
        f.name: getattr(other, f.name)
        for f in fields(other)
        if getattr(other, f.name) != getattr(default, f.name)
    }
    return replace(base, **changed)


def _table(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})  # pyright: ignore[reportAny]
    if not isinstance(section, dict):
        logger.debug("ignoring [%s]: expected a table, got %r", name, section)
        return {}
    return section  # pyright: ignore[reportUnknownVariableType]


def _as_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in _TRUTHY
    if value is not None:
        logger.debug("ignoring non-boolean config value %r", value)
    return default


def _read_toml(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("ignoring unreadable config file %s: %s", path, e)
        return None
