"""
platform-sensitive path utilities for pyselect.

the platform is detected once and exposed as a `Platform` value so that
scanners and the activation step never re-derive separators on their own.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Final, final


@final
@dataclass(frozen=True)
class Platform:
    """
    separators and layout conventions of a platform.

    attributes:
        `name: str`
            short platform name ("posix" or "windows")
        `path_separator: str`
            separator between path segments
        `list_separator: str`
            separator between entries of the search path variable
        `executable_suffix: str`
            suffix carried by executables ("" on posix)
        `scripts_dir: str`
            name of a venv's executable directory
    """

    name: str
    path_separator: str
    list_separator: str
    executable_suffix: str
    scripts_dir: str

    @property
    def is_windows(self) -> bool:
        return self.name == "windows"

    def pure_path(self, path: str) -> PurePath:
        """return a pure path object using this platform's path flavour."""
        if self.is_windows:
            return PureWindowsPath(path)
        return PurePosixPath(path)


POSIX: Final[Platform] = Platform(
    name="posix",
    path_separator="/",
    list_separator=":",
    executable_suffix="",
    scripts_dir="bin",
)

WINDOWS: Final[Platform] = Platform(
    name="windows",
    path_separator="\\",
    list_separator=";",
    executable_suffix=".exe",
    scripts_dir="Scripts",
)


def detect_platform() -> Platform:
    """
    detect the platform of the running interpreter.

    returns: `Platform`
        `WINDOWS` on win32, `POSIX` everywhere else
    """
    if sys.platform == "win32":
        return WINDOWS
    return POSIX


CURRENT: Final[Platform] = detect_platform()


def join_path(*parts: str, platform: Platform = CURRENT) -> str:
    """
    join path segments with the platform's path separator.

    trailing separators on a segment are not doubled.

    arguments:
        `*parts: str`
            path segments, the first one may be absolute
        `platform: Platform`
            platform whose separator is used

    returns: `str`
        joined path
    """
    sep = platform.path_separator
    joined = ""
    for part in parts:
        if not part:
            continue
        if not joined:
            joined = part
        elif joined.endswith(sep):
            joined = joined + part
        else:
            joined = joined + sep + part
    return joined


def split_search_path(value: str | None, platform: Platform = CURRENT) -> list[str]:
    """
    split a search path variable into its directories.

    empty segments are dropped.

    arguments:
        `value: str | None`
            raw value of the search path variable
        `platform: Platform`
            platform whose list separator is used

    returns: `list[str]`
        directories in their original order
    """
    if not value:
        return []
    return [entry for entry in value.split(platform.list_separator) if entry]


def join_search_path(entries: Iterable[str], platform: Platform = CURRENT) -> str:
    """join directories into a search path value."""
    return platform.list_separator.join(entries)


def prepend_search_path(entry: str, value: str | None, platform: Platform = CURRENT) -> str:
    """
    put a directory at the front of a search path value.

    arguments:
        `entry: str`
            directory to prepend
        `value: str | None`
            current value of the search path variable (may be unset)
        `platform: Platform`
            platform whose list separator is used

    returns: `str`
        new search path value
    """
    if not value:
        return entry
    return entry + platform.list_separator + value
