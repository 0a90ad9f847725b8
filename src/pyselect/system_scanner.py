"""
system interpreter scanner.

lists `python`, `python3`, `python3.11` and friends found in the
directories of the search path variable.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Final

from .paths import CURRENT, Platform, join_path, split_search_path

logger = logging.getLogger(__name__)

PYTHON_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^python[0-9.]*$")


def is_python_name(name: str, platform: Platform = CURRENT) -> bool:
    """
    check whether a file name looks like a python interpreter.

    on platforms with an executable suffix the suffix is stripped first,
    so `python3.exe` matches on windows.

    arguments:
        `name: str`
            bare file name
        `platform: Platform`
            platform whose executable suffix applies

    returns: `bool`
        true if the name is "python" followed only by digits and dots
    """
    suffix = platform.executable_suffix
    if suffix and name.lower().endswith(suffix):
        name = name[: -len(suffix)]
    return PYTHON_NAME_PATTERN.match(name) is not None


def _is_executable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_system_interpreters(
    search_path: str | None = None,
    *,
    platform: Platform = CURRENT,
) -> list[str]:
    """
    find python interpreters on the search path.

    arguments:
        `search_path: str | None`
            search path value to scan (default: the PATH environment variable)
        `platform: Platform`
            platform whose separators and executable suffix apply

    returns: `list[str]`
        executable interpreter paths without duplicates, in search path
        order and then directory enumeration order
    """
    if search_path is None:
        search_path = os.environ.get("PATH", "")

    found: list[str] = []
    seen: set[str] = set()

    for directory in split_search_path(search_path, platform):
        try:
            with os.scandir(directory) as it:
                names = [entry.name for entry in it]
        except OSError as e:
            logger.debug("skipping unreadable search path entry %s: %s", directory, e)
            continue

        for name in names:
            if not is_python_name(name, platform):
                continue

            full_path = join_path(directory, name, platform=platform)
            if full_path in seen:
                continue
            if not _is_executable_file(full_path):
                logger.debug("ignoring non-executable %s", full_path)
                continue

            seen.add(full_path)
            found.append(full_path)

    return found
