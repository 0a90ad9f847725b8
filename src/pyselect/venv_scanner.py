"""
project virtual environment scanner.

walks a project root depth-first and returns the interpreter of the first
directory that looks like a virtual environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

# relative interpreter locations, checked in this order
INTERPRETER_LAYOUTS: Final[tuple[tuple[str, str], ...]] = (
    ("bin", "python"),
    ("Scripts", "python.exe"),
)


def is_executable(path: Path) -> bool:
    """check that a path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


def interpreter_in(directory: Path) -> Path | None:
    """
    look for a venv interpreter inside a directory.

    arguments:
        `directory: Path`
            candidate virtual environment root

    returns: `Path | None`
        `bin/python` or `Scripts/python.exe` if present and executable
    """
    for scripts_dir, executable in INTERPRETER_LAYOUTS:
        candidate = directory.joinpath(scripts_dir, executable)
        if is_executable(candidate):
            return candidate
    return None


def _list_dir(directory: str, sort_entries: bool) -> Iterator[os.DirEntry[str]] | None:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        logger.debug("skipping unreadable directory %s: %s", directory, e)
        return None

    if sort_entries:
        entries.sort(key=lambda entry: entry.name)
    return iter(entries)


def _dir_key(path: str) -> tuple[int, int] | None:
    try:
        st = os.stat(path)
    except OSError:
        return None
    return (st.st_dev, st.st_ino)


def find_venv_interpreter(
    root: str | Path,
    *,
    max_depth: int | None = None,
    follow_symlinks: bool = False,
    sort_entries: bool = False,
) -> str | None:
    """
    find the interpreter of the first virtual environment below a root.

    the walk is depth-first in directory enumeration order: each
    subdirectory is first tested as a venv, and only descended into when
    it is not one. the root itself is never tested. the first match wins,
    so with several venvs the result depends on the filesystem's order
    unless `sort_entries` is set.

    arguments:
        `root: str | Path`
            directory to start from
        `max_depth: int | None`
            deepest level below root to inspect (children of root are
            level 1). none walks the whole tree.
        `follow_symlinks: bool`
            descend into symlinked directories. already visited directories
            are never entered twice.
        `sort_entries: bool`
            visit entries in name order instead of enumeration order

    returns: `str | None`
        path to the interpreter executable, none if no venv was found
    """
    root_str = os.fspath(root)
    if max_depth is not None and max_depth < 1:
        return None

    entries = _list_dir(root_str, sort_entries)
    if entries is None:
        return None

    visited: set[tuple[int, int]] = set()
    if (root_key := _dir_key(root_str)) is not None:
        visited.add(root_key)

    # each frame holds the remaining entries of a directory and their depth
    stack: list[tuple[Iterator[os.DirEntry[str]], int]] = [(entries, 1)]

    while stack:
        entries, depth = stack[-1]
        entry = next(entries, None)
        if entry is None:
            _ = stack.pop()
            continue

        try:
            if not entry.is_dir(follow_symlinks=follow_symlinks):
                continue
        except OSError:
            continue

        found = interpreter_in(Path(entry.path))
        if found is not None:
            logger.debug("found venv interpreter: %s", found)
            return str(found)

        if max_depth is not None and depth >= max_depth:
            continue

        key = _dir_key(entry.path)
        if key is not None:
            if key in visited:
                logger.debug("skipping already visited directory %s", entry.path)
                continue
            visited.add(key)

        children = _list_dir(entry.path, sort_entries)
        if children is not None:
            stack.append((children, depth + 1))

    return None
