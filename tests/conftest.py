"""
conftest for pyselect tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fixtures.interpreters import make_file, make_venv

CONFIG_ENV_VARS = (
    "PYSELECT_MAX_DEPTH",
    "PYSELECT_FOLLOW_SYMLINKS",
    "PYSELECT_SORT_ENTRIES",
    "PYSELECT_SERVER_NAME",
    "PYSELECT_DEFAULT_INTERPRETER_VAR",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """keep the test runner's environment out of configuration loading."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def venv_project(tmp_path: Path) -> Path:
    """create a project with a standard .venv."""
    project = tmp_path / "proj"
    project.mkdir()
    _ = make_venv(project)
    return project


@pytest.fixture
def empty_project(tmp_path: Path) -> Path:
    """create a project without any venv."""
    project = tmp_path / "empty"
    (project / "src" / "pkg").mkdir(parents=True)
    return project


@pytest.fixture
def search_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """create two search path directories, each holding one interpreter."""
    first = tmp_path / "usr" / "bin"
    second = tmp_path / "usr" / "local" / "bin"
    _ = make_file(first / "python3")
    _ = make_file(second / "python3.12")
    return first, second
