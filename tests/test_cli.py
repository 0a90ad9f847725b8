"""
tests for the pyselect cli.
"""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import cast
from unittest.mock import patch

import pytest

from pyselect.cli import PromptPicker, main, shell_exports
from pyselect.models import Interpreter, InterpreterKind
from tests.fixtures.interpreters import requires_posix, search_path

CANDIDATES = [
    Interpreter("/proj/.venv/bin/python", InterpreterKind.VENV),
    Interpreter("/usr/bin/python3", InterpreterKind.SYSTEM),
]


class TestCliBasic:
    """tests for basic cli functionality."""

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test that --help works."""
        with pytest.raises(SystemExit) as exc_info:
            _ = main(["--help"])
        assert exc_info.value.code == 0

        captured = capsys.readouterr()
        assert "pyselect" in captured.out
        assert "select" in captured.out
        assert "list" in captured.out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test that --version works."""
        with pytest.raises(SystemExit) as exc_info:
            _ = main(["--version"])
        assert exc_info.value.code == 0

        captured = capsys.readouterr()
        assert "0.1.0" in captured.out

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 2
        assert "usage" in capsys.readouterr().out

    def test_nonexistent_path(self, capsys: pytest.CaptureFixture[str]) -> None:
        """test error handling for nonexistent path."""
        assert main(["list", "/nonexistent/path/12345"]) == 2

        captured = capsys.readouterr()
        assert "error" in captured.err

    def test_lsp_does_not_load_config(self) -> None:
        """test that the lsp command leaves configuration to the server."""
        with (
            patch("pyselect.cli.Config.load") as load,
            patch("pyselect.cli.run_server_stdio") as run_stdio,
        ):
            assert main(["lsp"]) == 0

        load.assert_not_called()
        run_stdio.assert_called_once_with()


@requires_posix
class TestListCommand:
    """tests for `pyselect list`."""

    def test_json(
        self,
        venv_project: Path,
        search_dirs: tuple[Path, Path],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PATH", search_path(*search_dirs))

        assert main(["list", str(venv_project), "--json"]) == 0

        data = cast(list[dict[str, str]], json.loads(capsys.readouterr().out))
        assert data[0] == {"path": str(venv_project / ".venv" / "bin" / "python"), "kind": "venv"}
        assert [d["kind"] for d in data[1:]] == ["system", "system"]

    def test_text(
        self,
        venv_project: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PATH", "")

        assert main(["list", str(venv_project)]) == 0

        out = capsys.readouterr().out
        assert "(venv)" in out
        assert str(venv_project / ".venv" / "bin" / "python") in out

    def test_nothing_found(
        self,
        empty_project: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PATH", "")

        assert main(["list", str(empty_project)]) == 2
        assert "no python interpreters found" in capsys.readouterr().err


@requires_posix
class TestSelectCommand:
    """tests for `pyselect select`."""

    def test_shell_output(
        self,
        venv_project: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        empty_bin = tmp_path / "bin"
        empty_bin.mkdir()
        monkeypatch.setenv("PATH", str(empty_bin))
        monkeypatch.delenv("VIRTUAL_ENV", raising=False)

        assert main(["select", str(venv_project), "--first", "--shell"]) == 0

        captured = capsys.readouterr()
        venv_root = venv_project / ".venv"
        assert f"export VIRTUAL_ENV={venv_root}" in captured.out
        assert f"export PATH={venv_root / 'bin'}:{empty_bin}" in captured.out
        assert "Venv python selected" in captured.err

    def test_json_output(
        self,
        empty_project: Path,
        search_dirs: tuple[Path, Path],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PATH", search_path(*search_dirs))

        assert main(["select", str(empty_project), "--first", "--json"]) == 0

        data = cast(dict[str, object], json.loads(capsys.readouterr().out))
        assert data["outcome"] == "selected"
        assert data["interpreter"] == {"path": str(search_dirs[0] / "python3"), "kind": "system"}
        assert data["venv_root"] is None

    def test_nothing_found(
        self,
        empty_project: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("PATH", "")

        assert main(["select", str(empty_project), "--first"]) == 2
        assert "No Python interpreters found in project venvs or system PATH" in capsys.readouterr().err

    def test_max_depth_flag(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project = tmp_path / "proj"
        python = project / "a" / "b" / ".venv" / "bin" / "python"
        python.parent.mkdir(parents=True)
        _ = python.write_text("")
        python.chmod(0o755)
        monkeypatch.setenv("PATH", "")

        assert main(["select", str(project), "--first", "--max-depth", "2"]) == 2
        assert main(["select", str(project), "--first", "--max-depth", "3"]) == 0

    def test_string_max_depth_in_config_file(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project = tmp_path / "proj"
        python = project / "a" / "b" / ".venv" / "bin" / "python"
        python.parent.mkdir(parents=True)
        _ = python.write_text("")
        python.chmod(0o755)
        _ = (project / ".pyselect.toml").write_text('[scan]\nmax_depth = "2"\n')
        monkeypatch.setenv("PATH", "")

        assert main(["select", str(project), "--first"]) == 2


class TestPromptPicker:
    """tests for the interactive terminal picker."""

    @pytest.mark.asyncio
    async def test_numbered_choice(self) -> None:
        out = io.StringIO()
        picker = PromptPicker(io.StringIO("2\n"), out)

        assert await picker.pick(CANDIDATES, "Select Python interpreter:") == CANDIDATES[1]
        assert "[1] python (venv) — /proj/.venv/bin/python" in out.getvalue()

    @pytest.mark.asyncio
    async def test_invalid_then_valid(self) -> None:
        out = io.StringIO()
        picker = PromptPicker(io.StringIO("9\nabc\n1\n"), out)

        assert await picker.pick(CANDIDATES, "prompt") == CANDIDATES[0]
        assert "invalid choice: 9" in out.getvalue()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["", "\n", "q\n"])
    async def test_cancel(self, answer: str) -> None:
        picker = PromptPicker(io.StringIO(answer), io.StringIO())
        assert await picker.pick(CANDIDATES, "prompt") is None

    @pytest.mark.asyncio
    async def test_reads_off_the_event_loop(self) -> None:
        """test that terminal input is read on a worker thread."""
        stdin = io.StringIO("1\n")
        picker = PromptPicker(stdin, io.StringIO())

        with patch("pyselect.cli.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            assert await picker.pick(CANDIDATES, "prompt") == CANDIDATES[0]

        to_thread.assert_called_once_with(stdin.readline)


class TestShellExports:
    """tests for shell_exports."""

    def test_changes(self) -> None:
        before = {"A": "1", "KEEP": "same", "V": "x"}
        after = {"A": "2", "B": "a b", "KEEP": "same"}

        assert shell_exports(before, after) == [
            "export A=2",
            "export B='a b'",
            "unset V",
        ]

    def test_no_changes(self) -> None:
        assert shell_exports({"A": "1"}, {"A": "1"}) == []
