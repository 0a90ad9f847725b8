"""
command-line interface for pyselect.

provides commands for listing interpreters, selecting one, and running the
lsp server.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import shlex
import sys
from collections.abc import Sequence
from typing import TextIO, final

from .activation import resolve_project_root
from .collaborators import FirstCandidatePicker, NullNotifier, Picker, StaticRootProvider
from .command import CommandResult, SelectionOutcome, discover, run_select_command
from .config import Config
from .environment import SEARCH_PATH_VAR, MappingEnvironment
from .lsp_server import result_payload, run_server_stdio, run_server_tcp
from .models import Interpreter, MessageLevel
from .selector import merge_interpreters

EXIT_CODES = {
    SelectionOutcome.SELECTED: 0,
    SelectionOutcome.CANCELLED: 1,
    SelectionOutcome.NOT_FOUND: 2,
}


@final
class PromptPicker:
    """
    numbered interactive picker on a terminal.

    an empty answer, `q`, or end of input cancels. invalid answers are asked
    again.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stderr

    async def pick(self, candidates: Sequence[Interpreter], prompt: str) -> Interpreter | None:
        print(prompt, file=self.stdout)
        for i, candidate in enumerate(candidates, 1):
            print(f"  [{i}] {candidate.display()}", file=self.stdout)

        while True:
            print(f"choice [1-{len(candidates)}, q to cancel]: ", end="", file=self.stdout, flush=True)
            answer = await asyncio.to_thread(self.stdin.readline)
            if not answer:
                return None

            answer = answer.strip()
            if answer in ("", "q"):
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(candidates):
                return candidates[int(answer) - 1]

            print(f"invalid choice: {answer}", file=self.stdout)


@final
class StreamMessageSink:
    """
    message sink for the terminal.

    warnings and errors go to stderr, info messages to `info_stream`.
    """

    def __init__(self, info_stream: TextIO | None = None) -> None:
        self.info_stream = info_stream or sys.stdout

    def show(self, message: str, level: MessageLevel) -> None:
        if level is MessageLevel.INFO:
            print(message, file=self.info_stream)
        else:
            print(f"pyselect: {level.value}: {message}", file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for the cli.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="pyselect",
        description="select a python interpreter from project venvs or the system path",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  pyselect list                        # list interpreters for the current directory
  pyselect list --json ~/project       # list as json
  pyselect select                      # pick an interpreter interactively
  eval "$(pyselect select --shell)"    # pick one and activate it in this shell
  pyselect lsp                         # start lsp server
        """,
    )
    _ = parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    scan_options = argparse.ArgumentParser(add_help=False)
    _ = scan_options.add_argument(
        "root",
        nargs="?",
        default=None,
        help="project directory to scan for venvs (default: current directory)",
    )
    _ = scan_options.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="deepest directory level searched for venvs",
    )
    _ = scan_options.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="descend into symlinked directories while searching for venvs",
    )
    _ = scan_options.add_argument(
        "--sort",
        action="store_true",
        help="search directories in name order instead of filesystem order",
    )
    _ = scan_options.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="output in json format",
    )
    _ = scan_options.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging for troubleshooting",
    )

    subparsers = parser.add_subparsers(dest="command", help="available commands")

    _ = subparsers.add_parser(
        "list",
        parents=[scan_options],
        help="list discovered python interpreters",
    )

    select_parser = subparsers.add_parser(
        "select",
        parents=[scan_options],
        help="select and activate a python interpreter",
    )
    _ = select_parser.add_argument(
        "--first",
        action="store_true",
        help="take the first candidate without prompting",
    )
    _ = select_parser.add_argument(
        "--shell",
        action="store_true",
        help="print shell commands applying the activation",
    )

    lsp_parser = subparsers.add_parser(
        "lsp",
        help="start language server protocol server",
    )
    _ = lsp_parser.add_argument(
        "--tcp",
        action="store_true",
        help="listen on tcp instead of stdio",
    )
    _ = lsp_parser.add_argument("--host", default="127.0.0.1", help="tcp host (default: 127.0.0.1)")
    _ = lsp_parser.add_argument("--port", type=int, default=2087, help="tcp port (default: 2087)")
    _ = lsp_parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging for troubleshooting",
    )

    return parser


def _apply_scan_overrides(args: argparse.Namespace, config: Config) -> None:
    max_depth_raw = getattr(args, "max_depth", None)
    if max_depth_raw is not None:
        config.scan.max_depth = int(max_depth_raw)  # pyright: ignore[reportAny]
    if bool(getattr(args, "follow_symlinks", False)):
        config.scan.follow_symlinks = True
    if bool(getattr(args, "sort", False)):
        config.scan.sort_entries = True


def shell_exports(before: dict[str, str], after: dict[str, str]) -> list[str]:
    """
    render the variables changed by an activation as posix shell commands.

    arguments:
        `before: dict[str, str]`
            environment before activation
        `after: dict[str, str]`
            environment after activation

    returns: `list[str]`
        `export` and `unset` lines, sorted by variable name
    """
    lines: list[str] = []
    for name in sorted(set(before) | set(after)):
        if name not in after:
            lines.append(f"unset {name}")
        elif before.get(name) != after[name]:
            lines.append(f"export {name}={shlex.quote(after[name])}")
    return lines


def handle_list(args: argparse.Namespace, config: Config) -> int:
    """
    handle the list command.

    returns: `int`
        exit code (0 = interpreters found, 2 = none found)
    """
    json_output = bool(getattr(args, "json_output", False))
    root_raw = getattr(args, "root", None)
    root = resolve_project_root(StaticRootProvider(str(root_raw) if root_raw else None))  # pyright: ignore[reportAny]

    found = asyncio.run(
        discover(root, config=config, search_path=os.environ.get(SEARCH_PATH_VAR, ""))
    )
    candidates = merge_interpreters(found.venv, found.system)

    if json_output:
        print(json.dumps([c.to_dict() for c in candidates], indent=2))
    else:
        for candidate in candidates:
            print(candidate.display())

    if not candidates:
        if not json_output:
            print("pyselect: error: no python interpreters found", file=sys.stderr)
        return 2
    return 0


def handle_select(args: argparse.Namespace, config: Config) -> int:
    """
    handle the select command.

    the activation is applied to a copy of the environment; `--shell`
    prints the changes so a shell can apply them.

    returns: `int`
        exit code (0 = selected, 1 = cancelled, 2 = none found)
    """
    json_output = bool(getattr(args, "json_output", False))
    shell = bool(getattr(args, "shell", False))
    first = bool(getattr(args, "first", False))
    root_raw = getattr(args, "root", None)

    picker: Picker
    if first or not sys.stdin.isatty():
        picker = FirstCandidatePicker()
    else:
        picker = PromptPicker()

    environment = MappingEnvironment(dict(os.environ))
    before = environment.snapshot()

    result: CommandResult = asyncio.run(
        run_select_command(
            root_provider=StaticRootProvider(str(root_raw) if root_raw else None),  # pyright: ignore[reportAny]
            picker=picker,
            notifier=NullNotifier(),
            messages=StreamMessageSink(sys.stderr if shell or json_output else sys.stdout),
            environment=environment,
            config=config,
        )
    )

    if shell:
        for line in shell_exports(before, environment.snapshot()):
            print(line)
    elif json_output:
        print(json.dumps(result_payload(result), indent=2))

    return EXIT_CODES[result.outcome]


def handle_lsp(args: argparse.Namespace) -> int:
    """
    handle the lsp command.

    the server loads its configuration for the workspace it is opened on.

    returns: `int`
        exit code
    """
    try:
        if bool(getattr(args, "tcp", False)):
            run_server_tcp(str(args.host), int(args.port))  # pyright: ignore[reportAny]
        else:
            run_server_stdio()
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"error: lsp server failed: {e}", file=sys.stderr)
        return 2


def main(argv: Sequence[str] | None = None) -> int:
    """
    run the cli main entry point.

    arguments:
        `argv: Sequence[str] | None`
            command-line arguments (default: sys.argv[1:])

    returns: `int`
        exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cmd_raw = getattr(args, "command", None)
    command = str(cmd_raw) if cmd_raw is not None else None  # pyright: ignore[reportAny]

    if not command:
        parser.print_help()
        return 2

    if bool(getattr(args, "debug", False)):
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(message)s",
        )

    root_raw = getattr(args, "root", None)
    if root_raw is not None and not os.path.isdir(str(root_raw)):  # pyright: ignore[reportAny]
        print(f"error: path not found: {root_raw}", file=sys.stderr)
        return 2

    if command == "lsp":
        return handle_lsp(args)
    if command not in ("list", "select"):
        parser.print_help()
        return 2

    config = Config.load(str(root_raw) if root_raw else ".")  # pyright: ignore[reportAny]
    _apply_scan_overrides(args, config)

    if command == "list":
        return handle_list(args, config)
    return handle_select(args, config)


if __name__ == "__main__":
    sys.exit(main())
