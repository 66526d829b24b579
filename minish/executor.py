"""Running external commands, alone or joined by pipes."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Callable
from typing import TextIO

from minish.environment import Environment
from minish.expansion import (
    complete_quotes,
    expand_variables,
    mark_quoted_operators,
    normalize_quotes,
    trim_whitespace,
    unwrap_double_quoted_word,
)
from minish.redirection import Redirection, RedirectionError, parse_command

NOT_FOUND = 127
CANNOT_EXECUTE = 126

_Started = "subprocess.Popen[bytes] | int"


def _read_continuation(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _is_path(name: str) -> bool:
    return name.startswith(("/", "."))


def resolve_executable(name: str, search_path: list[str] | None) -> str | None:
    """Find the file to run for ``name``, or None when there is none.

    Names starting with ``/`` or ``.`` are used as they are; other names are
    looked up in the directories of ``search_path`` in order.
    """
    if _is_path(name):
        return name if os.access(name, os.X_OK) else None
    if search_path is None:
        return None
    for directory in search_path:
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def exit_status(returncode: int) -> int:
    """Turn a child's return code into a shell status: 128 plus the signal if killed."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def prepare_line(
    line: str,
    env: Environment,
    last_status: int = 0,
    read_line: Callable[[str], str | None] | None = None,
) -> str:
    """Apply quote completion, quote rewriting and variable expansion to ``line``."""
    text = complete_quotes(line, read_line or _read_continuation)
    text = mark_quoted_operators(text)
    text = trim_whitespace(text)
    text = normalize_quotes(text)
    text = expand_variables(text, env, last_status)
    return unwrap_double_quoted_word(text)


def _not_found_message(name: str, env: Environment) -> str:
    if _is_path(name):
        return f"Command not found or not executable: {name}\n"
    if env.search_path() is None:
        return "PATH is not set\n"
    return f"Command not found: {name}\n"


def _is_tty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def _fd_of(stream: TextIO | None) -> int | None:
    if stream is None:
        return None
    try:
        stream.flush()
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush_stdout() -> None:
    try:
        sys.stdout.flush()
    except (AttributeError, OSError, ValueError):
        pass


def _start(
    args: list[str],
    red: Redirection,
    env: Environment,
    stdin_fd: int | None,
    stdout_fd: int | None,
    input_stream: TextIO,
) -> subprocess.Popen[bytes] | int:
    """Start one command; return its process, or its status when it cannot start."""
    interactive = red.heredoc_delimiter is not None and _is_tty(input_stream)
    try:
        red_in, red_out = red.apply(input_stream, interactive)
    except RedirectionError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        in_fd = red_in.fileno() if red_in is not None else stdin_fd
        out_fd = red_out.fileno() if red_out is not None else stdout_fd
        if not args:
            return 0
        path = resolve_executable(args[0], env.search_path())
        if path is None:
            os.write(out_fd if out_fd is not None else 1,
                     _not_found_message(args[0], env).encode())
            return NOT_FOUND
        try:
            return subprocess.Popen(
                args, executable=path, stdin=in_fd, stdout=out_fd, env=env.as_dict()
            )
        except OSError as exc:
            print(f"execve: {exc.strerror}", file=sys.stderr)
            return CANNOT_EXECUTE
    finally:
        if red_in is not None:
            red_in.close()
        if red_out is not None:
            red_out.close()


def _wait(started: subprocess.Popen[bytes] | int) -> int:
    if isinstance(started, int):
        return started
    return exit_status(started.wait())


def run_single(
    line: str,
    env: Environment,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run one command with its redirections and return its exit status.

    ``stdin`` and ``stdout`` default to the shell's own; a here-document is
    read from ``stdin``.
    """
    args, red = parse_command(line)
    input_stream = stdin if stdin is not None else sys.stdin
    _flush_stdout()
    started = _start(args, red, env, _fd_of(stdin), _fd_of(stdout), input_stream)
    return _wait(started)


def run_pipeline(line: str, env: Environment) -> int:
    """Run the ``|``-separated commands of ``line`` connected by pipes.

    Returns the exit status of the last command.
    """
    commands = [part for part in line.split("|") if part]
    if not commands:
        return 0
    _flush_stdout()
    started: list[subprocess.Popen[bytes] | int] = []
    read_fd: int | None = None
    try:
        for index, command in enumerate(commands):
            last = index == len(commands) - 1
            next_read, write_fd = (None, None) if last else os.pipe()
            try:
                args, red = parse_command(trim_whitespace(command))
                started.append(_start(args, red, env, read_fd, write_fd, sys.stdin))
            finally:
                if read_fd is not None:
                    os.close(read_fd)
                if write_fd is not None:
                    os.close(write_fd)
                read_fd = next_read
    finally:
        if read_fd is not None:
            os.close(read_fd)
    statuses = [_wait(stage) for stage in started]
    return statuses[-1]


def run_command(
    line: str,
    env: Environment,
    last_status: int = 0,
    read_line: Callable[[str], str | None] | None = None,
) -> int:
    """Prepare ``line`` and run it as a pipeline or a single command."""
    prepared = prepare_line(line, env, last_status, read_line)
    if "|" in prepared:
        return run_pipeline(prepared, env)
    return run_single(prepared, env)