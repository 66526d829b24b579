"""Recognising and running the shell's built-in commands."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TextIO

from minish.builtins import (
    cd,
    env_command,
    exit_command,
    export,
    export_error_message,
    pwd,
    unset,
)
from minish.echo import echo
from minish.environment import Environment, NameCheck, check_export_name
from minish.executor import run_command
from minish.history import History

_COMMAND_DELIMITERS = " \n"
_ECHO = "echo"
_BIN_ECHO = "/bin/echo"


@dataclass
class Session:
    """The state built-ins read and change: environment, history and last status."""

    env: Environment
    history: History = field(default_factory=History)
    last_status: int = 0
    out: TextIO | None = None
    err: TextIO | None = None
    read_line: Callable[[str], str | None] | None = None

    @property
    def stdout(self) -> TextIO:
        return self.out if self.out is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self.err if self.err is not None else sys.stderr


def has_redirection(text: str) -> bool:
    """Return True when ``text`` holds ``<`` or ``>`` outside quotes."""
    quote: str | None = None
    for ch in text:
        if ch in "\"'":
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
        elif ch in "<>" and quote is None:
            return True
    return False


def redirect_echo(line: str) -> str | None:
    """Rewrite the first ``echo`` in a redirected line as ``/bin/echo``.

    Returns None when the line has no ``echo`` or no redirection.
    """
    position = line.find(_ECHO)
    if position < 0 or not has_redirection(line):
        return None
    return line[:position] + _BIN_ECHO + line[position + len(_ECHO) :]


def _split_command(line: str) -> tuple[str | None, str | None]:
    """Return the command word and the rest of its line, or None for either."""
    stripped = line.lstrip(_COMMAND_DELIMITERS)
    if not stripped:
        return None, None
    end = next(
        (i for i, ch in enumerate(stripped) if ch in _COMMAND_DELIMITERS),
        len(stripped),
    )
    command = stripped[:end]
    rest = stripped[end + 1 :].lstrip("\n")
    if not rest:
        return command, None
    return command, rest.split("\n", 1)[0]


def _echo(args: str | None, line: str, session: Session) -> None:
    if args is None:
        session.stdout.write("\n")
        session.last_status = 0
    elif has_redirection(args):
        rewritten = redirect_echo(line)
        if rewritten is not None:
            session.last_status = run_command(
                rewritten, session.env, session.last_status, session.read_line
            )
    else:
        echo(args, session.env, session.last_status, session.stdout, session.read_line)
        session.last_status = 0


def _cd(args: str | None, line: str, session: Session) -> None:
    target = args if args is not None else os.environ.get("HOME")
    session.last_status = cd(target, session.env, session.stdout)


def _pwd(args: str | None, line: str, session: Session) -> None:
    session.last_status = pwd(session.stdout)


def _export(args: str | None, line: str, session: Session) -> None:
    if args is None:
        session.last_status = export(None, session.env, session.stdout)
        return
    error = check_export_name(args)
    if args.startswith("="):
        error = NameCheck.LEADING_EQUALS
    if error != NameCheck.ASSIGNMENT:
        session.stderr.write(export_error_message(error, args) + "\n")
        session.last_status = 1
    else:
        session.last_status = export(args, session.env, session.stdout)


def _unset(args: str | None, line: str, session: Session) -> None:
    if args is None:
        session.last_status = 0
        return
    session.last_status = unset(args, session.env, session.stdout)


def _env(args: str | None, line: str, session: Session) -> None:
    session.last_status = env_command(session.env, session.stdout)


def _exit(args: str | None, line: str, session: Session) -> None:
    exit_command(args, session.stdout)


def _history(args: str | None, line: str, session: Session) -> None:
    session.stdout.write(session.history.format())


_HANDLERS: dict[str, Callable[[str | None, str, Session], None]] = {
    "echo": _echo,
    "cd": _cd,
    "pwd": _pwd,
    "export": _export,
    "unset": _unset,
    "env": _env,
    "exit": _exit,
    "history": _history,
}


def run_builtin(line: str, session: Session) -> bool:
    """Run ``line`` if it is a built-in; return whether it was handled.

    A blank line counts as handled and sets the status to 0. ``exit`` raises
    ShellExit.
    """
    command, args = _split_command(line)
    if command is None:
        session.last_status = 0
        return True
    handler = _HANDLERS.get(command)
    if handler is None:
        return False
    handler(args, line, session)
    return True