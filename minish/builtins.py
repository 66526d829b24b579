"""The ``cd``, ``pwd``, ``env``, ``unset``, ``export`` and ``exit`` built-ins."""

from __future__ import annotations

import os
import re
import sys
from typing import TextIO

from minish.environment import Environment, NameCheck, check_export_name

_WORD = re.compile(r"[^ \n]+")
_NO_EXIT = -999999999


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def _stream(out: TextIO | None) -> TextIO:
    return out if out is not None else sys.stdout


def cd(path: str | None, env: Environment, out: TextIO | None = None) -> int:
    """Change directory to ``path`` and record ``OLDPWD`` and ``PWD``."""
    try:
        old = os.getcwd()
    except OSError as exc:
        print(f"getcwd: {exc.strerror}", file=sys.stderr)
        return 1
    try:
        if path is None:
            raise FileNotFoundError
        os.chdir(path)
    except OSError:
        shown = "(null)" if path is None else path
        _stream(out).write(f"cd: no such file or directory: {shown}\n")
        return 1
    try:
        current = os.getcwd()
    except OSError as exc:
        print(f"getcwd: {exc.strerror}", file=sys.stderr)
        return 1
    env.set("OLDPWD", old)
    env.set("PWD", current)
    return 0


def pwd(out: TextIO | None = None) -> int:
    """Print the current directory."""
    try:
        current = os.getcwd()
    except OSError as exc:
        print(f"pwd: {exc.strerror}", file=sys.stderr)
        return 1
    _stream(out).write(current + "\n")
    return 0


def env_command(env: Environment, out: TextIO | None = None) -> int:
    """Print every environment entry on its own line."""
    stream = _stream(out)
    for entry in env:
        stream.write(entry + "\n")
    return 0


def unset(args: str, env: Environment, out: TextIO | None = None) -> int:
    """Remove each named variable; invalid names are reported. Always returns 0."""
    stream = _stream(out)
    for name in _WORD.findall(args):
        if check_export_name(name):
            env.unset(name)
        else:
            stream.write(f"unset: {name}: not a valid identifier\n")
    return 0


def export(args: str | None, env: Environment, out: TextIO | None = None) -> int:
    """Set each ``NAME=value``; with no arguments list the sorted environment."""
    stream = _stream(out)
    if not args:
        for entry in env.sorted_entries():
            stream.write(f"declare -x {entry}\n")
        return 0
    status = 0
    for arg in _WORD.findall(args):
        name, sep, value = arg.partition("=")
        if sep:
            if check_export_name(name):
                env.set(name, value)
            else:
                stream.write(f"export: {name}: not a valid identifier\n")
                status = 1
        elif not check_export_name(arg):
            stream.write(f"export: {arg}: not a valid identifier\n")
            status = 1
    return status


def export_error_message(error: int, arg: str) -> str:
    """Return the message reported for a rejected ``export`` argument."""
    if error == NameCheck.BAD_CHARACTER:
        return f"export: not valid in this context: {arg}"
    if error in (NameCheck.LEADING_DIGIT, NameCheck.LEADING_EQUALS):
        return f"export: not a valid identifier: {arg}"
    return arg


def is_valid_number(text: str) -> bool:
    """Return True when ``text`` is an optional sign followed by digits only."""
    if text[:1] in ("-", "+"):
        text = text[1:]
    return all(ch.isascii() and ch.isdigit() for ch in text)


def count_args(args: str) -> int:
    """Count the words of ``args`` separated by spaces and newlines."""
    return len(_WORD.findall(args))


def _to_int32(text: str) -> int:
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-")
    value = sign * int(digits) if digits else 0
    return ((value + 2**31) % 2**32) - 2**31


def exit_command(args: str | None, out: TextIO | None = None) -> None:
    """Raise ShellExit with the requested status.

    Too many arguments or a non-numeric one are reported and the shell keeps
    running.
    """
    if not args:
        raise ShellExit(0)
    stream = _stream(out)
    count = count_args(args)
    if count > 1:
        stream.write("exit\nbash: exit: too many arguments\n")
        return
    if count != 1:
        return
    if not is_valid_number(args):
        stream.write(f"exit\nbash: exit: {args}: numeric argument required\n")
        return
    value = _to_int32(args)
    if value != _NO_EXIT:
        raise ShellExit(value & 0xFF)