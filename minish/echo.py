"""The ``echo`` built-in."""

from __future__ import annotations

import re
import sys
from collections.abc import Callable
from typing import TextIO

from minish.environment import Environment
from minish.expansion import complete_quotes

_WORD = re.compile(r"[^ \n]+")


def _is_name_char(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def _read_continuation(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def render_argument(arg: str, env: Environment, last_status: int = 0) -> str:
    """Return the text ``echo`` prints for one argument.

    Quotes are removed, ``$?`` and ``$NAME`` are expanded outside single
    quotes, and unknown variables (or a lone ``$``) print nothing.
    """
    out: list[str] = []
    in_single = False
    in_double = False
    index = 0
    length = len(arg)
    while index < length:
        ch = arg[index]
        if ch == "'" and not in_double:
            in_single = not in_single
            index += 1
        elif ch == '"' and not in_single:
            in_double = not in_double
            index += 1
        elif ch == "$" and (in_double or not in_single):
            start = index + 1
            if arg[start : start + 1] == "?":
                out.append(str(last_status))
                index = start + 1
                continue
            end = start
            while end < length and _is_name_char(arg[end]):
                end += 1
            value = env.get(arg[start:end])
            if value:
                out.append(value)
            index = end
        elif ch == "'":
            in_single = not in_single
            out.append(ch)
            index += 1
        elif ch == '"':
            in_double = not in_double
            index += 1
        else:
            out.append(ch)
            index += 1
    return "".join(out)


def echo(
    line: str,
    env: Environment,
    last_status: int = 0,
    out: TextIO | None = None,
    read_line: Callable[[str], str | None] | None = None,
) -> int:
    """Print the arguments in ``line`` separated by spaces; ``-n`` drops the newline.

    Unclosed quotes are completed with ``read_line`` first. Returns 0.
    """
    stream = out if out is not None else sys.stdout
    text = complete_quotes(line, read_line or _read_continuation)
    words = _WORD.findall(text)
    if not words:
        stream.write("\n")
        return 0
    newline = True
    if words[0] == "-n":
        newline = False
        words = words[1:]
    stream.write(" ".join(render_argument(word, env, last_status) for word in words))
    if newline:
        stream.write("\n")
    return 0