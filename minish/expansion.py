"""Quote handling and variable expansion applied to a command line before it runs."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from minish.environment import Environment

QUOTE_PROMPT = "quote> "
ECHO_PREFIX = "/bin/echo "

_VARIABLE = re.compile(r"\$(\?|[A-Za-z0-9_]+)")
_OPERATORS = frozenset("<>|")
_C_SPACE = frozenset(" \t\n\v\f\r")


@dataclass
class QuoteState:
    """Tracks whether the text seen so far leaves a single or double quote open."""

    in_single: bool = False
    in_double: bool = False

    def update(self, text: str) -> None:
        """Toggle the quote flags for every quote in ``text``."""
        for ch in text:
            if ch == "'" and not self.in_double:
                self.in_single = not self.in_single
            elif ch == '"' and not self.in_single:
                self.in_double = not self.in_double

    def is_open(self) -> bool:
        """Return True while a quote is left unclosed."""
        return self.in_single or self.in_double


def complete_quotes(text: str, read_line: Callable[[str], str | None]) -> str:
    """Keep reading lines with ``read_line`` until every quote in ``text`` is closed.

    ``read_line`` receives the continuation prompt and returns None at end of
    input. The first extra line is joined directly; later ones after a newline.
    """
    state = QuoteState()
    state.update(text)
    result = text
    first = True
    while state.is_open():
        extra = read_line(QUOTE_PROMPT)
        if extra is None:
            break
        result += extra if first else "\n" + extra
        first = False
        state.update(extra)
    return result


def trim_whitespace(text: str) -> str:
    """Strip spaces and tabs from both ends of ``text``."""
    return text.strip(" \t")


def find_next_variable(text: str, start: int = 0) -> tuple[int, str] | None:
    """Find the next ``$NAME`` or ``$?`` at or after ``start``.

    Returns the index of the dollar sign and the variable name, or None.
    """
    match = _VARIABLE.search(text, start)
    if match is None:
        return None
    return match.start(), match.group(1)


def expand_variables(text: str, env: Environment, last_status: int = 0) -> str:
    """Replace ``$NAME`` and ``$?`` in ``text``.

    A line holding any single quote is not expanded; its single quotes are
    removed instead. Unknown variables expand to nothing. Substituted values
    are not expanded again.
    """
    if "'" in text:
        return text.replace("'", "")
    result = text
    found = find_next_variable(result)
    while found is not None:
        index, name = found
        if name == "?":
            replacement = str(last_status)
        else:
            replacement = env.get(name) or ""
        end = index + 1 + len(name)
        result = result[:index] + replacement + result[end:]
        found = find_next_variable(result, index + len(replacement))
    return result


def mark_quoted_operators(text: str) -> str:
    """Turn single quotes that wrap ``<``, ``>`` or ``|`` into double quotes."""
    out: list[str] = []
    in_single = False
    for index, ch in enumerate(text):
        if ch != "'":
            out.append(ch)
            continue
        previous = text[index - 1] if index > 0 else ""
        following = text[index + 1 : index + 2]
        if in_single and previous in _OPERATORS and previous:
            out.append('"')
        elif not in_single and following in _OPERATORS and following:
            out.append('"')
        else:
            out.append(ch)
        in_single = not in_single
    return "".join(out)


def unwrap_double_quoted_word(text: str) -> str:
    """Drop the surrounding double quotes of a line that is a single quoted word."""
    if (
        len(text) >= 2
        and text[0] == '"'
        and text[-1] == '"'
        and not any(ch in _C_SPACE for ch in text[1:-1])
    ):
        return text[1:-1]
    return text


def is_echo_command(command: str) -> bool:
    """Return True when ``command`` invokes ``/bin/echo`` with arguments."""
    return command.startswith(ECHO_PREFIX)


def normalize_quotes(command: str) -> str:
    """Collapse unquoted runs of spaces and rewrite quotes before expansion.

    An opening single quote is dropped and its closing one kept, unless the
    command is ``/bin/echo`` and the quote is followed by ``$``. Double quotes
    are kept except for ``/bin/echo``. A line starting with a quote is left as is.
    """
    if command[:1] in ("'", '"'):
        return command
    is_echo = is_echo_command(command)
    in_single = False
    in_double = False
    last_space = True
    out: list[str] = []
    for ch, following in zip(command, command[1:] + "\0"):
        if ch == "'" and not in_double:
            in_single = not in_single
            if (is_echo and following == "$") or not in_single:
                out.append(ch)
        elif ch == '"' and not in_single:
            in_double = not in_double
            if not is_echo:
                out.append(ch)
        elif is_echo and in_double and ch == "$":
            out.append(ch)
        elif ch == " " and not in_single and not in_double:
            if not last_space:
                out.append(ch)
                last_space = True
        else:
            out.append(ch)
            last_space = False
    if out and out[-1] == " ":
        out.pop()
    return "".join(out)