"""Splitting a simple command into arguments and its file redirections."""

from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass
from typing import BinaryIO, TextIO

HEREDOC_PROMPT = "> "

_WORD = re.compile(r"[^ \t]+")
_OPERATORS = frozenset({"<", ">", ">>", "<<"})


class RedirectionError(Exception):
    """A redirection target could not be opened."""


def read_heredoc(
    delimiter: str, stream: TextIO, prompt_stream: TextIO | None = None
) -> str:
    """Read lines from ``stream`` up to a line equal to ``delimiter``.

    Each line is cut at its first newline. When ``prompt_stream`` is given a
    prompt is written to it before every line is read. Returns the collected
    lines, each ending in a newline; end of input also ends the document.
    """
    lines: list[str] = []
    while True:
        if prompt_stream is not None:
            prompt_stream.write(HEREDOC_PROMPT)
            prompt_stream.flush()
        line = stream.readline()
        if not line:
            break
        line = line.split("\n", 1)[0]
        if line == delimiter:
            break
        lines.append(line + "\n")
    return "".join(lines)


@dataclass
class Redirection:
    """The input file, output file and here-document of one command."""

    infile: str | None = None
    outfile: str | None = None
    heredoc_delimiter: str | None = None
    append: bool = False

    def apply(
        self, input_stream: TextIO, interactive: bool = False
    ) -> tuple[BinaryIO | None, BinaryIO | None]:
        """Open the command's standard input and output.

        The here-document is read from ``input_stream`` first, then an input
        file replaces it, then the output file is opened. Returns the files to
        use as standard input and output, None where nothing is redirected;
        the caller closes them. Raises RedirectionError when a file cannot be
        opened.
        """
        stdin: BinaryIO | None = None
        try:
            if self.heredoc_delimiter is not None:
                prompt = _stderr() if interactive else None
                content = read_heredoc(self.heredoc_delimiter, input_stream, prompt)
                stdin = tempfile.TemporaryFile("w+b")
                stdin.write(content.encode())
                stdin.seek(0)
            if self.infile is not None:
                try:
                    opened = open(self.infile, "rb")
                except OSError as exc:
                    raise RedirectionError(f"open infile: {exc.strerror}") from exc
                if stdin is not None:
                    stdin.close()
                stdin = opened
            stdout = self._open_output()
        except BaseException:
            if stdin is not None:
                stdin.close()
            raise
        return stdin, stdout

    def _open_output(self) -> BinaryIO | None:
        if self.outfile is None:
            return None
        flags = os.O_WRONLY | os.O_CREAT
        flags |= os.O_APPEND if self.append else os.O_TRUNC
        try:
            fd = os.open(self.outfile, flags, 0o644)
        except OSError as exc:
            raise RedirectionError(f"open outfile: {exc.strerror}") from exc
        return os.fdopen(fd, "wb")


def _stderr() -> TextIO:
    import sys

    return sys.stderr


def parse_command(cmd: str) -> tuple[list[str], Redirection]:
    """Split ``cmd`` on spaces and tabs into arguments and redirections.

    ``<``, ``>``, ``>>`` and ``<<`` take the following word as their target;
    a later redirection of the same kind replaces an earlier one, and an
    operator with no word after it is ignored.
    """
    args: list[str] = []
    redirection = Redirection()
    words = iter(_WORD.findall(cmd))
    for word in words:
        if word not in _OPERATORS:
            args.append(word)
            continue
        target = next(words, None)
        if target is None:
            break
        if word == "<":
            redirection.infile = target
        elif word == ">":
            redirection.outfile = target
            redirection.append = False
        elif word == ">>":
            redirection.outfile = target
            redirection.append = True
        else:
            redirection.heredoc_delimiter = target
    return args, redirection