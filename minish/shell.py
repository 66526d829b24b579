"""The interactive read-run loop."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Mapping
from typing import TextIO

from minish.builtins import ShellExit
from minish.dispatch import Session, run_builtin
from minish.environment import Environment
from minish.executor import run_command
from minish.history import History

PROMPT = "\033[1;32m→ minishell ▸ \033[0m"
INTERRUPTED = 130


class Shell:
    """Reads command lines and runs them as built-ins or external commands."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.session = Session(
            env=Environment(os.environ if environ is None else environ),
            history=History(),
            out=self.stdout,
            err=self.stderr,
            read_line=self._read_line,
        )

    @property
    def env(self) -> Environment:
        return self.session.env

    @property
    def history(self) -> History:
        return self.session.history

    @property
    def status(self) -> int:
        return self.session.last_status

    def _interactive(self) -> bool:
        try:
            return self.stdin.isatty()
        except (AttributeError, OSError, ValueError):
            return False

    def _read_line(self, prompt: str) -> str | None:
        if self._interactive():
            if self.stdin is sys.stdin and self.stdout is sys.stdout:
                try:
                    return input(prompt)
                except EOFError:
                    return None
            self.stdout.write(prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line[:-1] if line.endswith("\n") else line

    def _interrupted(self) -> None:
        self.stderr.write("\n")
        self.session.last_status = INTERRUPTED

    def process_input(self, line: str) -> None:
        """Record ``line`` in the history and run it."""
        self.history.add(line)
        try:
            if not run_builtin(line, self.session):
                self.session.last_status = run_command(
                    line, self.env, self.session.last_status, self._read_line
                )
        except KeyboardInterrupt:
            self._interrupted()

    def step(self) -> bool:
        """Read and run one line; return True when input has ended."""
        try:
            line = self._read_line(PROMPT)
        except KeyboardInterrupt:
            self._interrupted()
            return False
        if line is None:
            if self._interactive():
                self.stdout.write("exit\n")
                self.stdout.flush()
            self.session.last_status = 0
            return True
        if line:
            self.process_input(line)
        return False

    def run(self) -> int:
        """Run until end of input or ``exit``; return the exit status."""
        try:
            while not self.step():
                pass
        except ShellExit as exc:
            return exc.status
        return self.status


def main(argv: list[str] | None = None) -> int:
    """Start an interactive shell on the process's standard streams."""
    try:
        import readline  # noqa: F401  (line editing for input())
    except ImportError:
        pass
    if hasattr(signal, "SIGQUIT"):
        try:
            signal.signal(signal.SIGQUIT, signal.SIG_IGN)
        except ValueError:
            pass
    return Shell().run()


if __name__ == "__main__":
    sys.exit(main())