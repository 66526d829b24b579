"""Bounded command history."""

from __future__ import annotations

DEFAULT_LIMIT = 1000


def has_visible_text(command: str) -> bool:
    """Return True when ``command`` holds a character other than space or control."""
    return any(ord(ch) > 32 for ch in command)


class History:
    """Remembers up to ``limit`` commands, dropping the oldest when full."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._commands: list[str] = []

    def add(self, command: str) -> bool:
        """Record ``command`` unless it is blank; return whether it was recorded."""
        if not has_visible_text(command):
            return False
        self._commands.append(command)
        if len(self._commands) > self.limit:
            del self._commands[0]
        return True

    def entries(self) -> list[str]:
        """Return the recorded commands, oldest first."""
        return list(self._commands)

    def format(self) -> str:
        """Return the history as numbered lines, as the ``history`` command prints it."""
        return "".join(
            f"{number} {command}\n"
            for number, command in enumerate(self._commands, start=1)
        )

    def __len__(self) -> int:
        return len(self._commands)