"""The shell's environment: an ordered list of ``NAME=value`` entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import IntEnum


class NameCheck(IntEnum):
    """Outcome of checking an ``export`` argument.

    Only ``LEADING_DIGIT`` is falsy, so ``if check_export_name(arg):``
    accepts every other outcome, as the shell's ``unset`` and ``export`` do.
    """

    LEADING_EQUALS = -3
    BAD_CHARACTER = -1
    LEADING_DIGIT = 0
    ASSIGNMENT = 1
    NAME_ONLY = 2


def _is_name_char(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def check_export_name(text: str) -> NameCheck:
    """Classify ``text`` as an ``export`` argument (``NAME`` or ``NAME=value``)."""
    first = text[:1]
    if first.isascii() and first.isdigit():
        return NameCheck.LEADING_DIGIT
    name, sep, _ = text.partition("=")
    if not all(_is_name_char(ch) for ch in name):
        return NameCheck.BAD_CHARACTER
    return NameCheck.ASSIGNMENT if sep else NameCheck.NAME_ONLY


class Environment:
    """Ordered environment entries, looked up by exact ``NAME=`` prefix."""

    def __init__(self, entries: Iterable[str] | Mapping[str, str] = ()) -> None:
        if isinstance(entries, Mapping):
            self._entries = [f"{name}={value}" for name, value in entries.items()]
        else:
            self._entries = list(entries)

    def _index(self, name: str) -> int | None:
        prefix = name + "="
        return next(
            (i for i, entry in enumerate(self._entries) if entry.startswith(prefix)),
            None,
        )

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None when it is not set."""
        index = self._index(name)
        if index is None:
            return None
        return self._entries[index][len(name) + 1 :]

    def set(self, name: str, value: str) -> None:
        """Replace the first entry for ``name``, or append a new one."""
        entry = f"{name}={value}"
        index = self._index(name)
        if index is None:
            self._entries.append(entry)
        else:
            self._entries[index] = entry

    def unset(self, name: str) -> bool:
        """Remove the first entry for ``name``; return whether one was removed."""
        index = self._index(name)
        if index is None:
            return False
        del self._entries[index]
        return True

    def entries(self) -> list[str]:
        """Return the entries in their current order."""
        return list(self._entries)

    def sorted_entries(self) -> list[str]:
        """Return the entries in byte order, as ``export`` lists them."""
        return sorted(self._entries)

    def search_path(self) -> list[str] | None:
        """Return the directories of the last ``PATH`` entry, or None without one."""
        path = None
        for entry in self._entries:
            if entry.startswith("PATH="):
                path = entry[len("PATH=") :]
        if path is None:
            return None
        return [directory for directory in path.split(":") if directory]

    def as_dict(self) -> dict[str, str]:
        """Return the entries as a mapping suitable for child processes."""
        result: dict[str, str] = {}
        for entry in self._entries:
            name, _, value = entry.partition("=")
            result.setdefault(name, value)
        return result

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"