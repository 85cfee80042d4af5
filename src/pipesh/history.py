"""Command history for pipesh.

The store is an in-memory list of accepted lines plus a checkpoint: the
index up to which entries have already been persisted by ``history -a`` or
``history -w``. File helpers raise ``OSError``; callers decide whether a
failure is reported or ignored.
"""

from __future__ import annotations

import os
from typing import Iterable


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def read_history_lines(path: str) -> list[str]:
    """Read the non-empty, stripped lines of a history file."""
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


class HistoryStore:
    """Ordered list of past input lines with a persistence checkpoint."""

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: list[str] = list(entries)
        self._checkpoint = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def checkpoint(self) -> int:
        """Index of the first entry not yet appended to a file."""
        return self._checkpoint

    def append(self, line: str) -> None:
        """Add an accepted input line."""
        self._entries.append(line)

    def entries(self) -> list[str]:
        """Return a copy of the whole history."""
        return list(self._entries)

    def since_checkpoint(self) -> list[str]:
        """Return the entries added since the last checkpoint."""
        return self._entries[self._checkpoint:]

    def advance_checkpoint(self) -> None:
        """Mark every current entry as persisted."""
        self._checkpoint = len(self._entries)

    def load(self, lines: Iterable[str]) -> None:
        """Bulk-load lines read at start-up.

        Loaded lines count as already persisted, so a later ``history -a``
        does not write them again.
        """
        self._entries.extend(lines)
        self.advance_checkpoint()

    def extend(self, lines: Iterable[str]) -> None:
        """Append lines without moving the checkpoint (``history -r``)."""
        self._entries.extend(lines)

    def tail(self, count: int) -> list[tuple[int, str]]:
        """Return the last ``count`` entries with their 1-based indices."""
        total = len(self._entries)
        count = max(0, min(total, count))
        start = total - count
        return [(start + i + 1, line) for i, line in enumerate(self._entries[start:])]

    def load_file(self, path: str) -> None:
        """Load a history file at start-up."""
        self.load(read_history_lines(path))

    def read_file(self, path: str) -> None:
        """Append the lines of a history file (``history -r``)."""
        self.extend(read_history_lines(path))

    def append_file(self, path: str) -> int:
        """Append unpersisted entries to a file and advance the checkpoint.

        Returns:
            Number of entries written.
        """
        pending = self.since_checkpoint()
        _ensure_parent(path)
        if pending:
            with open(path, "a", encoding="utf-8") as f:
                f.write("\n".join(pending) + "\n")
        self.advance_checkpoint()
        return len(pending)

    def save_file(self, path: str) -> None:
        """Overwrite a file with the whole history and advance the checkpoint."""
        _ensure_parent(path)
        content = "\n".join(self._entries) + "\n" if self._entries else ""
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        self.advance_checkpoint()
