"""Tab completion support for pipesh.

``Completer`` decides what a completion request does; ``ExecutableCache``
supplies the executable names it completes against. Wiring both into
readline lives in ``pipesh.cli``.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Iterable

from .logger import get_logger

logger = get_logger(__name__)

BELL = "\x07"


class Outcome(enum.Enum):
    """What a completion request resolved to."""

    NO_MATCH = "no_match"
    SINGLE = "single"
    EXTEND = "extend"
    AMBIGUOUS = "ambiguous"
    LIST = "list"


@dataclass
class Completion:
    """Result of one completion request."""

    outcome: Outcome
    text: str = ""
    """Replacement for the typed prefix; empty when nothing is inserted."""

    matches: list[str] = field(default_factory=list)
    """Sorted candidates starting with the prefix."""

    @property
    def bell(self) -> bool:
        """True when the terminal bell should ring."""
        return self.outcome in (Outcome.NO_MATCH, Outcome.AMBIGUOUS)


def longest_common_prefix(words: Iterable[str]) -> str:
    """Return the longest prefix shared by every word."""
    words = list(words)
    if not words:
        return ""
    prefix = words[0]
    for word in words[1:]:
        while not word.startswith(prefix):
            prefix = prefix[:-1]
            if not prefix:
                return ""
    return prefix


class Completer:
    """Command name completion with bell-then-list behaviour.

    A request whose matches share nothing beyond the typed prefix rings the
    bell; repeating the request for the same prefix lists the matches.
    """

    def __init__(self):
        self._last_prefix: str | None = None
        self._repeats = 0

    def complete(self, prefix: str, candidates: Iterable[str]) -> Completion:
        """Complete ``prefix`` against ``candidates``."""
        matches = sorted({c for c in candidates if c.startswith(prefix)})

        if prefix != self._last_prefix:
            self._repeats = 0
            self._last_prefix = prefix

        if not matches:
            return Completion(Outcome.NO_MATCH)

        if len(matches) == 1:
            self._repeats = 0
            return Completion(Outcome.SINGLE, matches[0] + " ", matches)

        lcp = longest_common_prefix(matches)
        if len(lcp) > len(prefix):
            self._repeats = 0
            return Completion(Outcome.EXTEND, lcp, matches)

        self._repeats += 1
        if self._repeats == 1:
            return Completion(Outcome.AMBIGUOUS, "", matches)

        self._repeats = 0
        return Completion(Outcome.LIST, "", matches)


class ExecutableCache:
    """Names of the files in the search path directories.

    Built from directory listings only; staleness is accepted until the next
    ``refresh``.
    """

    def __init__(self, path_dirs: Iterable[str] = ()):
        self._path_dirs = list(path_dirs)
        self._names: frozenset[str] = frozenset()
        self.refresh()

    @property
    def names(self) -> frozenset[str]:
        return self._names

    def refresh(self, path_dirs: Iterable[str] | None = None) -> None:
        """Rescan the directories, optionally switching to a new path."""
        if path_dirs is not None:
            self._path_dirs = list(path_dirs)
        names: set[str] = set()
        for directory in self._path_dirs:
            try:
                names.update(os.listdir(directory))
            except OSError:
                # Missing or unreadable directories are skipped
                continue
        self._names = frozenset(names)
        logger.debug("executable cache holds %d names", len(self._names))
