"""Command resolution.

Maps a command name to a builtin, an executable on the search path, or
nothing. Builtins are checked first, so they shadow executables with the
same name.
"""

from __future__ import annotations

import os
from typing import AbstractSet, Iterable, Optional

from .types import Builtin, External, NotFound, ResolvedCommand


def is_executable(path: str) -> bool:
    """Check if path is a regular file the current user may execute."""
    return os.path.isfile(path) and os.access(path, os.X_OK)


def find_executable(name: str, path_dirs: Iterable[str]) -> Optional[str]:
    """Search the path directories in order for an executable ``name``."""
    if not name:
        return None
    for directory in path_dirs:
        candidate = os.path.join(directory, name)
        if is_executable(candidate):
            return candidate
    return None


def resolve(
    name: str,
    builtins: AbstractSet[str],
    path_dirs: Iterable[str],
) -> ResolvedCommand:
    """Resolve a command name.

    A name containing ``/`` is taken as a path (relative to the working
    directory) rather than searched for.
    """
    if not name:
        return NotFound(name)
    if name in builtins:
        return Builtin(name)
    if "/" in name:
        if is_executable(name):
            return External(name, os.path.abspath(name))
        return NotFound(name)
    path = find_executable(name, path_dirs)
    if path is None:
        return NotFound(name)
    return External(name, path)
