"""Interpreter types for pipesh."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TextIO, Union

from ..history import HistoryStore
from ..parser import Redirections


@dataclass(frozen=True)
class Builtin:
    """A command implemented inside the interpreter."""

    name: str


@dataclass(frozen=True)
class External:
    """An executable found on the search path."""

    name: str
    path: str


@dataclass(frozen=True)
class NotFound:
    """A command name that resolved to nothing."""

    name: str


ResolvedCommand = Union[Builtin, External, NotFound]


@dataclass
class Stage:
    """One resolved command of a pipeline."""

    command: ResolvedCommand
    args: list[str]
    """Full argument vector, command name included."""

    redirections: Redirections = field(default_factory=Redirections)


@dataclass
class SessionState:
    """State that outlives a single command line.

    Owned by ``Shell``. The history is mutated only by the ``history``
    builtin and by the REPL appending accepted lines; the search path is
    replaced only by an explicit refresh, never mid-pipeline.
    """

    history: HistoryStore = field(default_factory=HistoryStore)
    path_dirs: list[str] = field(default_factory=list)
    """Snapshot of the search path directories, in lookup order."""

    home: str = "/"
    """Target of ``cd`` with no argument or ``~``."""

    histfile: Optional[str] = None
    """History file written by ``exit`` and used by ``history -a/-r/-w``."""

    exit_requested: bool = False
    """Set by the ``exit`` builtin; the REPL stops when it sees it."""

    exit_code: int = 0


@dataclass
class BuiltinContext:
    """Everything a builtin may touch while it runs."""

    state: SessionState
    stdout: TextIO
    stderr: TextIO
    in_pipeline: bool = False
    """True when the builtin is one stage of a multi-stage pipeline."""

    exit_code: int = 0
    """Set by the builtin before it returns."""
