"""pipesh - a small interactive shell.

Parses command lines into pipelines, runs builtins in-process and other
commands as child processes, and wires their streams together.
"""

from .completion import Completer, Completion, ExecutableCache, Outcome, longest_common_prefix
from .config import ShellConfig
from .errors import RedirectionError, ShellError
from .history import HistoryStore
from .parser import extract_redirections, parse, split_pipeline, tokenize
from .shell import Shell
from .types import ExecResult

__version__ = "0.1.0"

__all__ = [
    "Completer",
    "Completion",
    "ExecResult",
    "ExecutableCache",
    "HistoryStore",
    "Outcome",
    "RedirectionError",
    "Shell",
    "ShellConfig",
    "ShellError",
    "extract_redirections",
    "longest_common_prefix",
    "parse",
    "split_pipeline",
    "tokenize",
]
