"""Interpreter module for pipesh."""

from .builtins import BUILTIN_NAMES, BUILTINS, execute_builtin
from .interpreter import Interpreter
from .resolver import find_executable, resolve
from .types import (
    Builtin,
    BuiltinContext,
    External,
    NotFound,
    ResolvedCommand,
    SessionState,
    Stage,
)

__all__ = [
    "BUILTIN_NAMES",
    "BUILTINS",
    "Builtin",
    "BuiltinContext",
    "External",
    "Interpreter",
    "NotFound",
    "ResolvedCommand",
    "SessionState",
    "Stage",
    "execute_builtin",
    "find_executable",
    "resolve",
]
