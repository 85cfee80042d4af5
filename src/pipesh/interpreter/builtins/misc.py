"""Miscellaneous builtins: echo, pwd, type.

These are simple builtins that don't need their own files.
"""

import os
from typing import TYPE_CHECKING

from ..resolver import find_executable

if TYPE_CHECKING:
    from ..types import BuiltinContext


def handle_echo(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the echo builtin - print arguments separated by spaces."""
    ctx.stdout.write(" ".join(args) + "\n")
    return 0


def handle_pwd(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the pwd builtin."""
    ctx.stdout.write(os.getcwd() + "\n")
    return 0


def handle_type(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the type builtin.

    Usage: type name [name ...]

    For each name, report whether it is a builtin or where the executable
    lives on the search path. Missing names make the exit status 1.
    """
    from . import BUILTIN_NAMES

    exit_code = 0
    for name in args:
        if name in BUILTIN_NAMES:
            ctx.stdout.write(f"{name} is a shell builtin\n")
            continue
        path = find_executable(name, ctx.state.path_dirs)
        if path:
            ctx.stdout.write(f"{name} is {path}\n")
        else:
            ctx.stdout.write(f"{name}: not found\n")
            exit_code = 1
    return exit_code
