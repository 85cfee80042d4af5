"""Builtin commands for pipesh.

Builtins run synchronously inside the interpreter. Each handler takes a
``BuiltinContext`` and the arguments after the command name, writes to
``ctx.stdout``/``ctx.stderr`` and returns its exit status. Handlers report
failures on stderr instead of raising.
"""

from typing import TYPE_CHECKING, Callable

from .cd import handle_cd
from .control import handle_exit
from .history import handle_history
from .misc import handle_echo, handle_pwd, handle_type

if TYPE_CHECKING:
    from ..types import BuiltinContext

BuiltinHandler = Callable[["BuiltinContext", list[str]], int]

BUILTINS: dict[str, BuiltinHandler] = {
    "echo": handle_echo,
    "exit": handle_exit,
    "type": handle_type,
    "pwd": handle_pwd,
    "cd": handle_cd,
    "history": handle_history,
}

BUILTIN_NAMES = frozenset(BUILTINS)


def execute_builtin(name: str, args: list[str], ctx: "BuiltinContext") -> bool:
    """Run builtin ``name`` against the streams in ``ctx``.

    Returns:
        True if ``name`` is a builtin (its status is left in
        ``ctx.exit_code``), False otherwise.
    """
    handler = BUILTINS.get(name)
    if handler is None:
        return False
    ctx.exit_code = handler(ctx, args)
    return True


__all__ = [
    "BUILTINS",
    "BUILTIN_NAMES",
    "BuiltinHandler",
    "execute_builtin",
]
