"""Cd builtin implementation.

Usage: cd [dir]

Change the current working directory to dir. With no argument, or with
``~``, change to the home directory. ``~/path`` is expanded the same way.
"""

import os
from typing import TYPE_CHECKING

from ...logger import get_logger

if TYPE_CHECKING:
    from ..types import BuiltinContext

logger = get_logger(__name__)


def _expand_home(target: str, home: str) -> str:
    if target == "~":
        return home
    if target.startswith("~/"):
        return os.path.join(home, target[2:])
    return target


def handle_cd(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the cd builtin."""
    target = args[0] if args else "~"
    new_dir = _expand_home(target, ctx.state.home)

    # Relative paths resolve against the current directory
    if not os.path.isabs(new_dir):
        new_dir = os.path.join(os.getcwd(), new_dir)

    try:
        os.chdir(new_dir)
    except (OSError, ValueError) as e:
        logger.debug("cd to %s failed: %s", new_dir, e)
        ctx.stderr.write(f"cd: {target}: No such file or directory\n")
        return 1

    logger.debug("cwd is now %s", os.getcwd())
    return 0
