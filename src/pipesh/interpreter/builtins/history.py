"""History builtin implementation.

Usage: history [n]
       history -a [file]
       history -r [file]
       history -w [file]

With no arguments, list the whole history. With a number, list only the
last n entries, keeping their original line numbers.

Options:
  -a    Append the entries added since the last -a/-w to file
  -r    Read file and append its lines to the history
  -w    Write the whole history to file

``file`` defaults to $HISTFILE.
"""

from typing import TYPE_CHECKING, Optional

from ...logger import get_logger

if TYPE_CHECKING:
    from ..types import BuiltinContext

logger = get_logger(__name__)

FILE_OPTIONS = ("-a", "-r", "-w")


def handle_history(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the history builtin."""
    if args and args[0] in FILE_OPTIONS:
        return _history_file(ctx, args[0], args[1] if len(args) > 1 else None)

    history = ctx.state.history
    count = len(history)
    if args:
        try:
            count = int(args[0])
        except ValueError:
            # Non-numeric argument lists everything
            pass

    for index, line in history.tail(count):
        ctx.stdout.write(f"{index:>5}  {line}\n")
    return 0


def _history_file(ctx: "BuiltinContext", option: str, path: Optional[str]) -> int:
    path = path or ctx.state.histfile
    if not path:
        ctx.stderr.write(f"history: {option}: no history file\n")
        return 1

    history = ctx.state.history
    try:
        if option == "-a":
            written = history.append_file(path)
            logger.debug("appended %d history entries to %s", written, path)
        elif option == "-r":
            history.read_file(path)
        else:
            history.save_file(path)
    except OSError as e:
        logger.debug("history %s %s failed: %s", option, path, e)
        if option == "-r":
            ctx.stderr.write(f"history: {path}: No such file or directory\n")
        else:
            ctx.stderr.write(f"history: {path}: Permission denied\n")
        return 1
    return 0
