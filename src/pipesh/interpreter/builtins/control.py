"""Control builtins: exit."""

from typing import TYPE_CHECKING

from ...logger import get_logger

if TYPE_CHECKING:
    from ..types import BuiltinContext

logger = get_logger(__name__)


def handle_exit(ctx: "BuiltinContext", args: list[str]) -> int:
    """Execute the exit builtin.

    Usage: exit [n]

    Persist the history to $HISTFILE and ask the REPL to stop. Inside a
    multi-stage pipeline exit only sets its own status, like a subshell.
    """
    exit_code = 0
    if args:
        try:
            exit_code = int(args[0]) & 0xFF
        except ValueError:
            ctx.stderr.write(f"exit: {args[0]}: numeric argument required\n")
            exit_code = 2

    if ctx.in_pipeline:
        return exit_code

    state = ctx.state
    if state.histfile and len(state.history) > 0:
        try:
            state.history.save_file(state.histfile)
        except OSError as e:
            # Unwritable history files are not an error for the user
            logger.debug("could not save history to %s: %s", state.histfile, e)

    state.exit_requested = True
    state.exit_code = exit_code
    return exit_code
