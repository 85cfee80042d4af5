"""Main Shell class - the primary API for pipesh.

Example usage:
    from pipesh import Shell

    # Synchronous usage (for the REPL, scripts)
    shell = Shell()
    shell.run("ls | wc -l")   # output goes to the real terminal

    # Async usage, capturing output
    shell = Shell(capture=True)
    result = await shell.exec("echo hello world")
    print(result.stdout)  # "hello world\\n"
"""

import asyncio
import io
import sys
from typing import Iterable, Optional

import nest_asyncio  # type: ignore[import-untyped]

from .config import ShellConfig
from .errors import RedirectionError
from .history import HistoryStore
from .interpreter import Interpreter, SessionState
from .logger import get_logger
from .parser import parse
from .types import ExecResult

logger = get_logger(__name__)


class Shell:
    """Main pipesh interpreter class.

    Parses command lines into pipelines and runs them, builtins in-process
    and everything else as child processes.
    """

    def __init__(
        self,
        *,
        config: Optional[ShellConfig] = None,
        path: Optional[Iterable[str]] = None,
        history: Optional[HistoryStore] = None,
        capture: bool = False,
    ):
        """Initialize the shell.

        Args:
            config: Settings. If not provided, read from the environment.
            path: Search path directories, overriding ``config.path``.
            history: History store. If not provided, an empty one is created.
            capture: Collect terminal output in ``ExecResult`` instead of
                writing to the real stdout/stderr. Captured shells do not
                give the first stage the real stdin.
        """
        self._config = config or ShellConfig.from_env()
        self._capture = capture

        self._state = SessionState(
            history=history if history is not None else HistoryStore(),
            path_dirs=list(path) if path is not None else self._config.path_dirs,
            home=self._config.home,
            histfile=self._config.histfile,
        )

    @property
    def config(self) -> ShellConfig:
        """Get the configuration."""
        return self._config

    @property
    def state(self) -> SessionState:
        """Get the session state."""
        return self._state

    @property
    def history(self) -> HistoryStore:
        """Get the command history."""
        return self._state.history

    @property
    def should_exit(self) -> bool:
        """True once the ``exit`` builtin has run."""
        return self._state.exit_requested

    def load_history(self) -> None:
        """Load the configured history file, ignoring unreadable files."""
        histfile = self._state.histfile
        if not histfile:
            return
        try:
            self._state.history.load_file(histfile)
        except OSError as e:
            logger.debug("could not load history from %s: %s", histfile, e)

    def refresh_path(self, path_dirs: Optional[Iterable[str]] = None) -> None:
        """Replace the search path snapshot (between command lines only)."""
        if path_dirs is None:
            path_dirs = ShellConfig.from_env().path_dirs
        self._state.path_dirs = list(path_dirs)

    async def exec(self, line: str) -> ExecResult:
        """Execute one command line.

        Args:
            line: The command line to execute.

        Returns:
            ExecResult with the exit code, plus captured output when the
            shell was created with ``capture=True``.
        """
        if not line.strip():
            return ExecResult()

        stdout = io.StringIO() if self._capture else None
        stderr = io.StringIO() if self._capture else None

        try:
            parsed = parse(line)
        except RedirectionError as e:
            message = f"pipesh: syntax error: {e}\n"
            if stderr is None:
                sys.stderr.write(message)
                sys.stderr.flush()
                message = ""
            return ExecResult(stdout="", stderr=message, exit_code=2)

        logger.debug("parsed %r into %d stage(s)", line, len(parsed))

        interpreter = Interpreter(self._state, stdout=stdout, stderr=stderr)
        stages = interpreter.plan(parsed)
        exit_code = await interpreter.execute_pipeline(stages)

        return ExecResult(
            stdout=stdout.getvalue() if stdout is not None else "",
            stderr=stderr.getvalue() if stderr is not None else "",
            exit_code=exit_code,
        )

    def run(self, line: str) -> ExecResult:
        """Execute one command line synchronously.

        This is a convenience wrapper around exec() that works in any context,
        including Jupyter notebooks and async frameworks.

        Example:
            >>> shell = Shell(capture=True)
            >>> result = shell.run('echo "Hello, World!"')
            >>> print(result.stdout)
            Hello, World!
        """
        try:
            asyncio.get_running_loop()
            # We're in an existing event loop (Jupyter, async framework, etc.)
            # Apply nest_asyncio to allow nested event loops
            nest_asyncio.apply()
        except RuntimeError:
            # No running event loop, asyncio.run() will work fine
            pass
        return asyncio.run(self.exec(line))
