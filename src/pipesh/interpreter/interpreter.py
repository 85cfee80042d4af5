"""Interpreter - Pipeline Execution Engine.

Builds the stream graph of a pipeline and runs it:

- builtins run synchronously, in pipeline order, on the event loop thread;
- external commands run as child processes launched with
  ``asyncio.create_subprocess_exec`` and run concurrently once started.

Links between stages:

    external -> external   OS pipe, no copying through the interpreter
    external -> builtin    pipe drained and discarded (builtins ignore stdin)
    builtin  -> external   builtin output buffered, written to the child's
                           stdin, which is then closed (one end of input)
    builtin  -> builtin    buffered output discarded

A stage that cannot be resolved or whose redirection target cannot be
opened halts construction: the stages before it run to completion, the
stages after it are never started.
"""

from __future__ import annotations

import asyncio
import codecs
import errno
import io
import os
import sys
from typing import IO, Optional, TextIO, Union

from ..logger import get_logger
from ..parser import ParsedStage
from .builtins import BUILTIN_NAMES, execute_builtin
from .resolver import resolve
from .types import Builtin, BuiltinContext, External, NotFound, SessionState, Stage

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024

EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126
EXIT_REDIRECT_FAILED = 1

# What a stage reads from: the interpreter's own stdin, the read end of an
# OS pipe, or bytes buffered from a builtin.
_INHERIT = object()
StageInput = Union[object, int, bytes]


def _exit_status(returncode: int) -> int:
    """Map a child's return code to a shell status (128 + signal)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def _release(source: StageInput) -> None:
    """Close a stage input that nothing will read."""
    if isinstance(source, int):
        os.close(source)


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


async def _feed(writer: asyncio.StreamWriter, data: bytes, name: str) -> None:
    """Write buffered data to a child's stdin, then signal end of input."""
    try:
        if data:
            writer.write(data)
            await writer.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.debug("%s closed its input before reading everything", name)
    finally:
        writer.close()


async def _pump(reader: asyncio.StreamReader, sink: TextIO) -> None:
    """Copy a child's output into a text sink as it arrives."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await reader.read(CHUNK_SIZE)
        if not chunk:
            break
        sink.write(decoder.decode(chunk))
    sink.write(decoder.decode(b"", final=True))


async def _drain(reader: asyncio.StreamReader) -> None:
    """Read and drop a child's output so it never blocks on a full pipe."""
    while await reader.read(CHUNK_SIZE):
        pass


class Interpreter:
    """Pipeline interpreter.

    Args:
        state: Session state shared with the builtins.
        stdout: Sink for the pipeline's terminal output. ``None`` means the
            real stdout, which external commands then inherit directly.
        stderr: Sink for error output, ``None`` for the real stderr.
    """

    def __init__(
        self,
        state: SessionState,
        *,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._state = state
        self._stdout = stdout
        self._stderr = stderr

    @property
    def state(self) -> SessionState:
        """Get the session state."""
        return self._state

    @property
    def capturing(self) -> bool:
        """True when terminal output goes to sinks instead of real streams."""
        return self._stdout is not None

    def _out(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def _err(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def _report(self, message: str) -> None:
        err = self._err()
        err.write(message)
        err.flush()

    def _flush(self) -> None:
        self._out().flush()
        self._err().flush()

    def plan(self, parsed: list[ParsedStage]) -> list[Stage]:
        """Resolve every parsed stage against the current search path."""
        stages = []
        for item in parsed:
            command = resolve(item.name, BUILTIN_NAMES, self._state.path_dirs)
            logger.debug("resolved %r -> %s", item.name, command)
            stages.append(Stage(command=command, args=item.args, redirections=item.redirections))
        return stages

    async def execute_pipeline(self, stages: list[Stage]) -> int:
        """Run a pipeline and wait for every stage to finish.

        Returns:
            Exit status of the pipeline.
        """
        procs: list[asyncio.subprocess.Process] = []
        tasks: list[asyncio.Future] = []
        opened: list[IO] = []
        source: StageInput = _INHERIT
        last_proc: Optional[asyncio.subprocess.Process] = None
        exit_code = 0
        in_pipeline = len(stages) > 1

        try:
            for i, stage in enumerate(stages):
                is_last = i == len(stages) - 1
                next_command = None if is_last else stages[i + 1].command
                command = stage.command
                last_proc = None

                if isinstance(command, NotFound):
                    _release(source)
                    self._report(f"{command.name}: command not found\n")
                    exit_code = EXIT_NOT_FOUND
                    break

                try:
                    out_file, err_file = self._open_redirections(stage, is_last, opened)
                except OSError as e:
                    _release(source)
                    self._report(f"pipesh: {e.filename}: {e.strerror}\n")
                    exit_code = EXIT_REDIRECT_FAILED
                    break

                if isinstance(command, Builtin):
                    # Builtins never read stdin; an external upstream is
                    # already being drained.
                    _release(source)
                    exit_code, source = self._run_builtin(
                        stage, is_last, out_file, err_file, next_command, in_pipeline
                    )
                    continue

                try:
                    proc, source = await self._spawn(
                        command, stage, source, is_last, out_file, err_file, next_command, tasks
                    )
                except OSError as e:
                    self._report(f"pipesh: {command.name}: {e.strerror}\n")
                    exit_code = EXIT_CANNOT_EXECUTE
                    break
                procs.append(proc)
                last_proc = proc

            await asyncio.gather(*tasks, *(proc.wait() for proc in procs))
        finally:
            for f in opened:
                f.close()
            self._flush()

        for proc in procs:
            logger.debug("pid %d exited with %s", proc.pid, proc.returncode)

        if last_proc is not None:
            exit_code = _exit_status(last_proc.returncode)
        return exit_code

    def _open_redirections(
        self, stage: Stage, is_last: bool, opened: list[IO]
    ) -> tuple[Optional[TextIO], Optional[TextIO]]:
        """Open the stage's file targets.

        Builtins in the middle of a pipeline only write to their pipe, so
        their targets are not opened.
        """
        if isinstance(stage.command, Builtin) and not is_last:
            return None, None

        redirections = stage.redirections
        out_file = err_file = None
        if redirections.stdout is not None:
            out_file = self._open_target(redirections.stdout, redirections.stdout_append)
            opened.append(out_file)
        if redirections.stderr is not None:
            err_file = self._open_target(redirections.stderr, redirections.stderr_append)
            opened.append(err_file)
        return out_file, err_file

    @staticmethod
    def _open_target(path: str, append: bool) -> TextIO:
        try:
            _ensure_parent(path)
            return open(path, "a" if append else "w", encoding="utf-8")
        except ValueError as e:
            # Paths the OS cannot represent, e.g. with an embedded NUL
            raise OSError(errno.EINVAL, os.strerror(errno.EINVAL), path) from e

    def _run_builtin(
        self,
        stage: Stage,
        is_last: bool,
        out_file: Optional[TextIO],
        err_file: Optional[TextIO],
        next_command,
        in_pipeline: bool,
    ) -> tuple[int, StageInput]:
        """Run a builtin stage synchronously.

        A builtin that is not the last stage writes into an in-memory
        buffer, so the memory held between two stages is bounded by that
        builtin's output. Builtin output is small and finite (a history
        listing at most), so it is not streamed.

        Returns:
            The builtin's status and the input for the next stage.
        """
        buffer: Optional[io.StringIO] = None
        if is_last:
            stdout = out_file if out_file is not None else self._out()
        else:
            buffer = io.StringIO()
            stdout = buffer
        stderr = err_file if err_file is not None else self._err()

        ctx = BuiltinContext(
            state=self._state,
            stdout=stdout,
            stderr=stderr,
            in_pipeline=in_pipeline,
        )
        execute_builtin(stage.command.name, stage.args[1:], ctx)
        stdout.flush()
        stderr.flush()

        if buffer is None or not isinstance(next_command, External):
            return ctx.exit_code, b""
        return ctx.exit_code, buffer.getvalue().encode("utf-8")

    async def _spawn(
        self,
        command: External,
        stage: Stage,
        source: StageInput,
        is_last: bool,
        out_file: Optional[TextIO],
        err_file: Optional[TextIO],
        next_command,
        tasks: list[asyncio.Future],
    ) -> tuple[asyncio.subprocess.Process, StageInput]:
        """Launch an external stage.

        Returns:
            The process and the input for the next stage.
        """
        PIPE = asyncio.subprocess.PIPE

        feed: Optional[bytes] = None
        if source is _INHERIT:
            stdin = asyncio.subprocess.DEVNULL if self.capturing else None
        elif isinstance(source, int):
            stdin = source
        else:
            stdin = PIPE
            feed = source

        next_source: StageInput = b""
        write_fd: Optional[int] = None
        pump_stdout = drain_stdout = False
        if out_file is not None:
            # Redirected away from the pipe: the next stage reads nothing
            stdout = out_file
        elif is_last:
            stdout = PIPE if self.capturing else None
            pump_stdout = self.capturing
        elif isinstance(next_command, Builtin):
            stdout = PIPE
            drain_stdout = True
        else:
            next_source, write_fd = os.pipe()
            stdout = write_fd

        pump_stderr = err_file is None and self._stderr is not None
        if err_file is not None:
            stderr = err_file
        else:
            stderr = PIPE if pump_stderr else None

        self._flush()
        try:
            proc = await asyncio.create_subprocess_exec(
                stage.args[0],
                *stage.args[1:],
                executable=command.path,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError:
            _release(next_source)
            raise
        finally:
            _release(source)
            if write_fd is not None:
                os.close(write_fd)

        logger.debug("started %s (pid %d)", command.path, proc.pid)

        if feed is not None:
            tasks.append(asyncio.ensure_future(_feed(proc.stdin, feed, command.name)))
        if pump_stdout:
            tasks.append(asyncio.ensure_future(_pump(proc.stdout, self._out())))
        elif drain_stdout:
            tasks.append(asyncio.ensure_future(_drain(proc.stdout)))
        if pump_stderr:
            tasks.append(asyncio.ensure_future(_pump(proc.stderr, self._err())))

        return proc, next_source
