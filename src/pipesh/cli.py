"""Main CLI entry point for pipesh"""

import argparse
import signal
import sys
from typing import Optional

from .completion import BELL, Completer, ExecutableCache, Outcome
from .config import ShellConfig
from .interpreter import BUILTIN_NAMES
from .logger import configure_logging, get_logger
from .shell import Shell

try:
    import readline
except ImportError:  # pragma: no cover - platforms without GNU readline
    readline = None  # type: ignore[assignment]

logger = get_logger(__name__)


class ReadlineCompleter:
    """Adapter between readline's completer protocol and ``Completer``.

    Only the first word of the line (the command name) is completed.
    """

    def __init__(self, cache: ExecutableCache, prompt: str = "$ "):
        self.cache = cache
        self.prompt = prompt
        self.engine = Completer()
        self.matches: list[str] = []

    def candidates(self) -> set[str]:
        return set(BUILTIN_NAMES) | set(self.cache.names)

    def complete(self, text: str, state: int) -> Optional[str]:
        """Readline completion function."""
        if state == 0:
            self.matches = []
            line = readline.get_line_buffer() if readline else text
            if line[:len(line) - len(text)].strip():
                # Not the command word
                return None

            result = self.engine.complete(text, self.candidates())
            if result.bell:
                sys.stdout.write(BELL)
                sys.stdout.flush()
            if result.outcome is Outcome.LIST:
                sys.stdout.write("\n" + "  ".join(result.matches) + "\n")
                sys.stdout.write(self.prompt + line)
                sys.stdout.flush()
            if result.text:
                self.matches = [result.text]

        if state < len(self.matches):
            return self.matches[state]
        return None


def init_readline(completer: ReadlineCompleter, shell: Shell) -> None:
    """Configure readline: emacs keys, Tab completion, history."""
    if readline is None:
        return
    readline.parse_and_bind("set editing-mode emacs")
    readline.parse_and_bind("tab: complete")
    # Only whitespace separates words for completion purposes
    readline.set_completer_delims(" \t\n")
    readline.set_completer(completer.complete)
    for line in shell.history.entries():
        readline.add_history(line)


def repl(shell: Shell, cache: Optional[ExecutableCache] = None) -> int:
    """Read-eval loop. Returns the exit status of the session.

    Ctrl-C at the prompt cancels the line; Ctrl-C while a command runs
    abandons that command and returns to the prompt.
    """
    config = shell.config
    if cache is None:
        cache = ExecutableCache(shell.state.path_dirs)
    completer = ReadlineCompleter(cache, prompt=config.prompt)

    shell.load_history()
    init_readline(completer, shell)

    def refresh_cache(signum, frame):
        shell.refresh_path()
        cache.refresh(shell.state.path_dirs)

    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, refresh_cache)

    while not shell.should_exit:
        try:
            line = input(config.prompt)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if line.strip():
            shell.history.append(line)
        try:
            shell.run(line.strip())
        except KeyboardInterrupt:
            logger.debug("interrupted: %r", line)
            print()

    return shell.state.exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipesh",
        description="A small interactive shell with pipelines and redirection.",
    )
    parser.add_argument("-c", dest="command", metavar="LINE", help="run LINE and exit")
    parser.add_argument("--histfile", help="history file (default: $HISTFILE)")
    parser.add_argument("--log-level", help="logging level (default: $PIPESH_LOG_LEVEL or WARNING)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ShellConfig.from_args(histfile=args.histfile, log_level=args.log_level)
    configure_logging(config.log_level, config.log_file)

    shell = Shell(config=config)
    if args.command is not None:
        result = shell.run(args.command)
        return shell.state.exit_code if shell.should_exit else result.exit_code

    return repl(shell)


if __name__ == "__main__":
    sys.exit(main())
