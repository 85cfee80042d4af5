"""Tests for the command line entry point."""

import signal

import pytest

from helpers import make_shell, write_script
from pipesh import ExecutableCache
from pipesh.cli import build_parser, main, repl


@pytest.fixture(autouse=True)
def _no_histfile(monkeypatch):
    monkeypatch.delenv("HISTFILE", raising=False)


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.command is None
        assert args.histfile is None
        assert args.log_level is None

    def test_options(self):
        args = build_parser().parse_args(["-c", "echo hi", "--histfile", "h", "--log-level", "DEBUG"])
        assert args.command == "echo hi"
        assert args.histfile == "h"
        assert args.log_level == "DEBUG"


class TestMain:
    """Test one-shot execution with -c."""

    def test_runs_command(self, capfd):
        assert main(["-c", "echo from cli"]) == 0
        assert capfd.readouterr().out == "from cli\n"

    def test_external_in_pipeline(self, capfd):
        assert main(["-c", "echo piped | cat"]) == 0
        assert capfd.readouterr().out == "piped\n"

    def test_not_found_status(self, capfd):
        assert main(["-c", "no_such_cmd_xyz"]) == 127
        assert capfd.readouterr().err == "no_such_cmd_xyz: command not found\n"

    def test_exit_status(self, tmp_path):
        histfile = tmp_path / "hist"
        assert main(["-c", "exit 5", "--histfile", str(histfile)]) == 5

    def test_syntax_error(self, capfd):
        assert main(["-c", "echo >"]) == 2
        assert "missing redirection target" in capfd.readouterr().err


@pytest.fixture
def typed(monkeypatch):
    """Script the lines the REPL reads.

    Items are returned by ``input()`` in order: strings as typed lines,
    exceptions are raised, callables are called for the line. End of the
    script is end of input.
    """
    monkeypatch.setattr("pipesh.cli.readline", None)
    previous = signal.getsignal(signal.SIGUSR1) if hasattr(signal, "SIGUSR1") else None

    def install(*items):
        queue = list(items)

        def fake_input(prompt=""):
            if not queue:
                raise EOFError
            item = queue.pop(0)
            if isinstance(item, BaseException):
                raise item
            if callable(item):
                return item()
            return item

        monkeypatch.setattr("builtins.input", fake_input)

    yield install

    if previous is not None:
        signal.signal(signal.SIGUSR1, previous)


class TestRepl:
    """Test the read-eval loop."""

    def test_appends_accepted_lines(self, typed):
        typed("echo one", "   ", "echo two", "exit")
        shell = make_shell()
        assert repl(shell) == 0
        assert shell.history.entries() == ["echo one", "echo two", "exit"]

    def test_stops_on_exit(self, typed, tmp_path):
        out = tmp_path / "never.txt"
        typed("exit 3", f"echo never > {out}")
        shell = make_shell()
        assert repl(shell) == 3
        assert shell.history.entries() == ["exit 3"]
        assert not out.exists()

    def test_stops_on_end_of_input(self, typed, capsys):
        typed("echo last")
        shell = make_shell()
        assert repl(shell) == 0
        assert shell.should_exit is False
        assert capsys.readouterr().out == "\n"

    def test_loads_histfile(self, typed, tmp_path):
        histfile = tmp_path / "history"
        histfile.write_text("old one\nold two\n")
        typed("history -a", "exit")
        shell = make_shell(histfile=str(histfile))
        repl(shell)
        assert shell.history.entries() == ["old one", "old two", "history -a", "exit"]
        assert histfile.read_text() == "old one\nold two\nhistory -a\nexit\n"

    def test_ctrl_c_at_prompt_cancels_line(self, typed):
        typed(KeyboardInterrupt(), "exit")
        shell = make_shell()
        assert repl(shell) == 0
        assert shell.history.entries() == ["exit"]

    def test_ctrl_c_during_command_returns_to_prompt(self, typed, tmp_path):
        out = tmp_path / "after.txt"
        shell = make_shell()
        run = shell.run

        def interrupted(line):
            if line.startswith("sleep"):
                raise KeyboardInterrupt
            return run(line)

        shell.run = interrupted
        typed("sleep 5", f"echo after > {out}", "exit")
        assert repl(shell) == 0
        assert out.read_text() == "after\n"
        assert shell.history.entries()[0] == "sleep 5"

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="no SIGUSR1")
    def test_sigusr1_refreshes_cache(self, typed, monkeypatch, bin_dir):
        monkeypatch.setenv("PATH", str(bin_dir))
        shell = make_shell(path=[str(bin_dir)])
        cache = ExecutableCache([str(bin_dir)])
        assert "later" not in cache.names

        def install_and_signal():
            write_script(bin_dir, "later", "true")
            signal.raise_signal(signal.SIGUSR1)
            return "exit"

        typed(install_and_signal)
        repl(shell, cache)
        assert "later" in cache.names
