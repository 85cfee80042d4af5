"""Test helpers: shell factories and small executables for pipeline tests."""

import os
import stat
from pathlib import Path
from typing import Optional

from pipesh import HistoryStore, Shell, ShellConfig


def make_shell(
    *,
    path: Optional[list[str]] = None,
    histfile: Optional[str] = None,
    home: Optional[str] = None,
    history: Optional[HistoryStore] = None,
) -> Shell:
    """Create a capturing shell isolated from the user's HISTFILE."""
    config = ShellConfig(
        path=os.environ.get("PATH", ""),
        histfile=histfile,
        home=home or os.path.expanduser("~"),
    )
    return Shell(config=config, path=path, history=history, capture=True)


def write_script(directory: Path, name: str, body: str) -> Path:
    """Write an executable /bin/sh script and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    script = directory / name
    script.write_text("#!/bin/sh\n" + body + "\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


ARGV_SCRIPT = 'for a in "$@"; do printf "[%s]" "$a"; done; echo'
"""Prints each argument in brackets, so argument boundaries are visible."""
