"""Public types for pipesh."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExecResult:
    """Result of executing one command line.

    For a capturing ``Shell`` the terminal output of the pipeline is
    collected in ``stdout``/``stderr``. A shell attached to the real
    streams leaves them empty.
    """

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
