"""Configuration management for pipesh."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional


def _default_home() -> str:
    return os.path.expanduser("~")


@dataclass
class ShellConfig:
    """Settings read once at start-up."""

    path: str = ""
    """Search path, ``os.pathsep``-separated (``$PATH``)."""

    histfile: Optional[str] = None
    """History file loaded at start-up and written on exit (``$HISTFILE``)."""

    home: str = field(default_factory=_default_home)
    """Directory ``cd`` goes to with no argument or ``~`` (``$HOME``)."""

    prompt: str = "$ "
    """Interactive prompt (``$PIPESH_PROMPT``)."""

    log_level: str = "WARNING"
    """Logging level name (``$PIPESH_LOG_LEVEL``)."""

    log_file: Optional[str] = None
    """Write logs to this file instead of stderr (``$PIPESH_LOG_FILE``)."""

    @property
    def path_dirs(self) -> list[str]:
        """The search path as a list of directories, empty entries dropped."""
        return [d for d in self.path.split(os.pathsep) if d]

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> ShellConfig:
        """Create configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            path=env.get("PATH", ""),
            histfile=env.get("HISTFILE") or None,
            home=env.get("HOME") or _default_home(),
            prompt=env.get("PIPESH_PROMPT", "$ "),
            log_level=env.get("PIPESH_LOG_LEVEL", "WARNING"),
            log_file=env.get("PIPESH_LOG_FILE") or None,
        )

    @classmethod
    def from_args(
        cls,
        histfile: Optional[str] = None,
        log_level: Optional[str] = None,
        environ: Optional[dict[str, str]] = None,
    ) -> ShellConfig:
        """Create configuration from the environment, overridden by CLI args."""
        config = cls.from_env(environ)
        if histfile:
            config = replace(config, histfile=histfile)
        if log_level:
            config = replace(config, log_level=log_level)
        return config
