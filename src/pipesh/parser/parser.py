"""Parser for pipesh command lines.

Turns the lexer's word list into a pipeline: a list of stages, each with
its argument vector and output redirections.

Grammar (informal):
    pipeline   ::= stage ( '|' stage )*
    stage      ::= ( word | redirection )*
    redirection::= ( '>' | '1>' | '>>' | '1>>' | '2>' | '2>>' ) word
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..errors import RedirectionError
from .lexer import is_operator, tokenize

PIPE = "|"

# operator -> (fd, append)
REDIRECT_OPERATORS: dict[str, tuple[int, bool]] = {
    ">": (1, False),
    "1>": (1, False),
    ">>": (1, True),
    "1>>": (1, True),
    "2>": (2, False),
    "2>>": (2, True),
}


@dataclass
class Redirections:
    """Output redirections of a single stage."""

    stdout: Optional[str] = None
    """File receiving stdout, if redirected."""

    stdout_append: bool = False
    """Open the stdout target in append mode instead of truncating."""

    stderr: Optional[str] = None
    """File receiving stderr, if redirected."""

    stderr_append: bool = False
    """Open the stderr target in append mode instead of truncating."""


@dataclass
class ParsedStage:
    """One command of a pipeline, before resolution."""

    args: list[str] = field(default_factory=list)
    redirections: Redirections = field(default_factory=Redirections)

    @property
    def name(self) -> str:
        """The command name, empty for an empty stage."""
        return self.args[0] if self.args else ""


def split_pipeline(tokens: list[str]) -> list[list[str]]:
    """Split a token list on unquoted ``|`` tokens.

    Always returns at least one stage. Empty stages (leading, trailing or
    doubled pipes) are kept as empty lists.
    """
    stages: list[list[str]] = [[]]
    for token in tokens:
        if is_operator(token, PIPE):
            stages.append([])
        else:
            stages[-1].append(token)
    return stages


def extract_redirections(tokens: list[str]) -> tuple[list[str], Redirections]:
    """Remove redirection operators and their targets from a token list.

    A later operator for the same stream overrides an earlier one.

    Raises:
        RedirectionError: If an operator is the last token.
    """
    args: list[str] = []
    redirections = Redirections()

    i = 0
    while i < len(tokens):
        token = tokens[i]
        redirect = REDIRECT_OPERATORS.get(token)
        if redirect is None or getattr(token, "quoted", False):
            args.append(token)
            i += 1
            continue

        if i + 1 >= len(tokens):
            raise RedirectionError(token)
        target = tokens[i + 1]
        fd, append = redirect
        if fd == 1:
            redirections.stdout = target
            redirections.stdout_append = append
        else:
            redirections.stderr = target
            redirections.stderr_append = append
        i += 2

    return args, redirections


def parse(line: str) -> list[ParsedStage]:
    """Parse a command line into pipeline stages.

    Raises:
        RedirectionError: If a redirection operator has no target.
    """
    stages = []
    for words in split_pipeline(tokenize(line)):
        args, redirections = extract_redirections(words)
        stages.append(ParsedStage(args=args, redirections=redirections))
    return stages
