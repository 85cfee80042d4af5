"""Exceptions raised by pipesh."""


class ShellError(Exception):
    """Base class for pipesh errors."""


class RedirectionError(ShellError):
    """A redirection operator was not followed by a target."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"missing redirection target after '{operator}'")
