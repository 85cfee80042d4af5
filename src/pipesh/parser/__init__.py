"""Parser module for pipesh."""

from .lexer import (
    Token,
    tokenize,
    is_operator,
)
from .parser import (
    ParsedStage,
    Redirections,
    REDIRECT_OPERATORS,
    extract_redirections,
    parse,
    split_pipeline,
)

__all__ = [
    # Lexer
    "Token",
    "tokenize",
    "is_operator",
    # Parser
    "ParsedStage",
    "Redirections",
    "REDIRECT_OPERATORS",
    "extract_redirections",
    "parse",
    "split_pipeline",
]
