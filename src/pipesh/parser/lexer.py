"""Lexer for pipesh command lines.

Splits a raw input line into words, applying the quoting rules of a POSIX
shell in a reduced form:

- Outside quotes a backslash escapes the next character.
- Inside double quotes a backslash only escapes ``"``, ``\\``, ``$`` and
  a backtick; any other backslash is kept.
- Inside single quotes nothing is special.

Unterminated quotes are not an error: the open quote simply runs to the end
of the line.
"""

from __future__ import annotations

DOUBLE_QUOTE_ESCAPABLE = frozenset('"\\$`')


class Token(str):
    """A word produced by the lexer.

    Behaves exactly like ``str``. ``quoted`` is true when any character of
    the word came from quoting or escaping; such words are never treated as
    operators (``'|'`` is an argument, not a pipe).
    """

    quoted: bool

    def __new__(cls, value: str, quoted: bool = False) -> Token:
        token = super().__new__(cls, value)
        token.quoted = quoted
        return token


def is_operator(token: str, operator: str) -> bool:
    """Check if a token is the unquoted operator ``operator``."""
    return token == operator and not getattr(token, "quoted", False)


def tokenize(line: str) -> list[str]:
    """Tokenize a command line into words.

    Args:
        line: The raw input line.

    Returns:
        The words in order, as ``Token`` instances.
    """
    tokens: list[str] = []
    current: list[str] = []
    quoted = False
    in_single = False
    in_double = False

    i = 0
    n = len(line)
    while i < n:
        char = line[i]

        if char == "\\" and not in_single:
            if not in_double:
                # Escape the next character, whatever it is
                i += 1
                if i < n:
                    current.append(line[i])
                quoted = True
                i += 1
                continue
            next_char = line[i + 1] if i + 1 < n else ""
            if next_char and next_char in DOUBLE_QUOTE_ESCAPABLE:
                current.append(next_char)
                i += 2
                continue
            # Literal backslash inside double quotes

        if char == "'" and not in_double:
            in_single = not in_single
            quoted = True
            i += 1
            continue

        if char == '"' and not in_single:
            in_double = not in_double
            quoted = True
            i += 1
            continue

        if char.isspace() and not in_single and not in_double:
            if current:
                tokens.append(Token("".join(current), quoted))
            current = []
            quoted = False
        else:
            current.append(char)
        i += 1

    if current:
        tokens.append(Token("".join(current), quoted))

    return tokens
