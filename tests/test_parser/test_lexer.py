"""Tests for the command line lexer."""

import pytest

from pipesh.parser import Token, tokenize


class TestWordSplitting:
    """Test splitting on whitespace."""

    def test_simple_words(self):
        assert tokenize("echo hello world") == ["echo", "hello", "world"]

    def test_collapses_whitespace(self):
        assert tokenize("  echo \t hello   world  ") == ["echo", "hello", "world"]

    def test_empty_line(self):
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_tokens_are_str(self):
        tokens = tokenize("echo hi")
        assert all(isinstance(t, str) for t in tokens)
        assert all(isinstance(t, Token) for t in tokens)


class TestSingleQuotes:
    """Test single-quoted strings."""

    def test_preserves_spaces(self):
        assert tokenize("echo 'a b' c") == ["echo", "a b", "c"]

    def test_backslash_is_literal(self):
        assert tokenize(r"echo 'a\nb\\'") == ["echo", r"a\nb\\"]

    def test_double_quote_is_literal(self):
        assert tokenize("""echo 'say "hi"'""") == ["echo", 'say "hi"']

    def test_adjacent_quotes_join(self):
        assert tokenize("echo 'a''b'") == ["echo", "ab"]

    def test_empty_quotes_produce_no_token(self):
        assert tokenize("echo ''") == ["echo"]


class TestDoubleQuotes:
    """Test double-quoted strings."""

    def test_escaped_quotes(self):
        assert tokenize('echo "a \\"b\\" c"') == ["echo", 'a "b" c']

    def test_escapable_characters(self):
        assert tokenize(r'echo "\\ \$ \`"') == ["echo", "\\ $ `"]

    def test_other_backslashes_kept(self):
        assert tokenize(r'echo "a\nb"') == ["echo", r"a\nb"]

    def test_single_quote_is_literal(self):
        assert tokenize('''echo "it's"''') == ["echo", "it's"]

    def test_mixed_with_unquoted(self):
        assert tokenize('echo pre"mid dle"post') == ["echo", "premid dlepost"]


class TestBackslashEscapes:
    """Test backslashes outside quotes."""

    def test_escaped_space(self):
        assert tokenize("echo a\\ b") == ["echo", "a b"]

    def test_escaped_quote(self):
        assert tokenize("echo \\'hi\\'") == ["echo", "'hi'"]

    def test_escaped_backslash(self):
        assert tokenize("echo a\\\\b") == ["echo", "a\\b"]

    def test_escaped_letter(self):
        assert tokenize("echo \\n") == ["echo", "n"]

    def test_trailing_backslash_dropped(self):
        assert tokenize("echo abc\\") == ["echo", "abc"]


class TestUnterminatedQuotes:
    """Unterminated quotes run to end of input instead of failing."""

    def test_unterminated_single(self):
        assert tokenize("echo 'a b") == ["echo", "a b"]

    def test_unterminated_double(self):
        assert tokenize('echo "a b') == ["echo", "a b"]


class TestQuotedFlag:
    """Words that contain quoting are never operators."""

    def test_plain_word_not_quoted(self):
        assert tokenize("|")[0].quoted is False

    def test_quoted_pipe(self):
        token = tokenize("'|'")[0]
        assert token == "|"
        assert token.quoted is True

    def test_escaped_operator(self):
        assert tokenize("\\>")[0].quoted is True

    def test_flag_resets_between_words(self):
        tokens = tokenize("'a' b")
        assert tokens[0].quoted is True
        assert tokens[1].quoted is False


@pytest.mark.parametrize(
    "line",
    [
        "echo 'hello' \"world\"",
        "cat  file1   'file2'",
        "ls -la \"dir\" | wc -l",
        "a'b'c \"d\"e > out",
    ],
)
def test_rejoin_round_trip(line):
    """Re-joining tokens with single spaces and tokenizing again is stable."""
    tokens = tokenize(line)
    assert tokenize(" ".join(tokens)) == tokens
