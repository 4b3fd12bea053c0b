# tests/test_lexer.py
"""
Tests for the odo lexer: source text → tokens.
"""

import pytest

from odo.errors import InvalidCharacterError, UnterminatedStringError
from odo.lexer import Lexer, TokenKind, tokenize


def kinds(source):
    return [tok.kind for tok in tokenize(source)]


class TestLexEmpty:

    def test_empty_string(self):
        assert tokenize("") == []

    def test_blanks_only(self):
        assert tokenize("  \t  ") == []

    def test_exhausted_lexer_stays_exhausted(self):
        lexer = Lexer("x")
        assert next(lexer).text == "x"
        with pytest.raises(StopIteration):
            next(lexer)
        with pytest.raises(StopIteration):
            next(lexer)


class TestLexTokens:

    def test_declaration(self):
        assert kinds("var x = 1") == [
            TokenKind.VAR, TokenKind.NAME, TokenKind.ASSIGN, TokenKind.NUMBER,
        ]

    def test_keywords_are_exact_matches(self):
        assert kinds("var vars if iffy") == [
            TokenKind.VAR, TokenKind.NAME, TokenKind.IF, TokenKind.NAME,
        ]

    def test_truth_literals(self):
        tokens = tokenize("true false")
        assert [t.kind for t in tokens] == [TokenKind.TRUTH, TokenKind.TRUTH]
        assert [t.text for t in tokens] == ["true", "false"]

    def test_punctuation(self):
        assert kinds("= ; { } ( ) , :") == [
            TokenKind.ASSIGN, TokenKind.SEMICOLON,
            TokenKind.LEFT_CURLY, TokenKind.RIGHT_CURLY,
            TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN,
            TokenKind.COMMA, TokenKind.DEBUG_PRINT,
        ]

    def test_integer_is_maximal_digit_run(self):
        tokens = tokenize("12345")
        assert len(tokens) == 1
        assert tokens[0].text == "12345"

    def test_digits_then_name(self):
        assert kinds("12ab") == [TokenKind.NUMBER, TokenKind.NAME]

    def test_identifier_with_underscore_and_digits(self):
        tokens = tokenize("_tmp2")
        assert tokens[0].kind is TokenKind.NAME
        assert tokens[0].text == "_tmp2"

    def test_newline_is_a_token(self):
        assert kinds("a\n\nb") == [
            TokenKind.NAME, TokenKind.NEWLINE, TokenKind.NEWLINE, TokenKind.NAME,
        ]


class TestLexTextLiterals:

    def test_plain_text(self):
        tok = tokenize('"hello world"')[0]
        assert tok.kind is TokenKind.TEXT
        assert tok.text == "hello world"
        assert tok.lexeme == '"hello world"'

    def test_empty_text(self):
        assert tokenize('""')[0].text == ""

    def test_escapes(self):
        tok = tokenize(r'"a\nb\tc\\d\"e"')[0]
        assert tok.text == 'a\nb\tc\\d"e'

    def test_unknown_escape_passes_through(self):
        assert tokenize(r'"\q"')[0].text == "q"

    def test_unterminated(self):
        with pytest.raises(UnterminatedStringError):
            tokenize('"never closed')

    def test_newline_inside_text_is_unterminated(self):
        with pytest.raises(UnterminatedStringError):
            tokenize('"line\nbreak"')


class TestLexPositions:

    def test_columns_are_one_based(self):
        tokens = tokenize("var x = 1")
        assert [t.column for t in tokens] == [1, 5, 7, 9]

    def test_lines_advance_on_newline(self):
        tokens = tokenize("a\n  b")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[2].line, tokens[2].column) == (2, 3)

    def test_filename_on_tokens(self):
        tok = tokenize("x", filename="demo.odo")[0]
        assert tok.file == "demo.odo"
        assert str(tok.span) == "demo.odo:1:1"


class TestLexErrors:

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            tokenize("x @")
        assert exc_info.value.span.column == 3
        assert exc_info.value.character == "@"

    def test_lexing_is_lazy(self):
        lexer = Lexer("x @")
        assert next(lexer).text == "x"
        with pytest.raises(InvalidCharacterError):
            next(lexer)
