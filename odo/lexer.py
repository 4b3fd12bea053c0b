"""odo/lexer.py – source text → lazy token stream.

The lexer is a forward-only iterator: each ``next()`` call skips blanks,
matches exactly one token with the parsimonious ``TOKEN_GRAMMAR`` at the
current offset and returns it.  Iteration stops at end of input; it cannot
be restarted.

Token classes
-------------
* names and keywords   – ``var``, ``if``, ``true``/``false`` are recognised
  by exact match against already-lexed identifier text
* integer literals     – a maximal run of digits
* text literals        – double-quoted, single line, backslash escapes
* punctuation          – ``= ; { } ( ) , :``
* newline              – significant, it terminates statements

Blanks other than newline are insignificant.  An unterminated text literal
or a character that starts no token is fatal; the lexer never recovers.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Final, Iterator, List

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node

from odo.errors import InvalidCharacterError, SourceSpan, UnterminatedStringError

logger = logging.getLogger(__name__)

__all__ = [
    "TokenKind",
    "Token",
    "Lexer",
    "tokenize",
    "KEYWORDS",
    "TOKEN_GRAMMAR",
]


# ═══════════════════════════════════════════════════════════════════════
#  Token model
# ═══════════════════════════════════════════════════════════════════════

class TokenKind(enum.Enum):
    """Token tags.  The value is the human-readable name used in errors."""

    VAR = "'var'"
    IF = "'if'"
    TRUTH = "truth literal"
    NAME = "name"
    NUMBER = "integer literal"
    TEXT = "text literal"
    ASSIGN = "'='"
    SEMICOLON = "';'"
    LEFT_CURLY = "'{'"
    RIGHT_CURLY = "'}'"
    LEFT_PAREN = "'('"
    RIGHT_PAREN = "')'"
    COMMA = "','"
    DEBUG_PRINT = "':'"
    NEWLINE = "newline"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Token:
    """One lexed token.

    ``text`` is the literal text of the token.  For text literals it is the
    decoded content (quotes removed, escapes applied); ``lexeme`` always
    holds the raw source slice.  ``line`` and ``column`` are 1-based.
    """

    kind: TokenKind
    text: str
    line: int
    column: int
    lexeme: str = ""
    file: str = ""

    @property
    def span(self) -> SourceSpan:
        return SourceSpan.from_token(self)

    def describe(self) -> str:
        """Short form used in diagnostics, e.g. ``name 'x'``."""
        if self.kind in _VALUE_KINDS:
            return f"{self.kind.value} {self.lexeme or self.text!r}"
        return self.kind.value

    def __str__(self) -> str:
        return f"{self.describe()} at {self.line}:{self.column}"


_VALUE_KINDS: Final = frozenset({
    TokenKind.NAME, TokenKind.NUMBER, TokenKind.TEXT, TokenKind.TRUTH,
})

#: Keywords are looked up after an identifier has been lexed.
KEYWORDS: Final[Dict[str, TokenKind]] = {
    "var": TokenKind.VAR,
    "true": TokenKind.TRUTH,
    "false": TokenKind.TRUTH,
    "if": TokenKind.IF,
}

_PUNCTUATION: Final[Dict[str, TokenKind]] = {
    "=": TokenKind.ASSIGN,
    ";": TokenKind.SEMICOLON,
    "{": TokenKind.LEFT_CURLY,
    "}": TokenKind.RIGHT_CURLY,
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    ",": TokenKind.COMMA,
    ":": TokenKind.DEBUG_PRINT,
}

_ESCAPES: Final[Dict[str, str]] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "a": "\a",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


# ═══════════════════════════════════════════════════════════════════════
#  Token grammar (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════════

TOKEN_GRAMMAR = Grammar(r'''
    token       = newline / name / integer / text / punctuation

    newline     = "\n"
    name        = ~r"[^\W\d]\w*"
    integer     = ~r"[0-9]+"

    text        = '"' text_char* '"'
    text_char   = escape / plain_char
    escape      = ~r"\\[^\n]"
    plain_char  = ~r'[^"\\\n]'

    punctuation = "=" / ";" / "{" / "}" / "(" / ")" / "," / ":"

    blank       = ~r"[^\S\n]+"
''')


def _decode_text(node: Node) -> str:
    """Apply backslash escapes to a matched ``text`` node.

    Unknown escapes pass the escaped character through unchanged.
    """
    chars: List[str] = []
    for text_char in node.children[1].children:
        piece = text_char.children[0]
        if piece.expr_name == "escape":
            escaped = piece.text[1]
            chars.append(_ESCAPES.get(escaped, escaped))
        else:
            chars.append(piece.text)
    return "".join(chars)


# ═══════════════════════════════════════════════════════════════════════
#  Lexer
# ═══════════════════════════════════════════════════════════════════════

class Lexer:
    """Lazy, forward-only token iterator over *source*."""

    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self._pos = 0
        self._line = 1
        self._line_start = 0

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        self._skip_blanks()
        if self._pos >= len(self.source):
            raise StopIteration

        start = self._pos
        column = start - self._line_start + 1
        try:
            node = TOKEN_GRAMMAR["token"].match(self.source, start)
        except ParseError:
            span = self._span(column)
            if self.source[start] == '"':
                raise UnterminatedStringError(span=span).with_source(self._current_line())
            raise InvalidCharacterError(self.source[start], span=span).with_source(
                self._current_line()
            )

        matched = node.children[0]
        lexeme = matched.text
        kind = self._classify(matched)
        text = _decode_text(matched) if kind is TokenKind.TEXT else lexeme

        token = Token(
            kind=kind,
            text=text,
            line=self._line,
            column=column,
            lexeme=lexeme,
            file=self.filename,
        )
        self._pos = node.end
        if kind is TokenKind.NEWLINE:
            self._line += 1
            self._line_start = self._pos
        return token

    # -- helpers --------------------------------------------------------

    @staticmethod
    def _classify(node: Node) -> TokenKind:
        rule = node.expr_name
        if rule == "newline":
            return TokenKind.NEWLINE
        if rule == "name":
            return KEYWORDS.get(node.text, TokenKind.NAME)
        if rule == "integer":
            return TokenKind.NUMBER
        if rule == "text":
            return TokenKind.TEXT
        return _PUNCTUATION[node.text]

    def _skip_blanks(self) -> None:
        try:
            node = TOKEN_GRAMMAR["blank"].match(self.source, self._pos)
        except ParseError:
            return
        self._pos = node.end

    def _span(self, column: int) -> SourceSpan:
        return SourceSpan(file=self.filename, line=self._line, column=column)

    def _current_line(self) -> str:
        end = self.source.find("\n", self._line_start)
        if end == -1:
            end = len(self.source)
        return self.source[self._line_start:end]


def tokenize(source: str, filename: str = "<input>") -> List[Token]:
    """Lex all of *source* eagerly."""
    tokens = list(Lexer(source, filename))
    logger.debug("Lexed %d token(s) from %s", len(tokens), filename)
    return tokens
