"""odo/parser.py – token stream → untyped syntax tree.

Design principles
-----------------
* **Single-pass, recursive-descent** with one token of lookahead pulled
  lazily from any token iterable (normally a ``Lexer``).
* **Fail-fast with location** – errors are ``UnexpectedTokenError`` /
  ``UnexpectedEOFError`` naming the expected kind and the actual token.
  The parser never recovers.
* **No symbol knowledge** – names stay tokens; see ``odo.semantic``.

Grammar (informative)
---------------------
::

    statement  ::= 'var' NAME '=' postfix
                 | '{' statement* '}'
                 | 'if' postfix statement
                 | ':' postfix
                 | postfix
    postfix    ::= factor ( '=' postfix | '(' [postfix (',' postfix)*] ')' )*
    factor     ::= NUMBER | TRUTH | TEXT | NAME

Every statement is followed by a terminator: ``;`` (plus any newlines),
at least one newline, a closing ``}`` (not consumed) or end of input.
Newlines are otherwise skipped before factors, after ``=`` and around
call arguments.

Public API
----------
``Parser(tokens).parse_program() -> list[Node]``
    Flat statement list; what ``Interpreter.evaluate`` analyzes one by one.

``parse(text) -> Block``
    A whole program wrapped in a (scope-creating) block.

``parse_statement(text) -> Node``
    A single statement (useful for REPL/tests).
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from odo import ast as A
from odo.errors import SourceSpan, UnexpectedEOFError, UnexpectedTokenError
from odo.lexer import Lexer, Token, TokenKind

logger = logging.getLogger(__name__)

__all__ = [
    "Parser",
    "parse",
    "parse_program",
    "parse_statement",
]

_LITERAL_KINDS = {
    TokenKind.NUMBER: A.LiteralKind.INTEGER,
    TokenKind.TRUTH: A.LiteralKind.TRUTH,
    TokenKind.TEXT: A.LiteralKind.TEXT,
}


class Parser:
    """Recursive-descent parser over a token iterable."""

    def __init__(self, tokens: Iterable[Token], filename: str = "<input>") -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self._lookahead: Optional[Token] = None
        self._last: Optional[Token] = None
        self.filename = filename

    # ═══════════════════════════════════════════════════════════════════
    #  Token helpers
    # ═══════════════════════════════════════════════════════════════════

    def _peek(self) -> Optional[Token]:
        if self._lookahead is None:
            self._lookahead = next(self._tokens, None)
        return self._lookahead

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise UnexpectedEOFError(span=self._eof_span())
        self._lookahead = None
        self._last = token
        return token

    def _next_is(self, kind: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind is kind

    def _consume(self, kind: TokenKind, context: str = "") -> Token:
        """Consume a token of *kind* or raise naming expected vs. actual."""
        token = self._peek()
        if token is None:
            raise UnexpectedEOFError(
                expected=[str(kind)], span=self._eof_span(), context=context
            )
        if token.kind is not kind:
            raise UnexpectedTokenError(
                token.describe(), expected=[str(kind)], span=token.span, context=context
            )
        return self._advance()

    def _skip_newlines(self) -> None:
        while self._next_is(TokenKind.NEWLINE):
            self._advance()

    def _eof_span(self) -> SourceSpan:
        if self._last is None:
            return SourceSpan(file=self.filename, line=1, column=1)
        return SourceSpan(
            file=self.filename,
            line=self._last.line,
            column=self._last.column + len(self._last.lexeme or self._last.text),
        )

    def at_end(self) -> bool:
        return self._peek() is None

    # ═══════════════════════════════════════════════════════════════════
    #  Entry points
    # ═══════════════════════════════════════════════════════════════════

    def parse(self) -> A.Block:
        """Parse a whole program as one block."""
        return A.Block(tuple(self.parse_program()))

    def parse_program(self) -> List[A.Node]:
        """Parse top-level statements until end of input."""
        statements = self.statement_list()
        token = self._peek()
        if token is not None:
            raise UnexpectedTokenError(
                token.describe(), expected=["statement"], span=token.span,
                context="'}' without a matching '{'",
            )
        logger.debug("Parsed %d top-level statement(s)", len(statements))
        return statements

    def statement_list(self) -> List[A.Node]:
        """Statements up to end of input or a closing ``}`` (not consumed)."""
        statements: List[A.Node] = []
        while True:
            self._skip_newlines()
            token = self._peek()
            if token is None or token.kind is TokenKind.RIGHT_CURLY:
                return statements
            statements.append(self.parse_statement())

    def parse_statement(self) -> A.Node:
        node = self.parse_statement_without_terminator()
        self._check_statement_terminator()
        return node

    def parse_statement_without_terminator(self) -> A.Node:
        self._skip_newlines()
        token = self._peek()
        if token is None:
            raise UnexpectedEOFError(expected=["statement"], span=self._eof_span())

        if token.kind is TokenKind.VAR:
            return self._parse_declaration()
        if token.kind is TokenKind.LEFT_CURLY:
            return self.parse_block()
        if token.kind is TokenKind.IF:
            return self._parse_if()
        if token.kind is TokenKind.DEBUG_PRINT:
            marker = self._advance()
            return A.DebugPrint(self.parse_postfix(), marker)
        return self.parse_postfix()

    def _check_statement_terminator(self) -> None:
        token = self._peek()
        if token is None:
            return

        if token.kind is TokenKind.SEMICOLON:
            self._advance()
            self._skip_newlines()
        elif token.kind is not TokenKind.RIGHT_CURLY:
            self._consume(
                TokenKind.NEWLINE,
                context="Statements are terminated by ';' or a newline",
            )
            self._skip_newlines()

    # ═══════════════════════════════════════════════════════════════════
    #  Statements
    # ═══════════════════════════════════════════════════════════════════

    def parse_block(self) -> A.Block:
        opening = self._consume(TokenKind.LEFT_CURLY)
        self._skip_newlines()

        statements: List[A.Node] = []
        while True:
            token = self._peek()
            if token is None or token.kind is TokenKind.RIGHT_CURLY:
                break
            statements.append(self.parse_statement())
            self._skip_newlines()

        self._consume(TokenKind.RIGHT_CURLY, context="Unclosed block")
        return A.Block(tuple(statements), opening)

    def _parse_declaration(self) -> A.Declaration:
        self._consume(TokenKind.VAR)
        self._skip_newlines()

        name = self._consume(TokenKind.NAME, context="Expected a variable name after 'var'")
        self._consume(TokenKind.ASSIGN, context="Expected an assignment statement ('=')")
        return A.Declaration(name, self.parse_postfix())

    def _parse_if(self) -> A.If:
        keyword = self._consume(TokenKind.IF)
        condition = self.parse_postfix()
        body = self.parse_statement_without_terminator()
        return A.If(condition, body, keyword)

    # ═══════════════════════════════════════════════════════════════════
    #  Expressions
    # ═══════════════════════════════════════════════════════════════════

    def parse_postfix(self) -> A.Node:
        """A factor followed by any chain of ``= x`` and ``(args)`` suffixes."""
        expr = self._parse_factor()

        while True:
            if self._next_is(TokenKind.ASSIGN):
                expr = self._parse_assignment(expr)
            elif self._next_is(TokenKind.LEFT_PAREN):
                expr = self._parse_call(expr)
            else:
                return expr

    def _parse_assignment(self, target: A.Node) -> A.Assignment:
        operator = self._consume(TokenKind.ASSIGN, context="Expected an assignment statement ('=')")
        return A.Assignment(target, self.parse_postfix(), operator)

    def _parse_call(self, callee: A.Node) -> A.Call:
        opening = self._consume(TokenKind.LEFT_PAREN)
        self._skip_newlines()

        arguments: List[A.Node] = []
        while True:
            token = self._peek()
            if token is None or token.kind is TokenKind.RIGHT_PAREN:
                break
            arguments.append(self.parse_postfix())
            self._skip_newlines()
            if not self._next_is(TokenKind.COMMA):
                break
            self._advance()
            self._skip_newlines()

        self._consume(TokenKind.RIGHT_PAREN, context="Unclosed argument list")
        return A.Call(callee, tuple(arguments), opening)

    def _parse_factor(self) -> A.Node:
        self._skip_newlines()
        token = self._peek()
        if token is None:
            raise UnexpectedEOFError(expected=["expression"], span=self._eof_span())

        literal_kind = _LITERAL_KINDS.get(token.kind)
        if literal_kind is not None:
            return A.Literal(self._advance(), literal_kind)
        if token.kind is TokenKind.NAME:
            return A.Variable(self._advance())

        raise UnexpectedTokenError(
            token.describe(), expected=["expression"], span=token.span
        )


# ═══════════════════════════════════════════════════════════════════════
#  Convenience wrappers
# ═══════════════════════════════════════════════════════════════════════

def parse_program(text: str, filename: str = "<input>") -> List[A.Node]:
    """Lex and parse *text* into a flat list of top-level statements."""
    return Parser(Lexer(text, filename), filename).parse_program()


def parse(text: str, filename: str = "<input>") -> A.Block:
    """Lex and parse *text* into a single program block."""
    return Parser(Lexer(text, filename), filename).parse()


def parse_statement(text: str, filename: str = "<input>") -> A.Node:
    """Lex and parse exactly one statement from *text*."""
    parser = Parser(Lexer(text, filename), filename)
    node = parser.parse_statement()
    token = parser._peek()
    if token is not None:
        raise UnexpectedTokenError(token.describe(), expected=["end of input"], span=token.span)
    return node
