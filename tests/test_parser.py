# tests/test_parser.py
"""
Tests for the odo parser: tokens → untyped syntax tree.
"""

import pytest

from odo import ast as A
from odo.errors import UnexpectedEOFError, UnexpectedTokenError
from odo.lexer import tokenize
from odo.parser import Parser, parse, parse_program, parse_statement
from tests.conftest import (
    DEBUG_PRINT_ODO, IF_BLOCK_ODO, MULTILINE_CALL_ODO, SEMICOLONS_ODO,
    SHADOWING_ODO,
)


class TestParseEmpty:

    def test_empty_program(self):
        assert parse_program("") == []

    def test_newlines_only(self):
        assert parse_program("\n\n  \n") == []

    def test_parse_wraps_program_in_block(self):
        block = parse("var a = 1")
        assert isinstance(block, A.Block)
        assert block.token is None
        assert len(block.statements) == 1


class TestParseStatements:

    def test_declaration(self):
        node = parse_statement("var x = 1")
        assert isinstance(node, A.Declaration)
        assert node.name.text == "x"
        assert isinstance(node.initializer, A.Literal)
        assert node.initializer.kind is A.LiteralKind.INTEGER
        assert node.initializer.token.text == "1"

    def test_literal_kinds(self):
        assert parse_statement("true").kind is A.LiteralKind.TRUTH
        assert parse_statement('"hi"').kind is A.LiteralKind.TEXT
        assert parse_statement("7").kind is A.LiteralKind.INTEGER

    def test_variable_reference(self):
        node = parse_statement("x")
        assert isinstance(node, A.Variable)
        assert node.name.text == "x"

    def test_debug_print(self):
        node = parse_statement(":x")
        assert isinstance(node, A.DebugPrint)
        assert isinstance(node.operand, A.Variable)

    def test_if_with_block_body(self):
        node = parse_statement(IF_BLOCK_ODO)
        assert isinstance(node, A.If)
        assert isinstance(node.condition, A.Literal)
        assert isinstance(node.body, A.Block)
        assert len(node.body.statements) == 1
        assert isinstance(node.body.statements[0], A.Declaration)

    def test_if_with_single_statement_body(self):
        stmts = parse_program("if true :1\nvar a = 2")
        assert len(stmts) == 2
        assert isinstance(stmts[0], A.If)
        assert isinstance(stmts[0].body, A.DebugPrint)
        assert isinstance(stmts[1], A.Declaration)

    def test_empty_block(self):
        assert parse_statement("{}").statements == ()
        assert parse_statement("{\n\n}").statements == ()

    def test_block_closing_on_same_line(self):
        node = parse_statement("{ var x = 1 }")
        assert len(node.statements) == 1

    def test_nested_blocks(self):
        stmts = parse_program(SHADOWING_ODO)
        assert [type(s) for s in stmts] == [A.Declaration, A.Block, A.DebugPrint]
        assert [type(s) for s in stmts[1].statements] == [A.Declaration, A.DebugPrint]


class TestParseTerminators:

    def test_newline_separated(self):
        stmts = parse_program(DEBUG_PRINT_ODO)
        assert [type(s) for s in stmts] == [A.Declaration, A.Declaration, A.DebugPrint]
        assert isinstance(stmts[1].initializer, A.Variable)

    def test_semicolon_separated(self):
        assert len(parse_program(SEMICOLONS_ODO)) == 3

    def test_semicolon_then_newlines(self):
        assert len(parse_program("var a = 1;\n\n\nvar b = 2")) == 2

    def test_missing_terminator(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_program("var a = 1 var b = 2")
        assert "expected newline" in exc_info.value.message

    def test_newline_after_assign_operator_is_skipped(self):
        node = parse_statement("var x =\n    1")
        assert isinstance(node.initializer, A.Literal)

    def test_newline_ends_a_postfix_expression(self):
        with pytest.raises(UnexpectedTokenError):
            parse_program("x\n= 1")


class TestParsePostfix:

    def test_call_without_arguments(self):
        node = parse_statement("f()")
        assert isinstance(node, A.Call)
        assert node.arguments == ()

    def test_call_arguments(self):
        node = parse_statement('f(1, "two", x)')
        assert len(node.arguments) == 3
        assert isinstance(node.arguments[2], A.Variable)

    def test_call_arguments_across_lines(self):
        node = parse_statement(MULTILINE_CALL_ODO)
        assert isinstance(node, A.Call)
        assert len(node.arguments) == 2

    @pytest.mark.parametrize("source", ["f(1,)", "f(1,\n)", "f(\n1,\n\n)"])
    def test_trailing_comma(self, source):
        node = parse_statement(source)
        assert isinstance(node, A.Call)
        assert len(node.arguments) == 1

    def test_chained_calls(self):
        node = parse_statement("f(1)(2)")
        assert isinstance(node, A.Call)
        assert isinstance(node.callee, A.Call)
        assert node.callee.callee.name.text == "f"

    def test_assignment(self):
        node = parse_statement("x = 2")
        assert isinstance(node, A.Assignment)
        assert node.target.name.text == "x"
        assert node.value.token.text == "2"

    def test_chained_assignment_nests_to_the_right(self):
        node = parse_statement("x = y = 1")
        assert isinstance(node.value, A.Assignment)
        assert node.value.target.name.text == "y"

    def test_call_then_assignment(self):
        node = parse_statement("f(1) = 2")
        assert isinstance(node, A.Assignment)
        assert isinstance(node.target, A.Call)


class TestParseErrors:

    def test_declaration_without_name(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_statement("var = 1")
        assert exc_info.value.expected == ["name"]
        assert exc_info.value.got == "'='"

    def test_declaration_without_assignment(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_statement("var x 1")
        assert "assignment statement" in exc_info.value.error_message.hint

    def test_eof_after_assign(self):
        with pytest.raises(UnexpectedEOFError):
            parse_statement("var x =")

    def test_unclosed_block(self):
        with pytest.raises(UnexpectedEOFError) as exc_info:
            parse_statement("{ var x = 1")
        assert exc_info.value.expected == ["'}'"]

    def test_unclosed_call(self):
        with pytest.raises(UnexpectedEOFError):
            parse_statement("f(1, 2")

    def test_stray_closing_brace(self):
        with pytest.raises(UnexpectedTokenError):
            parse_program("var a = 1\n}")

    def test_factor_expected(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_statement(":;")
        assert exc_info.value.expected == ["expression"]

    def test_error_names_actual_token(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_statement("var 5 = 1")
        assert exc_info.value.got == "integer literal '5'"
        assert exc_info.value.span.column == 5


class TestParserOverTokens:

    def test_parser_accepts_token_list(self):
        stmts = Parser(tokenize("var a = 1\n:a")).parse_program()
        assert len(stmts) == 2
