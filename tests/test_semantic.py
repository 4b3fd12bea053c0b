# tests/test_semantic.py
"""
Tests for the semantic analyzer: name resolution, type checking and the
scope forest.
"""

import uuid

import pytest

from odo import semantic as S
from odo.errors import (
    ArityMismatchError,
    InvalidAssignmentTargetError,
    MissingValueError,
    NotCallableError,
    RedefinedSymbolError,
    ScopeStackError,
    SemanticError,
    TypeMismatchError,
    UndefinedSymbolError,
)
from odo.parser import parse_statement
from odo.symbols import (
    INT_TYPE,
    TEXT_TYPE,
    TRUTH_TYPE,
    FunctionType,
    NativeFunctionSymbol,
    VariableSymbol,
)
from tests.conftest import IF_BLOCK_ODO, SHADOWING_ODO, analyze_in_repl


class TestScopeForest:

    def test_global_scope_holds_primitives(self, analyzer):
        names = {sym.name for sym in analyzer.global_scope.symbols.values()}
        assert names == {"int", "dec", "text", "truth"}

    def test_repl_scope_is_child_of_global(self, analyzer):
        assert analyzer.repl_scope.parent == analyzer.global_scope.id

    def test_cursor_starts_at_global(self, analyzer):
        assert analyzer.current_scope_id == analyzer.global_scope.id

    def test_pop_global_is_an_error(self, analyzer):
        with pytest.raises(ScopeStackError):
            analyzer.pop_scope()

    def test_push_unknown_scope_is_an_error(self, analyzer):
        with pytest.raises(ScopeStackError):
            analyzer.push_scope(uuid.uuid4())


class TestAnalyzeLiterals:

    @pytest.mark.parametrize("source, expected", [
        ("1", INT_TYPE),
        ('"a"', TEXT_TYPE),
        ("false", TRUTH_TYPE),
    ])
    def test_literal_types(self, analyzer, source, expected):
        [result] = analyze_in_repl(analyzer, source)
        assert isinstance(result.node, S.Literal)
        assert result.type_id == expected.id


class TestAnalyzeDeclarations:

    def test_declaration_creates_variable_symbol(self, analyzer):
        [result] = analyze_in_repl(analyzer, "var x = 1")
        assert result.type_id is None
        symbol = analyzer.repl_scope.find_local("x")
        assert symbol.variant == VariableSymbol(INT_TYPE.id)
        assert result.node.symbol_id == symbol.id

    def test_duplicate_in_same_scope(self, analyzer):
        with pytest.raises(RedefinedSymbolError) as exc_info:
            analyze_in_repl(analyzer, "var x = 1\nvar x = 2")
        assert "'x'" in exc_info.value.message

    def test_duplicate_names_existing_declaration(self, analyzer):
        with pytest.raises(RedefinedSymbolError) as exc_info:
            analyze_in_repl(analyzer, "var x = 1\nvar x = 2")
        assert "note: 'x' is already declared as a variable in the repl scope" in str(
            exc_info.value
        ).splitlines()

    def test_duplicate_across_calls_in_repl_scope(self, analyzer):
        analyze_in_repl(analyzer, "var x = 1")
        with pytest.raises(RedefinedSymbolError):
            analyze_in_repl(analyzer, "var x = 2")

    def test_shadowing_in_nested_block(self, analyzer):
        results = analyze_in_repl(analyzer, SHADOWING_ODO)
        block = results[1].node
        inner = analyzer.scopes[block.scope_id].find_local("x")
        outer = analyzer.repl_scope.find_local("x")
        assert inner.id != outer.id
        assert inner.variant == VariableSymbol(TRUTH_TYPE.id)
        assert results[2].node.operand.symbol_id == outer.id

    def test_initializer_sees_outer_name(self, analyzer):
        results = analyze_in_repl(analyzer, "var x = 1\n{ var x = x }")
        outer = analyzer.repl_scope.find_local("x")
        inner_decl = results[1].node.statements[0]
        assert inner_decl.initializer.symbol_id == outer.id

    def test_initializer_must_produce_value(self, analyzer):
        with pytest.raises(MissingValueError):
            analyze_in_repl(analyzer, "var y = 1\nvar x = y = 2")


class TestAnalyzeVariables:

    def test_unknown_variable(self, analyzer):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            analyze_in_repl(analyzer, "z")
        assert exc_info.value.message == "Unknown variable 'z'"

    def test_block_symbol_not_visible_afterwards(self, analyzer):
        analyze_in_repl(analyzer, IF_BLOCK_ODO)
        with pytest.raises(UndefinedSymbolError):
            analyze_in_repl(analyzer, "z")

    def test_type_name_is_not_a_value(self, analyzer):
        with pytest.raises(SemanticError):
            analyze_in_repl(analyzer, "var x = int")

    def test_variable_type(self, analyzer):
        results = analyze_in_repl(analyzer, 'var t = "hi"\nt')
        assert results[1].type_id == TEXT_TYPE.id


class TestAnalyzeAssignments:

    def test_same_type_assignment(self, analyzer):
        results = analyze_in_repl(analyzer, "var x = 1\nx = 2")
        assert isinstance(results[1].node, S.Assignment)
        assert results[1].type_id is None

    def test_type_mismatch_names_both_types(self, analyzer):
        with pytest.raises(TypeMismatchError) as exc_info:
            analyze_in_repl(analyzer, "var x = 1\nx = true")
        assert exc_info.value.expected_type == "int"
        assert exc_info.value.actual_type == "truth"
        assert "'int'" in exc_info.value.message
        assert "'truth'" in exc_info.value.message

    def test_assignment_reaches_outer_scope(self, analyzer):
        results = analyze_in_repl(analyzer, "var x = 1\n{ x = 2 }")
        outer = analyzer.repl_scope.find_local("x")
        assert results[1].node.statements[0].symbol_id == outer.id

    def test_assign_to_literal(self, analyzer):
        with pytest.raises(InvalidAssignmentTargetError):
            analyze_in_repl(analyzer, "1 = 2")

    def test_assign_to_unknown(self, analyzer):
        with pytest.raises(UndefinedSymbolError):
            analyze_in_repl(analyzer, "nope = 2")


class TestAnalyzeConditionals:

    def test_truth_condition(self, analyzer):
        [result] = analyze_in_repl(analyzer, "if true :1")
        assert isinstance(result.node, S.If)
        assert result.type_id is None

    def test_non_truth_condition(self, analyzer):
        with pytest.raises(TypeMismatchError) as exc_info:
            analyze_in_repl(analyzer, "if 1 :2")
        assert exc_info.value.expected_type == "truth"
        assert exc_info.value.actual_type == "int"

    def test_condition_checked_before_body(self, analyzer):
        with pytest.raises(TypeMismatchError):
            analyze_in_repl(analyzer, "if 1 { var fresh = 1 }")
        assert len(analyzer.scopes) == 2

    def test_debug_print_needs_a_value(self, analyzer):
        with pytest.raises(MissingValueError):
            analyze_in_repl(analyzer, "var y = 1\n:y = 2")


class TestAnalyzeBlocks:

    def test_block_scope_parent_is_current(self, analyzer):
        [result] = analyze_in_repl(analyzer, "{ var a = 1 }")
        scope = analyzer.scopes[result.node.scope_id]
        assert scope.parent == analyzer.repl_scope.id
        assert scope.find_local("a") is not None

    def test_each_analysis_mints_a_new_scope(self, analyzer):
        node = parse_statement("{ }")
        analyzer.push_scope(analyzer.repl_scope.id)
        first = analyzer.analyze(node).node.scope_id
        second = analyzer.analyze(node).node.scope_id
        analyzer.pop_scope()
        assert first != second

    def test_cursor_restored_after_error(self, analyzer):
        analyzer.push_scope(analyzer.repl_scope.id)
        with pytest.raises(UndefinedSymbolError):
            analyzer.analyze(parse_statement("{ { var a = nope } }"))
        assert analyzer.current_scope_id == analyzer.repl_scope.id


class TestAnalyzeCalls:

    @pytest.fixture
    def with_native(self, analyzer):
        fn_type = analyzer.function_type([INT_TYPE.id])
        analyzer.declare("f", NativeFunctionSymbol(fn_type.id))
        return analyzer

    def test_call_checks_out(self, with_native):
        [result] = analyze_in_repl(with_native, "f(1)")
        assert isinstance(result.node, S.Call)
        assert result.type_id is None

    def test_wrong_arity(self, with_native):
        with pytest.raises(ArityMismatchError) as exc_info:
            analyze_in_repl(with_native, "f()")
        assert exc_info.value.expected_arity == 1
        assert exc_info.value.actual_arity == 0

    def test_wrong_argument_type(self, with_native):
        with pytest.raises(TypeMismatchError) as exc_info:
            analyze_in_repl(with_native, 'f("one")')
        assert exc_info.value.expected_type == "int"
        assert exc_info.value.actual_type == "text"

    def test_call_non_function(self, analyzer):
        with pytest.raises(NotCallableError):
            analyze_in_repl(analyzer, "var x = 1\nx()")

    def test_return_type_becomes_call_type(self, analyzer):
        fn_type = analyzer.function_type([], TEXT_TYPE.id)
        analyzer.declare("name", NativeFunctionSymbol(fn_type.id))
        [result] = analyze_in_repl(analyzer, "name()")
        assert result.type_id == TEXT_TYPE.id


class TestFunctionTypes:

    def test_structural_names(self, analyzer):
        assert analyzer.function_type([]).name == "<:>"
        assert analyzer.function_type([INT_TYPE.id]).name == "<int:>"
        assert analyzer.function_type(
            [INT_TYPE.id, TEXT_TYPE.id], TRUTH_TYPE.id
        ).name == "<int,text:truth>"

    def test_function_types_are_interned(self, analyzer):
        first = analyzer.function_type([INT_TYPE.id])
        second = analyzer.function_type([INT_TYPE.id])
        assert first.id == second.id
        assert isinstance(first.variant, FunctionType)
        assert analyzer.global_scope.find_local("<int:>") is first
