"""
Odo Semantic Analyzer

Turns an untyped syntax tree into an annotated tree:

1. Name resolution - every name token is replaced by the id of the symbol
   it denotes, resolved innermost scope first.
2. Type checking - every expression's type id is computed when the node
   is analyzed and checked on the spot (exact identity, no coercion).
3. Scope management - each block gets a freshly minted scope whose id is
   stamped on the annotated ``Block`` so the interpreter can re-enter the
   very same scope.

The analyzer owns the ``ScopeForest``.  Besides the global scope (primitive
types, function types and natives only) it creates one permanent ``repl``
scope, child of global, which hosts top-level declarations across
``Interpreter.evaluate`` calls.

The first error aborts analysis; declarations made before it stay in
their scopes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from odo import ast as A
from odo.ast import LiteralKind, span_of
from odo.errors import (
    InvalidAssignmentTargetError,
    MissingValueError,
    NotCallableError,
    ArityMismatchError,
    RedefinedSymbolError,
    ScopeStackError,
    SemanticError,
    SourceSpan,
    TypeMismatchError,
    UndefinedSymbolError,
)
from odo.lexer import Token
from odo.symbols import (
    DEC_TYPE,
    INT_TYPE,
    TEXT_TYPE,
    TRUTH_TYPE,
    FunctionType,
    NativeFunctionSymbol,
    PrimitiveType,
    Scope,
    ScopeForest,
    ScopeId,
    Symbol,
    SymbolId,
    SymbolVariant,
    VariableSymbol,
    function_type_name,
)

logger = logging.getLogger(__name__)

__all__ = [
    "Block",
    "Literal",
    "Variable",
    "Declaration",
    "Assignment",
    "Call",
    "If",
    "DebugPrint",
    "SemanticNode",
    "SemanticResult",
    "SemanticAnalyzer",
    "dispatch_semantic",
]


# ============================================================================
# PART 1: ANNOTATED TREE
# ============================================================================


@dataclass(frozen=True, slots=True)
class Block:
    statements: Tuple["SemanticNode", ...]
    scope_id: ScopeId
    token: Optional[Token] = None


@dataclass(frozen=True, slots=True)
class Literal:
    token: Token
    kind: LiteralKind


@dataclass(frozen=True, slots=True)
class Variable:
    symbol_id: SymbolId
    token: Token


@dataclass(frozen=True, slots=True)
class Declaration:
    symbol_id: SymbolId
    initializer: "SemanticNode"
    token: Token


@dataclass(frozen=True, slots=True)
class Assignment:
    symbol_id: SymbolId
    value: "SemanticNode"
    token: Token


@dataclass(frozen=True, slots=True)
class Call:
    callee: "SemanticNode"
    arguments: Tuple["SemanticNode", ...]
    token: Token


@dataclass(frozen=True, slots=True)
class If:
    condition: "SemanticNode"
    body: "SemanticNode"
    token: Token


@dataclass(frozen=True, slots=True)
class DebugPrint:
    operand: "SemanticNode"
    token: Token


SemanticNode = Union[Block, Literal, Variable, Declaration, Assignment, Call, If, DebugPrint]


@dataclass(frozen=True, slots=True)
class SemanticResult:
    """An annotated node plus its type id (``None`` for statements)."""

    node: SemanticNode
    type_id: Optional[SymbolId] = None


_SEMANTIC_DISPATCH: Dict[type, str] = {
    Block: "visit_block",
    Literal: "visit_literal",
    Variable: "visit_variable",
    Declaration: "visit_declaration",
    Assignment: "visit_assignment",
    Call: "visit_call",
    If: "visit_if",
    DebugPrint: "visit_debug_print",
}


def dispatch_semantic(node: SemanticNode, visitor: Any) -> Any:
    """Dispatch an annotated node to the appropriate visitor method."""
    method_name = _SEMANTIC_DISPATCH.get(type(node))
    if method_name is None:
        raise TypeError(f"Unknown annotated node type: {type(node).__name__}")
    return getattr(visitor, method_name)(node)


_LITERAL_TYPES: Dict[LiteralKind, Symbol] = {
    LiteralKind.INTEGER: INT_TYPE,
    LiteralKind.DECIMAL: DEC_TYPE,
    LiteralKind.TEXT: TEXT_TYPE,
    LiteralKind.TRUTH: TRUTH_TYPE,
}


def _symbol_kind(variant: SymbolVariant) -> str:
    if isinstance(variant, (PrimitiveType, FunctionType)):
        return "type"
    if isinstance(variant, NativeFunctionSymbol):
        return "native function"
    return "variable"


# ============================================================================
# PART 2: ANALYZER
# ============================================================================


class SemanticAnalyzer:
    """
    Resolves names and checks types over a persistent scope forest.

    ``current_scope_id`` is the analyzer's scope cursor.  The interpreter
    moves the same cursor with :meth:`push_scope` / :meth:`pop_scope` while
    executing, so variable lookups at run time see exactly the chain the
    analyzer saw.
    """

    def __init__(self) -> None:
        self.scopes = ScopeForest()
        self.repl_scope = self.scopes.new_scope("repl", parent=self.scopes.global_scope.id)
        self.current_scope_id: ScopeId = self.scopes.global_scope.id

    # ------------------------------------------------------------------
    # Scope cursor
    # ------------------------------------------------------------------

    @property
    def global_scope(self) -> Scope:
        return self.scopes.global_scope

    @property
    def current_scope(self) -> Scope:
        return self.scopes[self.current_scope_id]

    def push_scope(self, scope_id: ScopeId) -> None:
        """Make an existing scope current."""
        if scope_id not in self.scopes:
            raise ScopeStackError(f"cannot enter unknown scope {scope_id}")
        self.current_scope_id = scope_id
        logger.debug("Entered scope %s (%s)", self.scopes[scope_id].name, scope_id)

    def pop_scope(self) -> None:
        """Return to the current scope's parent."""
        parent = self.current_scope.parent
        if parent is None:
            raise ScopeStackError("cannot leave the global scope")
        logger.debug("Left scope %s (%s)", self.current_scope.name, self.current_scope_id)
        self.current_scope_id = parent

    # ------------------------------------------------------------------
    # Symbols and types
    # ------------------------------------------------------------------

    def resolve(self, name: str) -> Optional[Symbol]:
        """Innermost symbol called *name* visible from the current scope."""
        return self.scopes.lookup(self.current_scope_id, name)

    def resolve_id(self, symbol_id: SymbolId) -> Optional[Symbol]:
        return self.scopes.lookup_id(self.current_scope_id, symbol_id)

    def declare(
        self,
        name: str,
        variant: SymbolVariant,
        span: Optional[SourceSpan] = None,
    ) -> Symbol:
        """Insert a new symbol into the current scope.

        Only the current scope is checked for a clash; shadowing a name
        from an enclosing scope is allowed.
        """
        kind = _symbol_kind(variant)
        existing = self.current_scope.find_local(name)
        if existing is not None:
            raise RedefinedSymbolError(name, span=span, kind=kind).add_note(
                f"'{name}' is already declared as a {_symbol_kind(existing.variant)} "
                f"in the {self.current_scope.name} scope"
            )
        return self.current_scope.insert(Symbol(name, variant), kind=kind)

    def type_name(self, type_id: SymbolId) -> str:
        return self.scopes.type_symbol(type_id).name

    def type_named(self, name: str) -> Symbol:
        """Look up a type symbol by name in the global scope."""
        symbol = self.global_scope.find_local(name)
        if symbol is None or not symbol.is_type:
            raise UndefinedSymbolError(name, kind="type")
        return symbol

    def function_type(
        self,
        argument_ids: Sequence[SymbolId],
        return_id: Optional[SymbolId] = None,
    ) -> Symbol:
        """Find or create the global function type with this signature.

        Function types are interned by their structural name, so every
        function with the same signature shares one type id.
        """
        name = function_type_name(
            [self.type_name(arg) for arg in argument_ids],
            self.type_name(return_id) if return_id is not None else None,
        )
        existing = self.global_scope.find_local(name)
        if existing is not None:
            return existing

        symbol = Symbol(name, FunctionType(tuple(argument_ids), return_id))
        return self.global_scope.insert(symbol, kind="type")

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, node: A.Node) -> SemanticResult:
        return A.dispatch_node(node, self)

    def _require_value(self, result: SemanticResult, context: str, node: A.Node) -> SymbolId:
        if result.type_id is None:
            raise MissingValueError(context, span=span_of(node))
        return result.type_id

    def visit_block(self, node: A.Block) -> SemanticResult:
        scope = self.scopes.new_scope("block", parent=self.current_scope_id)
        self.push_scope(scope.id)
        try:
            statements = tuple(self.analyze(stmt).node for stmt in node.statements)
        finally:
            self.pop_scope()
        return SemanticResult(Block(statements, scope.id, node.token))

    def visit_literal(self, node: A.Literal) -> SemanticResult:
        return SemanticResult(Literal(node.token, node.kind), _LITERAL_TYPES[node.kind].id)

    def visit_variable(self, node: A.Variable) -> SemanticResult:
        name = node.name.text
        symbol = self.resolve(name)
        if symbol is None:
            raise UndefinedSymbolError(name, span=node.name.span)
        if symbol.type_id is None:
            raise SemanticError(
                f"'{name}' names a type, not a value", span=node.name.span
            )
        return SemanticResult(Variable(symbol.id, node.name), symbol.type_id)

    def visit_declaration(self, node: A.Declaration) -> SemanticResult:
        initializer = self.analyze(node.initializer)
        type_id = self._require_value(initializer, "Variable initializer", node.initializer)

        symbol = self.declare(node.name.text, VariableSymbol(type_id), span=node.name.span)
        return SemanticResult(Declaration(symbol.id, initializer.node, node.name))

    def visit_assignment(self, node: A.Assignment) -> SemanticResult:
        target = node.target
        if not isinstance(target, A.Variable):
            raise InvalidAssignmentTargetError(f"'{_describe(target)}'", span=span_of(target))

        name = target.name.text
        symbol = self.resolve(name)
        if symbol is None:
            raise UndefinedSymbolError(name, span=target.name.span)
        if not isinstance(symbol.variant, VariableSymbol):
            raise InvalidAssignmentTargetError(
                f"{_symbol_kind(symbol.variant)} '{name}'", span=target.name.span
            )

        value = self.analyze(node.value)
        value_type = self._require_value(value, "Assigned value", node.value)
        if value_type != symbol.variant.type_id:
            raise TypeMismatchError(
                self.type_name(symbol.variant.type_id),
                self.type_name(value_type),
                span=span_of(node.value),
                context=f"assignment to '{name}'",
            )
        return SemanticResult(Assignment(symbol.id, value.node, target.name))

    def visit_call(self, node: A.Call) -> SemanticResult:
        callee_name = _describe(node.callee)
        callee = self.analyze(node.callee)
        callee_type = self.scopes.type_symbol(
            self._require_value(callee, "Callee", node.callee)
        )
        signature = callee_type.variant
        if not isinstance(signature, FunctionType):
            raise NotCallableError(callee_name, callee_type.name, span=span_of(node.callee))

        if len(node.arguments) != len(signature.argument_ids):
            raise ArityMismatchError(
                callee_name,
                len(signature.argument_ids),
                len(node.arguments),
                span=node.token.span,
            )

        arguments: List[SemanticNode] = []
        for index, (argument, parameter_type) in enumerate(
            zip(node.arguments, signature.argument_ids), start=1
        ):
            result = self.analyze(argument)
            argument_type = self._require_value(result, "Function argument", argument)
            if argument_type != parameter_type:
                raise TypeMismatchError(
                    self.type_name(parameter_type),
                    self.type_name(argument_type),
                    span=span_of(argument),
                    context=f"argument {index} of '{callee_name}'",
                )
            arguments.append(result.node)

        return SemanticResult(
            Call(callee.node, tuple(arguments), node.token), signature.return_id
        )

    def visit_if(self, node: A.If) -> SemanticResult:
        condition = self.analyze(node.condition)
        condition_type = self._require_value(condition, "If condition", node.condition)
        if condition_type != TRUTH_TYPE.id:
            raise TypeMismatchError(
                TRUTH_TYPE.name,
                self.type_name(condition_type),
                span=span_of(node.condition),
                context="if condition",
            )

        body = self.analyze(node.body)
        return SemanticResult(If(condition.node, body.node, node.token))

    def visit_debug_print(self, node: A.DebugPrint) -> SemanticResult:
        operand = self.analyze(node.operand)
        self._require_value(operand, "Debug-print operand", node.operand)
        return SemanticResult(DebugPrint(operand.node, node.token))


def _describe(node: A.Node) -> str:
    """Short source-like label for an expression in diagnostics."""
    if isinstance(node, A.Variable):
        return node.name.text
    if isinstance(node, A.Literal):
        return node.token.lexeme or node.token.text
    if isinstance(node, A.Call):
        return f"{_describe(node.callee)}(...)"
    if isinstance(node, A.Assignment):
        return f"{_describe(node.target)} = ..."
    return "expression"
