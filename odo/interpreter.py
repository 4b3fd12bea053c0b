"""
odo.interpreter
===============

Tree-walking evaluator for annotated trees.

Public API
----------
* ``Interpreter``         – owns one ``SemanticAnalyzer``, a ``ValueTable``
  and the binding map; ``evaluate(source)`` runs the whole pipeline
* ``InterpreterConfig``   – configuration dataclass
* ``ExecutionResult``     – the value a node produced

State model
-----------
``bindings`` maps symbol id → value id and ``values`` maps value id →
``Value``.  Declaring or assigning only rebinds a symbol and inserts the
new value; the previously bound value stays in the table until
:meth:`Interpreter.collect_garbage` drops it.

Scopes are never resolved by name here.  A ``Block`` re-enters the exact
scope id the analyzer stamped on it, using the analyzer's own scope
cursor, and a variable read resolves its symbol id up that cursor's chain.

Error policy
------------
The first error aborts the current ``evaluate`` call.  The scope cursor is
always restored; declarations, bindings and values from statements that
already ran are kept.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, TextIO, runtime_checkable

from odo import semantic as S
from odo.ast import LiteralKind, Node
from odo.errors import InternalError, OdoError, UnboundValueError
from odo.errors import RuntimeError as ExecutionError
from odo.lexer import Lexer
from odo.native import bind_native_function, install_prelude
from odo.parser import Parser
from odo.semantic import SemanticAnalyzer, SemanticResult, dispatch_semantic
from odo.symbols import Symbol, SymbolId
from odo.values import NOTHING, NativeFunction, Value, ValueId, ValueTable

logger = logging.getLogger(__name__)

__all__ = [
    "StatementObserver",
    "InterpreterConfig",
    "ExecutionResult",
    "Interpreter",
]


# ===================================================================== #
#  Configuration                                                         #
# ===================================================================== #

@runtime_checkable
class StatementObserver(Protocol):
    """Callback invoked for each top-level statement before it executes."""

    def observe(self, statement: Node, analyzed: SemanticResult) -> None: ...


@dataclass
class InterpreterConfig:
    """Tuning knobs for an ``Interpreter``."""
    debug_stream: Optional[TextIO] = None
    source_name: str = "<input>"
    collect_every: Optional[int] = None
    install_prelude: bool = False

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        problems: List[str] = []
        if self.collect_every is not None and self.collect_every <= 0:
            problems.append("collect_every must be positive")
        if not self.source_name:
            problems.append("source_name must not be empty")
        return problems


@dataclass(frozen=True)
class ExecutionResult:
    value: Value = NOTHING

    @property
    def is_nothing(self) -> bool:
        return self.value.is_nothing

    def __str__(self) -> str:
        return self.value.render()


_NOTHING_RESULT = ExecutionResult(NOTHING)


# ===================================================================== #
#  Interpreter                                                           #
# ===================================================================== #

class Interpreter:
    """
    Runs source text through lexer, parser, analyzer and evaluator.

    Usage::

        interp = Interpreter()
        interp.evaluate("var x = 1")
        interp.evaluate("x").value.python_value   # 1

    State persists across ``evaluate`` calls in the analyzer's ``repl``
    scope.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None) -> None:
        self.config = config or InterpreterConfig()
        problems = self.config.validate()
        if problems:
            raise ValueError("Invalid interpreter configuration: " + "; ".join(problems))

        self.analyzer = SemanticAnalyzer()
        self.values = ValueTable()
        self.bindings: Dict[SymbolId, ValueId] = {}
        self._evaluations = 0

        if self.config.install_prelude:
            install_prelude(self)

    # ------------------------------------------------------------------ #
    #  Entry points                                                       #
    # ------------------------------------------------------------------ #

    def evaluate(
        self,
        source: str,
        observer: Optional[StatementObserver] = None,
    ) -> ExecutionResult:
        """Evaluate every top-level statement of *source* in the REPL scope.

        *observer*, if given, sees each statement after analysis and before
        it runs.  Returns the last statement's result, or nothing for empty
        input.
        """
        name = self.config.source_name
        statements = Parser(Lexer(source, name), name).parse_program()

        result = _NOTHING_RESULT
        self.analyzer.push_scope(self.analyzer.repl_scope.id)
        try:
            for statement in statements:
                analyzed = self.analyzer.analyze(statement)
                if observer is not None:
                    observer.observe(statement, analyzed)
                result = self.execute(analyzed.node)
        finally:
            self.analyzer.pop_scope()

        self._evaluations += 1
        logger.info(
            "Evaluated %d statement(s); %d binding(s), %d value(s)",
            len(statements), len(self.bindings), len(self.values),
        )
        every = self.config.collect_every
        if every is not None and self._evaluations % every == 0:
            self.collect_garbage()
        return result

    def execute(self, node: S.SemanticNode) -> ExecutionResult:
        """Execute one annotated node against the current scope cursor."""
        return dispatch_semantic(node, self)

    def bind(self, symbol_id: SymbolId, value: Value) -> None:
        """Point *symbol_id* at *value*, storing the value."""
        self.bindings[symbol_id] = self.values.insert(value)
        logger.debug("Bound symbol %s to value %s", symbol_id, value.id)

    def lookup(self, name: str) -> Optional[Value]:
        """Value currently bound to *name* as seen from the REPL scope."""
        symbol = self.analyzer.scopes.lookup(self.analyzer.repl_scope.id, name)
        if symbol is None or symbol.id not in self.bindings:
            return None
        return self.values.get(self.bindings[symbol.id])

    def bind_function(
        self,
        name: str,
        function: Callable[[Sequence[Value]], Any],
        argument_types: Sequence[str] = (),
        return_type: Optional[str] = None,
    ) -> Symbol:
        """Register a host callable; see ``odo.native.bind_native_function``."""
        return bind_native_function(self, name, function, argument_types, return_type)

    def collect_garbage(self) -> int:
        """Drop values no symbol is bound to.  Scopes are never reclaimed."""
        return self.values.collect(self.bindings.values())

    def write_debug(self, text: str) -> None:
        stream = self.config.debug_stream or sys.stdout
        stream.write(text + "\n")

    # ------------------------------------------------------------------ #
    #  Node evaluation                                                    #
    # ------------------------------------------------------------------ #

    def visit_block(self, node: S.Block) -> ExecutionResult:
        self.analyzer.push_scope(node.scope_id)
        try:
            for statement in node.statements:
                self.execute(statement)
        finally:
            self.analyzer.pop_scope()
        return _NOTHING_RESULT

    def visit_literal(self, node: S.Literal) -> ExecutionResult:
        text = node.token.text
        try:
            if node.kind is LiteralKind.INTEGER:
                return ExecutionResult(Value.integer(int(text)))
            if node.kind is LiteralKind.DECIMAL:
                return ExecutionResult(Value.decimal(float(text)))
        except ValueError as exc:
            raise InternalError(
                f"malformed {node.kind.value} literal {text!r}", span=node.token.span
            ) from exc

        if node.kind is LiteralKind.TRUTH:
            if text not in ("true", "false"):
                raise InternalError(f"malformed truth literal {text!r}", span=node.token.span)
            return ExecutionResult(Value.truth(text == "true"))
        return ExecutionResult(Value.text(text))

    def visit_variable(self, node: S.Variable) -> ExecutionResult:
        symbol = self.analyzer.resolve_id(node.symbol_id)
        if symbol is None:
            raise InternalError(
                f"symbol '{node.token.text}' is not visible from the current scope",
                span=node.token.span,
            )

        value_id = self.bindings.get(symbol.id)
        value = self.values.get(value_id) if value_id is not None else None
        if value is None:
            raise UnboundValueError(symbol.name, span=node.token.span)
        return ExecutionResult(value)

    def visit_declaration(self, node: S.Declaration) -> ExecutionResult:
        self.bind(node.symbol_id, self.execute(node.initializer).value)
        return _NOTHING_RESULT

    def visit_assignment(self, node: S.Assignment) -> ExecutionResult:
        self.bind(node.symbol_id, self.execute(node.value).value)
        return _NOTHING_RESULT

    def visit_call(self, node: S.Call) -> ExecutionResult:
        callee = self.execute(node.callee).value
        payload = callee.payload
        if not isinstance(payload, NativeFunction):
            raise InternalError(f"cannot call {callee.render()}", span=node.token.span)

        arguments = [self.execute(argument).value for argument in node.arguments]
        try:
            raw = payload.function(arguments)
        except OdoError:
            raise
        except Exception as exc:
            raise ExecutionError(
                f"native function '{payload.name}' failed: {exc}",
                span=node.token.span,
                cause=exc,
            ) from exc

        if payload.return_kind is None:
            return _NOTHING_RESULT

        result = Value.from_python(raw)
        if result.kind is not payload.return_kind:
            raise InternalError(
                f"native function '{payload.name}' returned {result.render()}, "
                f"declared {payload.return_kind.value}",
                span=node.token.span,
            )
        self.values.insert(result)
        return ExecutionResult(result)

    def visit_if(self, node: S.If) -> ExecutionResult:
        condition = self.execute(node.condition).value
        if condition.python_value is True:
            self.execute(node.body)
        return _NOTHING_RESULT

    def visit_debug_print(self, node: S.DebugPrint) -> ExecutionResult:
        self.write_debug(self.execute(node.operand).value.render())
        return _NOTHING_RESULT
