"""odo/ast.py – untyped syntax tree produced by the parser.

Design invariants
-----------------
* Every node is a frozen dataclass (immutable after construction).
* Nodes that carry children use tuples, never lists.
* The variant set is closed: ``Node`` is a ``Union`` and consumers
  dispatch on the concrete type, there is no ``accept`` protocol.
* Names are still raw ``Token``s here; the semantic analyzer replaces
  them with symbol identities in ``odo.semantic``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from odo.errors import SourceSpan
from odo.lexer import Token

__all__ = [
    "LiteralKind",
    "Block",
    "Literal",
    "Variable",
    "Assignment",
    "Declaration",
    "Call",
    "If",
    "DebugPrint",
    "Node",
    "span_of",
    "dispatch_node",
]


class LiteralKind(Enum):
    """Which primitive a literal token spells.  ``DECIMAL`` is reserved."""

    INTEGER = "int"
    DECIMAL = "dec"
    TEXT = "text"
    TRUTH = "truth"


@dataclass(frozen=True, slots=True)
class Block:
    """``{ <statements> }`` or a whole program when ``token`` is ``None``."""

    statements: Tuple["Node", ...]
    token: Optional[Token] = None


@dataclass(frozen=True, slots=True)
class Literal:
    token: Token
    kind: LiteralKind


@dataclass(frozen=True, slots=True)
class Variable:
    name: Token


@dataclass(frozen=True, slots=True)
class Assignment:
    """``<target> = <value>``; the parser accepts any target expression."""

    target: "Node"
    value: "Node"
    token: Token


@dataclass(frozen=True, slots=True)
class Declaration:
    """``var <name> = <initializer>``"""

    name: Token
    initializer: "Node"


@dataclass(frozen=True, slots=True)
class Call:
    callee: "Node"
    arguments: Tuple["Node", ...]
    token: Token


@dataclass(frozen=True, slots=True)
class If:
    """``if <condition> <body>``; single statement body, no else branch."""

    condition: "Node"
    body: "Node"
    token: Token


@dataclass(frozen=True, slots=True)
class DebugPrint:
    operand: "Node"
    token: Token


Node = Union[Block, Literal, Variable, Assignment, Declaration, Call, If, DebugPrint]


def span_of(node: Node) -> SourceSpan:
    """Best source location for *node*, used when reporting errors."""
    if isinstance(node, Literal):
        return node.token.span
    if isinstance(node, Variable):
        return node.name.span
    if isinstance(node, Declaration):
        return node.name.span
    if isinstance(node, (Assignment, Call)):
        return span_of(node.target if isinstance(node, Assignment) else node.callee)
    if isinstance(node, Block):
        if node.token is not None:
            return node.token.span
        return span_of(node.statements[0]) if node.statements else SourceSpan()
    return node.token.span


# ════════════════════════════════════════════════════════════════════════
#  Dispatch
# ════════════════════════════════════════════════════════════════════════
#
# ``Node`` is a Union rather than a class hierarchy with ``accept``
# methods, so consumers route a node to ``visit_<variant>`` through here.

_NODE_DISPATCH: dict[type, str] = {
    Block: "visit_block",
    Literal: "visit_literal",
    Variable: "visit_variable",
    Assignment: "visit_assignment",
    Declaration: "visit_declaration",
    Call: "visit_call",
    If: "visit_if",
    DebugPrint: "visit_debug_print",
}


def dispatch_node(node: Node, visitor: Any) -> Any:
    """Dispatch a syntax-tree node to the appropriate visitor method."""
    method_name = _NODE_DISPATCH.get(type(node))
    if method_name is None:
        raise TypeError(f"Unknown syntax node type: {type(node).__name__}")
    return getattr(visitor, method_name)(node)
