"""odo/dump.py – S-expression dumps of syntax and annotated trees.

Both trees convert to nested lists first (``to_sexp``) and are then laid
out by ``format_sexp``: a list that fits in ``line_width`` stays on one
line, otherwise its head stays on the opening line and every child goes
on its own, indented line.

Annotated trees show resolved identities as ``name#xxxxxxxx`` (the first
eight hex digits of the symbol id) and each block's scope as
``(scope xxxxxxxx)``.
"""

from __future__ import annotations

import sys
import uuid
from typing import Any, List, TextIO, Union

from odo import ast as A
from odo import semantic as S
from odo.ast import LiteralKind

__all__ = [
    "SexpDumper",
    "to_sexp",
    "format_sexp",
]


class _Text(str):
    """A text literal; always printed quoted."""


def _short(identity: uuid.UUID) -> str:
    return identity.hex[:8]


def _literal(token_text: str, kind: LiteralKind) -> List[Any]:
    if kind is LiteralKind.INTEGER and token_text.isdigit():
        return [kind.value, int(token_text)]
    if kind is LiteralKind.TRUTH:
        return [kind.value, token_text == "true"]
    if kind is LiteralKind.TEXT:
        return [kind.value, _Text(token_text)]
    return [kind.value, token_text]


def to_sexp(node: Union[A.Node, S.SemanticNode]) -> Any:
    """Convert a syntax or annotated node to a nested list."""
    # -- untyped syntax tree -------------------------------------------
    if isinstance(node, A.Block):
        return ["block"] + [to_sexp(stmt) for stmt in node.statements]
    if isinstance(node, A.Literal):
        return _literal(node.token.text, node.kind)
    if isinstance(node, A.Variable):
        return ["var-ref", node.name.text]
    if isinstance(node, A.Declaration):
        return ["declare", node.name.text, to_sexp(node.initializer)]
    if isinstance(node, A.Assignment):
        return ["assign", to_sexp(node.target), to_sexp(node.value)]
    if isinstance(node, A.Call):
        return ["call", to_sexp(node.callee)] + [to_sexp(arg) for arg in node.arguments]
    if isinstance(node, A.If):
        return ["if", to_sexp(node.condition), to_sexp(node.body)]
    if isinstance(node, A.DebugPrint):
        return ["debug-print", to_sexp(node.operand)]

    # -- annotated tree ------------------------------------------------
    if isinstance(node, S.Block):
        return ["block", ["scope", _short(node.scope_id)]] + [
            to_sexp(stmt) for stmt in node.statements
        ]
    if isinstance(node, S.Literal):
        return _literal(node.token.text, node.kind)
    if isinstance(node, S.Variable):
        return ["var-ref", f"{node.token.text}#{_short(node.symbol_id)}"]
    if isinstance(node, S.Declaration):
        return ["declare", f"{node.token.text}#{_short(node.symbol_id)}", to_sexp(node.initializer)]
    if isinstance(node, S.Assignment):
        return ["assign", f"{node.token.text}#{_short(node.symbol_id)}", to_sexp(node.value)]
    if isinstance(node, S.Call):
        return ["call", to_sexp(node.callee)] + [to_sexp(arg) for arg in node.arguments]
    if isinstance(node, S.If):
        return ["if", to_sexp(node.condition), to_sexp(node.body)]
    if isinstance(node, S.DebugPrint):
        return ["debug-print", to_sexp(node.operand)]

    raise TypeError(f"Cannot dump {type(node).__name__}")


def _format_atom(sexp: Any) -> str:
    if isinstance(sexp, bool):
        return "#t" if sexp else "#f"
    if isinstance(sexp, (int, float)):
        return str(sexp)
    if isinstance(sexp, _Text):
        escaped = sexp.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if isinstance(sexp, str):
        if any(c in sexp for c in ' ()"\'') or not sexp:
            return f'"{sexp}"'
        return sexp
    return repr(sexp)


def _format_flat(sexp: Any) -> str:
    if not isinstance(sexp, list):
        return _format_atom(sexp)
    if not sexp:
        return "()"
    return "(" + " ".join(_format_flat(item) for item in sexp) + ")"


def format_sexp(sexp: Any, indent: int = 2, line_width: int = 80, depth: int = 0) -> str:
    """Lay out a nested-list S-expression."""
    indent_str = " " * (indent * depth)
    if not isinstance(sexp, list) or not sexp:
        return f"{indent_str}{_format_flat(sexp)}"

    single = _format_flat(sexp)
    if len(single) + len(indent_str) <= line_width:
        return f"{indent_str}{single}"

    lines = [f"{indent_str}({_format_flat(sexp[0])}"]
    for item in sexp[1:]:
        lines.append(format_sexp(item, indent, line_width, depth + 1))
    lines[-1] += ")"
    return "\n".join(lines)


class SexpDumper:
    """Write trees to a stream as S-expressions, one top-level node per line."""

    def __init__(self, stream: TextIO = sys.stdout,
                 indent: int = 2,
                 line_width: int = 80) -> None:
        self.stream = stream
        self.indent = indent
        self.line_width = line_width

    def dump(self, node: Union[A.Node, S.SemanticNode]) -> None:
        self.stream.write(format_sexp(to_sexp(node), self.indent, self.line_width))
        self.stream.write("\n")
