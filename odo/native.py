"""
odo/native.py
=============

Host-supplied ("native") functions.

Registering a native function makes it callable from odo source exactly
like any other name:

1. the function type ``<args:ret>`` is found or created in the global
   scope (function types are interned by structural name);
2. a native-function symbol of that type is declared in the scope that is
   current at registration time (global, between ``evaluate`` calls);
3. a native value wrapping the callable is stored and bound to it.

A native callable receives a list of argument ``Value``s and may return a
``Value`` or a plain ``int``/``float``/``str``/``bool``.  Without a declared
return type its result is ignored.

Prelude
-------
``print(text)``       – write the text to the debug stream
``print_int(int)``    – write the integer to the debug stream
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence

from odo.ast import LiteralKind
from odo.symbols import NativeFunctionSymbol, Symbol
from odo.values import Value

if TYPE_CHECKING:
    from odo.interpreter import Interpreter

logger = logging.getLogger(__name__)

__all__ = [
    "bind_native_function",
    "install_prelude",
    "PRELUDE_FUNCTIONS",
]

NativeCallable = Callable[[Sequence[Value]], Any]

_RETURN_KINDS: Dict[str, LiteralKind] = {kind.value: kind for kind in LiteralKind}


def bind_native_function(
    interpreter: "Interpreter",
    name: str,
    function: NativeCallable,
    argument_types: Sequence[str] = (),
    return_type: Optional[str] = None,
) -> Symbol:
    """Register *function* under *name* in the interpreter's current scope.

    *argument_types* and *return_type* are type names (``"int"``,
    ``"text"``, ``"<int:>"`` ...).  The return type must be a primitive.
    Raises ``UndefinedSymbolError`` for an unknown type name and
    ``RedefinedSymbolError`` when *name* is already taken in that scope.
    """
    analyzer = interpreter.analyzer
    argument_ids = [analyzer.type_named(type_name).id for type_name in argument_types]

    return_id = None
    return_kind = None
    if return_type is not None:
        return_kind = _RETURN_KINDS.get(return_type)
        if return_kind is None:
            raise ValueError(
                f"native function '{name}' must return a primitive type, not '{return_type}'"
            )
        return_id = analyzer.type_named(return_type).id

    function_type = analyzer.function_type(argument_ids, return_id)
    symbol = analyzer.declare(name, NativeFunctionSymbol(function_type.id))
    interpreter.bind(symbol.id, Value.native(name, function, return_kind))

    logger.debug("Registered native function %s %s", name, function_type.name)
    return symbol


# ═══════════════════════════════════════════════════════════════════════════
# PRELUDE
# ═══════════════════════════════════════════════════════════════════════════

def _print_text(interpreter: "Interpreter") -> NativeCallable:
    def call(arguments: Sequence[Value]) -> None:
        interpreter.write_debug(arguments[0].python_value)
    return call


def _print_int(interpreter: "Interpreter") -> NativeCallable:
    def call(arguments: Sequence[Value]) -> None:
        interpreter.write_debug(str(arguments[0].python_value))
    return call


PRELUDE_FUNCTIONS: Dict[str, Dict[str, Any]] = {
    "print": {
        "factory": _print_text,
        "arguments": ("text",),
        "returns": None,
        "description": "Write a text value to the debug stream",
    },
    "print_int": {
        "factory": _print_int,
        "arguments": ("int",),
        "returns": None,
        "description": "Write an integer to the debug stream",
    },
}


def install_prelude(interpreter: "Interpreter") -> None:
    """Register every ``PRELUDE_FUNCTIONS`` entry on *interpreter*."""
    for name, entry in PRELUDE_FUNCTIONS.items():
        bind_native_function(
            interpreter,
            name,
            entry["factory"](interpreter),
            entry["arguments"],
            entry["returns"],
        )
