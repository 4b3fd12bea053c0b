"""odo: a small statically-typed scripting language.

Source text flows strictly forward through four stages::

    text → tokens → syntax tree → annotated tree → value

Submodules
----------
errors
    Exception hierarchy with structured ``ODO-XXXX`` codes and
    ``SourceSpan`` locations, rendered GCC-style.

lexer, ast, parser
    Lazy tokenizer (parsimonious token grammar), immutable syntax tree,
    recursive-descent parser.

symbols, semantic
    Scope forest and symbols; the ``SemanticAnalyzer`` that resolves names,
    checks types and stamps scope ids onto the annotated tree.

values, interpreter
    Value model and ``ValueTable``; the tree-walking ``Interpreter``.

native
    Registration of host functions and the default prelude.

dump
    S-expression dumps of both trees.

Usage
-----
Command-line::

    python -m odo                 # interactive
    python -m odo -c 'var x = 1; :x'

Programmatic::

    from odo import Interpreter

    interp = Interpreter()
    interp.evaluate("var greeting = \\"hi\\"")
    interp.evaluate("greeting").value.python_value    # 'hi'
"""

from __future__ import annotations

from odo.errors import OdoError
from odo.interpreter import ExecutionResult, Interpreter, InterpreterConfig

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "OdoError",
    "Interpreter",
    "InterpreterConfig",
    "ExecutionResult",
]
