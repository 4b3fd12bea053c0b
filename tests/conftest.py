# tests/conftest.py
"""
Shared fixtures and odo source snippets for the test-suite.
"""

import io

import pytest

from odo.interpreter import Interpreter, InterpreterConfig
from odo.parser import parse_program
from odo.semantic import SemanticAnalyzer


# ─────────────────────────────────────────────────────────────────────────
#  Source snippets
# ─────────────────────────────────────────────────────────────────────────

DEBUG_PRINT_ODO = "var x = 1\nvar y = x\n:y"

IF_BLOCK_ODO = "if true { var z = 5 }"

SHADOWING_ODO = """\
var x = 1
{
    var x = true
    :x
}
:x
"""

OUTER_ASSIGNMENT_ODO = """\
var x = 1
{
    x = 5
}
:x
"""

NESTED_BLOCKS_ODO = """\
var depth = 0
{
    var depth = "one"
    {
        var depth = true
        :depth
    }
    :depth
}
:depth
"""

SEMICOLONS_ODO = "var a = 1; var b = a; :b"

MULTILINE_CALL_ODO = """\
f(
    1,
    2
)
"""


# ─────────────────────────────────────────────────────────────────────────
#  Fixtures
# ─────────────────────────────────────────────────────────────────────────

@pytest.fixture
def debug_stream():
    """Captures debug-print output."""
    return io.StringIO()


@pytest.fixture
def interp(debug_stream):
    return Interpreter(InterpreterConfig(debug_stream=debug_stream))


@pytest.fixture
def prelude_interp(debug_stream):
    return Interpreter(InterpreterConfig(debug_stream=debug_stream, install_prelude=True))


@pytest.fixture
def analyzer():
    return SemanticAnalyzer()


def analyze_in_repl(analyzer, source):
    """Analyze every top-level statement of *source* in the REPL scope."""
    analyzer.push_scope(analyzer.repl_scope.id)
    try:
        return [analyzer.analyze(stmt) for stmt in parse_program(source)]
    finally:
        analyzer.pop_scope()
