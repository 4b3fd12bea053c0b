# odo/errors.py
"""
Odo Error Types

This module provides the error handling infrastructure for the odo
pipeline (lexer → parser → semantic analyzer → interpreter). Every stage
raises a subclass of ``OdoError``; nothing is recovered locally and the
caller of ``Interpreter.evaluate`` decides what to do with the failure.

Architecture Overview:
─────────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                    │
├─────────────────────────────────────────────────────────────────────────────┤
│  OdoError (base)                                                            │
│  ├── LexicalError      - Tokenization failures                              │
│  ├── SyntaxError       - Parse-time grammar violations                      │
│  ├── SemanticError     - Type/scope/binding errors                          │
│  │   ├── TypeError     - Type mismatch, calls to non-functions              │
│  │   ├── ScopeError    - Undefined/redefined symbols                        │
│  │   └── BindingError  - Arity, assignment targets, missing values          │
│  ├── RuntimeError      - Execution-time errors                              │
│  └── InternalError     - Pipeline bugs (should never happen)                │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error has a unique code following the pattern ODO-XXXX where XXXX is
a 4-digit number in ranges:
  - 0001-0999: Lexical errors
  - 1000-1999: Syntax errors
  - 2000-2999: Semantic errors (type)
  - 3000-3999: Semantic errors (scope/binding)
  - 5000-5999: Runtime errors
  - 9000-9999: Internal errors

Example Usage:
──────────────
    from odo.errors import OdoError
    from odo.interpreter import Interpreter

    interp = Interpreter()
    try:
        interp.evaluate("var x = true; x = 1")
    except OdoError as exc:
        print(exc)          # <input>:1:18: error: Type mismatch ... [ODO-2000]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto, unique
from typing import (
    Any,
    List,
    Optional,
    Sequence,
)

__all__ = [
    "ErrorSeverity",
    "ErrorPhase",
    "ErrorCategory",
    "ErrorCode",
    "OdoErrorCodes",
    "SourceSpan",
    "ErrorNote",
    "ErrorMessage",
    "OdoError",
    "LexicalError",
    "InvalidCharacterError",
    "UnterminatedStringError",
    "SyntaxError",
    "UnexpectedTokenError",
    "UnexpectedEOFError",
    "SemanticError",
    "TypeError",
    "TypeMismatchError",
    "NotCallableError",
    "ScopeError",
    "UndefinedSymbolError",
    "RedefinedSymbolError",
    "BindingError",
    "ArityMismatchError",
    "InvalidAssignmentTargetError",
    "MissingValueError",
    "RuntimeError",
    "InternalError",
    "UnboundValueError",
    "ScopeStackError",
]


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR SEVERITY AND CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorSeverity(Enum):
    """Severity levels for odo errors."""

    # Errors that abort the current evaluate-call
    FATAL = "fatal"

    # Standard errors that must be fixed
    ERROR = "error"


@unique
class ErrorPhase(Enum):
    """
    Pipeline phase where the error occurred.

    This helps with error categorization and debugging.
    """

    LEXICAL = "lexical"        # Tokenization
    SYNTAX = "syntax"          # Parsing
    SEMANTIC = "semantic"      # Type checking, scope resolution
    RUNTIME = "runtime"        # Execution
    INTERNAL = "internal"      # Pipeline internals


@unique
class ErrorCategory(Enum):
    """
    Fine-grained error categories for filtering and statistics.
    """

    # Lexical categories
    INVALID_CHARACTER = auto()
    UNTERMINATED_STRING = auto()

    # Syntax categories
    UNEXPECTED_TOKEN = auto()
    UNEXPECTED_EOF = auto()

    # Semantic categories - Type
    TYPE_MISMATCH = auto()
    NOT_CALLABLE = auto()

    # Semantic categories - Scope
    UNDEFINED_SYMBOL = auto()
    REDEFINED_SYMBOL = auto()

    # Semantic categories - Binding
    ARITY_MISMATCH = auto()
    INVALID_ASSIGNMENT_TARGET = auto()
    MISSING_VALUE = auto()

    # Runtime categories
    EXECUTION_ERROR = auto()

    # Internal categories
    INTERNAL_ERROR = auto()
    UNBOUND_VALUE = auto()
    INVARIANT_BROKEN = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorCode:
    """
    Structured error codes for odo errors.

    Error codes follow the pattern ODO-NNNN where NNNN is a 4-digit number
    in the range belonging to the error's phase.
    """

    __slots__ = ("prefix", "number", "category", "phase", "default_severity")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        phase: ErrorPhase,
        default_severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.phase = phase
        self.default_severity = default_severity

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class OdoErrorCodes:
    """Predefined error codes for the odo language."""

    # ═══════════════════════════════════════════════════════════════════════════
    # LEXICAL ERRORS (0001-0999)
    # ═══════════════════════════════════════════════════════════════════════════

    INVALID_CHARACTER = ErrorCode(
        "ODO", 1, ErrorCategory.INVALID_CHARACTER, ErrorPhase.LEXICAL
    )
    UNTERMINATED_STRING = ErrorCode(
        "ODO", 2, ErrorCategory.UNTERMINATED_STRING, ErrorPhase.LEXICAL
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # SYNTAX ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNEXPECTED_TOKEN = ErrorCode(
        "ODO", 1000, ErrorCategory.UNEXPECTED_TOKEN, ErrorPhase.SYNTAX
    )
    UNEXPECTED_EOF = ErrorCode(
        "ODO", 1002, ErrorCategory.UNEXPECTED_EOF, ErrorPhase.SYNTAX
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # TYPE ERRORS (2000-2999)
    # ═══════════════════════════════════════════════════════════════════════════

    TYPE_MISMATCH = ErrorCode(
        "ODO", 2000, ErrorCategory.TYPE_MISMATCH, ErrorPhase.SEMANTIC
    )
    NOT_CALLABLE = ErrorCode(
        "ODO", 2001, ErrorCategory.NOT_CALLABLE, ErrorPhase.SEMANTIC
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # SCOPE / BINDING ERRORS (3000-3999)
    # ═══════════════════════════════════════════════════════════════════════════

    UNDEFINED_SYMBOL = ErrorCode(
        "ODO", 3000, ErrorCategory.UNDEFINED_SYMBOL, ErrorPhase.SEMANTIC
    )
    REDEFINED_SYMBOL = ErrorCode(
        "ODO", 3001, ErrorCategory.REDEFINED_SYMBOL, ErrorPhase.SEMANTIC
    )
    ARITY_MISMATCH = ErrorCode(
        "ODO", 3100, ErrorCategory.ARITY_MISMATCH, ErrorPhase.SEMANTIC
    )
    INVALID_ASSIGNMENT_TARGET = ErrorCode(
        "ODO", 3101, ErrorCategory.INVALID_ASSIGNMENT_TARGET, ErrorPhase.SEMANTIC
    )
    MISSING_VALUE = ErrorCode(
        "ODO", 3102, ErrorCategory.MISSING_VALUE, ErrorPhase.SEMANTIC
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # RUNTIME ERRORS (5000-5999)
    # ═══════════════════════════════════════════════════════════════════════════

    EXECUTION_ERROR = ErrorCode(
        "ODO", 5000, ErrorCategory.EXECUTION_ERROR, ErrorPhase.RUNTIME
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # INTERNAL ERRORS (9000-9999)
    # ═══════════════════════════════════════════════════════════════════════════

    INTERNAL_ERROR = ErrorCode(
        "ODO", 9000, ErrorCategory.INTERNAL_ERROR, ErrorPhase.INTERNAL,
        ErrorSeverity.FATAL
    )
    UNBOUND_VALUE = ErrorCode(
        "ODO", 9001, ErrorCategory.UNBOUND_VALUE, ErrorPhase.INTERNAL,
        ErrorSeverity.FATAL
    )
    SCOPE_STACK = ErrorCode(
        "ODO", 9002, ErrorCategory.INVARIANT_BROKEN, ErrorPhase.INTERNAL,
        ErrorSeverity.FATAL
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE LOCATION TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SourceSpan:
    """
    A span of source code with start and end positions.

    Lines and columns are 1-based; ``0`` means "unknown".
    """

    file: str = ""
    line: int = 0
    column: int = 0
    end_line: int = 0
    end_column: int = 0

    def __post_init__(self) -> None:
        # Normalize: if end not specified, use start
        if self.end_line == 0:
            object.__setattr__(self, "end_line", self.line)
        if self.end_column == 0:
            object.__setattr__(self, "end_column", self.column)

    @classmethod
    def from_token(cls, token: Any, file: str = "") -> "SourceSpan":
        """Create a SourceSpan covering a lexer token."""
        line = getattr(token, "line", 0) or 0
        col = getattr(token, "column", 0) or 0
        width = len(getattr(token, "lexeme", "") or "")
        return cls(
            file=file or getattr(token, "file", ""),
            line=line,
            column=col,
            end_line=line,
            end_column=col + max(width - 1, 0),
        )

    def __str__(self) -> str:
        if not self.file and self.line == 0:
            return "<unknown location>"

        parts = []
        if self.file:
            parts.append(self.file)
        if self.line > 0:
            parts.append(str(self.line))
            if self.column > 0:
                parts.append(str(self.column))

        return ":".join(parts)


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGE FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ErrorNote:
    """
    Additional note attached to an error.

    Notes provide extra context, such as what the expected type was.
    """

    message: str
    span: Optional[SourceSpan] = None
    label: str = ""  # e.g., "note", "help"

    def __str__(self) -> str:
        prefix = f"{self.label}: " if self.label else ""
        if self.span:
            return f"{self.span}: {prefix}{self.message}"
        return f"{prefix}{self.message}"


@dataclass
class ErrorMessage:
    """
    A complete error message with all context.

    This is the internal representation of an error before it is printed.
    """

    code: ErrorCode
    message: str
    span: SourceSpan = field(default_factory=SourceSpan)
    severity: Optional[ErrorSeverity] = None  # None means use code's default
    notes: List[ErrorNote] = field(default_factory=list)
    hint: str = ""
    source_line: str = ""  # The actual source code line, if available

    def __post_init__(self) -> None:
        if self.severity is None:
            self.severity = self.code.default_severity

    def add_note(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        label: str = "note",
    ) -> "ErrorMessage":
        """Add a note to this error message."""
        self.notes.append(ErrorNote(message=message, span=span, label=label))
        return self

    def with_hint(self, hint: str) -> "ErrorMessage":
        """Add a hint to this error message."""
        self.hint = hint
        return self

    def with_source(self, line: str) -> "ErrorMessage":
        """Add the source line for display."""
        self.source_line = line
        return self

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        severity = self.severity.value if self.severity else "error"
        main = f"{self.span}: {severity}: {self.message} [{self.code}]"

        lines = [main]

        # Add source line with caret if available
        if self.source_line:
            lines.append(f"    {self.source_line}")
            if self.span.column > 0:
                caret_pos = self.span.column - 1
                caret_len = max(1, self.span.end_column - self.span.column + 1)
                lines.append(f"    {' ' * caret_pos}{'^' * caret_len}")

        for note in self.notes:
            lines.append(str(note))

        if self.hint:
            lines.append(f"hint: {self.hint}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class OdoError(Exception):
    """
    Base exception for all odo errors.

    This exception carries structured error information that can be
    pretty-printed or serialized.
    """

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        severity: Optional[ErrorSeverity] = None,
        cause: Optional[Exception] = None,
        notes: Optional[List[ErrorNote]] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.error_message = ErrorMessage(
            code=code or OdoErrorCodes.INTERNAL_ERROR,
            message=message,
            span=span or SourceSpan(),
            severity=severity,
            notes=notes or [],
            hint=hint,
        )
        self.cause = cause

    @property
    def message(self) -> str:
        return self.error_message.message

    @property
    def code(self) -> ErrorCode:
        return self.error_message.code

    @property
    def phase(self) -> ErrorPhase:
        return self.error_message.code.phase

    @property
    def span(self) -> SourceSpan:
        return self.error_message.span

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_message.severity or ErrorSeverity.ERROR

    def add_note(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        label: str = "note",
    ) -> "OdoError":
        """Add a note to this error."""
        self.error_message.add_note(message, span, label)
        return self

    def with_hint(self, hint: str) -> "OdoError":
        """Add a hint to this error."""
        self.error_message.with_hint(hint)
        return self

    def with_source(self, line: str) -> "OdoError":
        """Attach the offending source line for caret display."""
        self.error_message.with_source(line)
        return self

    def to_gcc_format(self) -> str:
        """Format as a GCC-style error message."""
        return self.error_message.to_gcc_format()

    def __str__(self) -> str:
        return self.to_gcc_format()


# ───────────────────────────────────────────────────────────────────────────────
# LEXICAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class LexicalError(OdoError):
    """Error during tokenization/lexical analysis."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        character: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.INVALID_CHARACTER,
            span=span,
            **kwargs,
        )
        self.character = character


class InvalidCharacterError(LexicalError):
    """Character that starts no token."""

    def __init__(
        self,
        char: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        if len(char) == 1 and not char.isprintable():
            char_desc = f"U+{ord(char):04X}"
        else:
            char_desc = repr(char)

        super().__init__(
            message=f"Unexpected character {char_desc}",
            code=OdoErrorCodes.INVALID_CHARACTER,
            span=span,
            character=char,
            **kwargs,
        )


class UnterminatedStringError(LexicalError):
    """Text literal not closed before the end of the line."""

    def __init__(
        self,
        span: Optional[SourceSpan] = None,
        quote_char: str = '"',
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"Unterminated text literal (missing closing {quote_char})",
            code=OdoErrorCodes.UNTERMINATED_STRING,
            span=span,
            hint="Add the closing quote character",
            **kwargs,
        )


# ───────────────────────────────────────────────────────────────────────────────
# SYNTAX ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class SyntaxError(OdoError):
    """Error during parsing."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        expected: Optional[Sequence[str]] = None,
        got: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.UNEXPECTED_TOKEN,
            span=span,
            **kwargs,
        )
        self.expected = list(expected) if expected else []
        self.got = got


class UnexpectedTokenError(SyntaxError):
    """A token of the wrong kind where a fixed kind was expected."""

    def __init__(
        self,
        got: str,
        expected: Optional[Sequence[str]] = None,
        span: Optional[SourceSpan] = None,
        context: str = "",
        **kwargs: Any,
    ) -> None:
        expected_msg = ""
        if expected:
            if len(expected) == 1:
                expected_msg = f", expected {expected[0]}"
            else:
                expected_msg = f", expected one of: {', '.join(expected[:5])}"

        super().__init__(
            message=f"Unexpected token {got}{expected_msg}",
            code=OdoErrorCodes.UNEXPECTED_TOKEN,
            span=span,
            expected=expected,
            got=got,
            hint=context,
            **kwargs,
        )


class UnexpectedEOFError(SyntaxError):
    """Unexpected end of input."""

    def __init__(
        self,
        expected: Optional[Sequence[str]] = None,
        span: Optional[SourceSpan] = None,
        context: str = "",
        **kwargs: Any,
    ) -> None:
        msg = "Unexpected end of input"
        if expected:
            msg += f", expected {expected[0]}" if len(expected) == 1 else f", expected one of: {', '.join(expected)}"

        super().__init__(
            message=msg,
            code=OdoErrorCodes.UNEXPECTED_EOF,
            span=span,
            expected=expected,
            hint=context,
            **kwargs,
        )


# ───────────────────────────────────────────────────────────────────────────────
# SEMANTIC ERRORS - TYPE
# ───────────────────────────────────────────────────────────────────────────────

class SemanticError(OdoError):
    """Error during semantic analysis."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.TYPE_MISMATCH,
            span=span,
            **kwargs,
        )


class TypeError(SemanticError):
    """Type-related semantic error."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        expected_type: str = "",
        actual_type: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.TYPE_MISMATCH,
            span=span,
            **kwargs,
        )
        self.expected_type = expected_type
        self.actual_type = actual_type


class TypeMismatchError(TypeError):
    """Type mismatch in an assignment, call argument or condition."""

    def __init__(
        self,
        expected: str,
        actual: str,
        span: Optional[SourceSpan] = None,
        context: str = "",
        **kwargs: Any,
    ) -> None:
        ctx = f" in {context}" if context else ""
        super().__init__(
            message=f"Type mismatch{ctx}: expected '{expected}', got '{actual}'",
            code=OdoErrorCodes.TYPE_MISMATCH,
            span=span,
            expected_type=expected,
            actual_type=actual,
            **kwargs,
        )


class NotCallableError(TypeError):
    """Call whose callee does not have a function type."""

    def __init__(
        self,
        callee: str,
        actual_type: str = "",
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        msg = f"'{callee}' is not callable"
        if actual_type:
            msg += f" (its type is '{actual_type}')"
        super().__init__(
            message=msg,
            code=OdoErrorCodes.NOT_CALLABLE,
            span=span,
            actual_type=actual_type,
            **kwargs,
        )


# ───────────────────────────────────────────────────────────────────────────────
# SEMANTIC ERRORS - SCOPE
# ───────────────────────────────────────────────────────────────────────────────

class ScopeError(SemanticError):
    """Scope-related semantic error."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        symbol: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.UNDEFINED_SYMBOL,
            span=span,
            **kwargs,
        )
        self.symbol = symbol


class UndefinedSymbolError(ScopeError):
    """Reference to a name that no visible scope declares."""

    def __init__(
        self,
        name: str,
        span: Optional[SourceSpan] = None,
        kind: str = "variable",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"Unknown {kind} '{name}'",
            code=OdoErrorCodes.UNDEFINED_SYMBOL,
            span=span,
            symbol=name,
            **kwargs,
        )


class RedefinedSymbolError(ScopeError):
    """Name already declared in the same scope."""

    def __init__(
        self,
        name: str,
        span: Optional[SourceSpan] = None,
        kind: str = "variable",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"Redeclaration of {kind} '{name}' in the same scope",
            code=OdoErrorCodes.REDEFINED_SYMBOL,
            span=span,
            symbol=name,
            hint="Names may only be redeclared in a nested block",
            **kwargs,
        )


# ───────────────────────────────────────────────────────────────────────────────
# SEMANTIC ERRORS - BINDING
# ───────────────────────────────────────────────────────────────────────────────

class BindingError(SemanticError):
    """Error binding an expression to a name or a parameter."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.MISSING_VALUE,
            span=span,
            **kwargs,
        )


class ArityMismatchError(BindingError):
    """Wrong number of arguments."""

    def __init__(
        self,
        name: str,
        expected: int,
        actual: int,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"'{name}' expects {expected} argument(s), got {actual}",
            code=OdoErrorCodes.ARITY_MISMATCH,
            span=span,
            **kwargs,
        )
        self.expected_arity = expected
        self.actual_arity = actual


class InvalidAssignmentTargetError(BindingError):
    """Assignment to something that is not a variable."""

    def __init__(
        self,
        target: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"Cannot assign to {target}; only variables are assignable",
            code=OdoErrorCodes.INVALID_ASSIGNMENT_TARGET,
            span=span,
            **kwargs,
        )


class MissingValueError(BindingError):
    """A statement was used where an expression producing a value is required."""

    def __init__(
        self,
        context: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"{context} must be an expression that produces a value",
            code=OdoErrorCodes.MISSING_VALUE,
            span=span,
            **kwargs,
        )


# ───────────────────────────────────────────────────────────────────────────────
# RUNTIME AND INTERNAL ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class RuntimeError(OdoError):
    """Error raised while executing an annotated tree."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=code or OdoErrorCodes.EXECUTION_ERROR,
            span=span,
            **kwargs,
        )


class InternalError(OdoError):
    """Pipeline invariant violated; indicates a bug, not a user error."""

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"Internal error: {message}",
            code=code or OdoErrorCodes.INTERNAL_ERROR,
            span=span,
            **kwargs,
        )


class UnboundValueError(InternalError):
    """A resolvable symbol has no value bound to it."""

    def __init__(
        self,
        name: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=f"symbol '{name}' has no bound value",
            code=OdoErrorCodes.UNBOUND_VALUE,
            span=span,
            **kwargs,
        )
        self.symbol = name


class ScopeStackError(InternalError):
    """Scope push/pop outside the forest's invariants (e.g. popping the root)."""

    def __init__(
        self,
        message: str,
        span: Optional[SourceSpan] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message=message,
            code=OdoErrorCodes.SCOPE_STACK,
            span=span,
            **kwargs,
        )
