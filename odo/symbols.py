"""odo/symbols.py – scopes, symbols and the scope forest.

A *scope* is a symbol table with a unique id and an optional parent id.
Scopes form a forest rooted at the global scope; every scope is owned by a
``ScopeForest`` keyed by id, and parents are referenced by id, never by
object.  Nothing is ever removed from a forest.

Symbols are immutable.  The variant set is closed::

    PrimitiveType          int, dec, text, truth
    VariableSymbol         type_id
    FunctionType           argument_ids, return_id
    NativeFunctionSymbol   type_id

Types are symbols too: a variable's ``type_id`` is the id of a
``PrimitiveType`` or ``FunctionType`` symbol that lives in the global scope.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Final, Iterator, Optional, Sequence, Tuple, Union

from odo.errors import RedefinedSymbolError, ScopeStackError

logger = logging.getLogger(__name__)

__all__ = [
    "ScopeId",
    "SymbolId",
    "PrimitiveType",
    "VariableSymbol",
    "FunctionType",
    "NativeFunctionSymbol",
    "SymbolVariant",
    "Symbol",
    "Scope",
    "ScopeForest",
    "INT_TYPE",
    "DEC_TYPE",
    "TEXT_TYPE",
    "TRUTH_TYPE",
    "PRIMITIVE_TYPES",
    "function_type_name",
]

ScopeId = uuid.UUID
SymbolId = uuid.UUID


# ═══════════════════════════════════════════════════════════════════════
#  Symbol variants
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class PrimitiveType:
    pass


@dataclass(frozen=True, slots=True)
class VariableSymbol:
    type_id: SymbolId


@dataclass(frozen=True, slots=True)
class FunctionType:
    """Structural function type; ``return_id`` is ``None`` for no result."""

    argument_ids: Tuple[SymbolId, ...] = ()
    return_id: Optional[SymbolId] = None


@dataclass(frozen=True, slots=True)
class NativeFunctionSymbol:
    type_id: SymbolId


SymbolVariant = Union[PrimitiveType, VariableSymbol, FunctionType, NativeFunctionSymbol]


@dataclass(frozen=True, slots=True)
class Symbol:
    name: str
    variant: SymbolVariant
    id: SymbolId = field(default_factory=uuid.uuid4)

    @property
    def is_type(self) -> bool:
        return isinstance(self.variant, (PrimitiveType, FunctionType))

    @property
    def type_id(self) -> Optional[SymbolId]:
        """Type of the value this symbol denotes, ``None`` for type symbols."""
        if isinstance(self.variant, (VariableSymbol, NativeFunctionSymbol)):
            return self.variant.type_id
        return None

    def __str__(self) -> str:
        return self.name


INT_TYPE: Final = Symbol("int", PrimitiveType())
DEC_TYPE: Final = Symbol("dec", PrimitiveType())
TEXT_TYPE: Final = Symbol("text", PrimitiveType())
TRUTH_TYPE: Final = Symbol("truth", PrimitiveType())

PRIMITIVE_TYPES: Final[Tuple[Symbol, ...]] = (INT_TYPE, DEC_TYPE, TEXT_TYPE, TRUTH_TYPE)


def function_type_name(argument_names: Sequence[str], return_name: Optional[str]) -> str:
    """Structural name of a function type, e.g. ``<int,text:>``."""
    return f"<{','.join(argument_names)}:{return_name or ''}>"


# ═══════════════════════════════════════════════════════════════════════
#  Scopes
# ═══════════════════════════════════════════════════════════════════════

class Scope:
    """One symbol table.  Symbols are keyed by id; names need not be unique
    across scopes but :meth:`insert` rejects a duplicate name in this one."""

    def __init__(self, name: str, parent: Optional[ScopeId] = None) -> None:
        self.id: ScopeId = uuid.uuid4()
        self.name = name
        self.parent = parent
        self.symbols: Dict[SymbolId, Symbol] = {}

    def insert(self, symbol: Symbol, kind: str = "variable") -> Symbol:
        if self.find_local(symbol.name) is not None:
            raise RedefinedSymbolError(symbol.name, kind=kind)
        self.symbols[symbol.id] = symbol
        logger.debug("Declared %s '%s' in scope %s", kind, symbol.name, self.name)
        return symbol

    def find_local(self, name: str) -> Optional[Symbol]:
        for symbol in self.symbols.values():
            if symbol.name == name:
                return symbol
        return None

    def get(self, symbol_id: SymbolId) -> Optional[Symbol]:
        return self.symbols.get(symbol_id)

    def __contains__(self, symbol_id: object) -> bool:
        return symbol_id in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, {len(self.symbols)} symbol(s))"


class ScopeForest:
    """All scopes ever created, keyed by id, rooted at ``global``."""

    def __init__(self) -> None:
        self._scopes: Dict[ScopeId, Scope] = {}
        self.global_scope = self.new_scope("global")
        for primitive in PRIMITIVE_TYPES:
            self.global_scope.insert(primitive, kind="type")

    def new_scope(self, name: str, parent: Optional[ScopeId] = None) -> Scope:
        if parent is not None and parent not in self._scopes:
            raise ScopeStackError(f"parent scope {parent} does not exist")
        scope = Scope(name, parent)
        self._scopes[scope.id] = scope
        return scope

    def __getitem__(self, scope_id: ScopeId) -> Scope:
        try:
            return self._scopes[scope_id]
        except KeyError:
            raise ScopeStackError(f"unknown scope {scope_id}") from None

    def __contains__(self, scope_id: object) -> bool:
        return scope_id in self._scopes

    def __len__(self) -> int:
        return len(self._scopes)

    def chain(self, scope_id: ScopeId) -> Iterator[Scope]:
        """Yield *scope_id*'s scope and then each ancestor up to the root."""
        current: Optional[ScopeId] = scope_id
        while current is not None:
            scope = self[current]
            yield scope
            current = scope.parent

    def lookup(self, scope_id: ScopeId, name: str) -> Optional[Symbol]:
        """Innermost symbol called *name* visible from *scope_id*."""
        for scope in self.chain(scope_id):
            symbol = scope.find_local(name)
            if symbol is not None:
                return symbol
        return None

    def lookup_id(self, scope_id: ScopeId, symbol_id: SymbolId) -> Optional[Symbol]:
        for scope in self.chain(scope_id):
            symbol = scope.get(symbol_id)
            if symbol is not None:
                return symbol
        return None

    def type_symbol(self, type_id: SymbolId) -> Symbol:
        """Type symbols all live in the global scope."""
        symbol = self.global_scope.get(type_id)
        if symbol is None or not symbol.is_type:
            raise ScopeStackError(f"{type_id} is not a known type")
        return symbol
