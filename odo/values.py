"""odo/values.py – runtime values and the value table.

A ``Value`` is an id plus an immutable payload:

* ``Nothing``        – what statements produce
* ``Primitive``      – int, dec, text or truth
* ``NativeFunction`` – a host callable taking a list of ``Value``s

Values live in a ``ValueTable`` keyed by id.  Names never point at values
directly; the interpreter's binding map (symbol id → value id) does, so
rebinding a variable never touches the value it previously denoted.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Final, Iterable, Iterator, Optional, Sequence, Union

from odo.ast import LiteralKind
from odo.errors import InternalError

logger = logging.getLogger(__name__)

__all__ = [
    "ValueId",
    "Nothing",
    "Primitive",
    "NativeFunction",
    "Payload",
    "Value",
    "NOTHING",
    "ValueTable",
]

ValueId = uuid.UUID
NativeCallable = Callable[[Sequence["Value"]], Any]


# ═══════════════════════════════════════════════════════════════════════
#  Payloads
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Nothing:
    def render(self) -> str:
        return "nothing"


@dataclass(frozen=True, slots=True)
class Primitive:
    kind: LiteralKind
    value: Union[int, float, str, bool]

    def render(self) -> str:
        if self.kind is LiteralKind.TRUTH:
            return f"truth {'true' if self.value else 'false'}"
        if self.kind is LiteralKind.TEXT:
            escaped = str(self.value).replace("\\", "\\\\").replace('"', '\\"')
            return f'text "{escaped}"'
        return f"{self.kind.value} {self.value}"


@dataclass(frozen=True, slots=True)
class NativeFunction:
    """Opaque host callable.  ``return_kind`` is ``None`` for no result."""

    name: str
    function: NativeCallable = field(compare=False)
    return_kind: Optional[LiteralKind] = None

    def render(self) -> str:
        return f"native <{self.name}>"


Payload = Union[Nothing, Primitive, NativeFunction]


@dataclass(frozen=True, slots=True)
class Value:
    payload: Payload
    id: ValueId = field(default_factory=uuid.uuid4)

    # -- constructors ---------------------------------------------------

    @classmethod
    def integer(cls, value: int) -> "Value":
        return cls(Primitive(LiteralKind.INTEGER, value))

    @classmethod
    def decimal(cls, value: float) -> "Value":
        return cls(Primitive(LiteralKind.DECIMAL, value))

    @classmethod
    def text(cls, value: str) -> "Value":
        return cls(Primitive(LiteralKind.TEXT, value))

    @classmethod
    def truth(cls, value: bool) -> "Value":
        return cls(Primitive(LiteralKind.TRUTH, value))

    @classmethod
    def native(
        cls,
        name: str,
        function: NativeCallable,
        return_kind: Optional[LiteralKind] = None,
    ) -> "Value":
        return cls(NativeFunction(name, function, return_kind))

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """Wrap a plain Python result; ``None`` becomes a fresh nothing."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls(Nothing())
        # bool first: bool is a subclass of int
        if isinstance(obj, bool):
            return cls.truth(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.decimal(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        raise InternalError(f"cannot convert {type(obj).__name__} to a value")

    # -- accessors ------------------------------------------------------

    @property
    def is_nothing(self) -> bool:
        return isinstance(self.payload, Nothing)

    @property
    def kind(self) -> Optional[LiteralKind]:
        """Primitive kind, ``None`` for nothing and functions."""
        if isinstance(self.payload, Primitive):
            return self.payload.kind
        return None

    @property
    def python_value(self) -> Any:
        if isinstance(self.payload, Primitive):
            return self.payload.value
        if isinstance(self.payload, NativeFunction):
            return self.payload.function
        return None

    def render(self) -> str:
        return self.payload.render()

    def __str__(self) -> str:
        return self.render()


NOTHING: Final = Value(Nothing())


# ═══════════════════════════════════════════════════════════════════════
#  Value table
# ═══════════════════════════════════════════════════════════════════════

class ValueTable:
    """All live values keyed by id.

    Nothing is removed implicitly; :meth:`collect` drops values that are no
    longer reachable from the caller's live set.
    """

    def __init__(self) -> None:
        self._values: Dict[ValueId, Value] = {}

    def insert(self, value: Value) -> ValueId:
        """Store *value*, overwriting any value with the same id."""
        self._values[value.id] = value
        return value.id

    def get(self, value_id: ValueId) -> Optional[Value]:
        return self._values.get(value_id)

    def __getitem__(self, value_id: ValueId) -> Value:
        return self._values[value_id]

    def __contains__(self, value_id: object) -> bool:
        return value_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values.values())

    def collect(self, live: Iterable[ValueId]) -> int:
        """Drop every value whose id is not in *live*; return how many."""
        keep = set(live)
        dead = [value_id for value_id in self._values if value_id not in keep]
        for value_id in dead:
            del self._values[value_id]
        logger.debug("Collected %d value(s), %d remain", len(dead), len(self._values))
        return len(dead)
