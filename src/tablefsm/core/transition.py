"""Transition records and the closed set of match kinds.

A transition is one row of a table: from ``current_state``, if ``match``
succeeds against the input, move to ``success_state``. The ``match`` field
holds exactly one of four variants:

- ``ExactString``: the input must start with a literal byte string.
- ``CharacterOf``: the first input byte must be one of a set of bytes.
- ``Function``: a caller-supplied recognizer decides how many bytes match.
- ``NestedTable``: another table is run on the input as a sub-machine.

Recognizers and side effects share one calling convention::

    recognizer(cursor, context, payload) -> int   # bytes matched, or < 0
    side_effect(cursor, context, payload) -> None

``cursor`` is always a private copy, ``context`` is the caller's execution
context shared by reference across the whole run, and ``payload`` is the
transition's opaque ``payload`` value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

from tablefsm.core.cursor import Cursor

if TYPE_CHECKING:
    from tablefsm.core.table import TransitionTable

SENTINEL_STATE = -1
NO_REDIRECT = -1
NO_MATCH = -1

Recognizer = Callable[[Cursor, Any, Any], int]
SideEffect = Callable[[Cursor, Any, Any], None]


class MatchKind(Enum):
    """How a transition decides whether it fires."""
    EXACT_STRING = "exact"
    SINGLE_CHARACTER_OF = "char_of"
    FUNCTION = "function"
    NESTED_TABLE = "table"


class StateType(Enum):
    """Type of the state a transition leads to."""
    NORMAL = "normal"
    ACCEPT = "accept"
    REJECT = "reject"


def _as_bytes(value: Any, field_name: str) -> bytes | None:
    if value is None or isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{field_name} must be bytes-like, got {type(value).__name__}")


@dataclass(frozen=True)
class ExactString:
    literal: bytes | None
    kind = MatchKind.EXACT_STRING

    def __post_init__(self) -> None:
        object.__setattr__(self, "literal", _as_bytes(self.literal, "literal"))


@dataclass(frozen=True)
class CharacterOf:
    chars: bytes | None
    kind = MatchKind.SINGLE_CHARACTER_OF

    def __post_init__(self) -> None:
        object.__setattr__(self, "chars", _as_bytes(self.chars, "chars"))


@dataclass(frozen=True, eq=False)
class Function:
    recognizer: Recognizer | None
    name: str | None = None
    kind = MatchKind.FUNCTION

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return getattr(self.recognizer, "__name__", repr(self.recognizer))


@dataclass(frozen=True, eq=False, repr=False)
class NestedTable:
    """Reference to another table; never copied, may be self-referential."""
    table: "TransitionTable | None"
    kind = MatchKind.NESTED_TABLE

    def __repr__(self) -> str:
        name = getattr(self.table, "name", None) or hex(id(self.table))
        return f"NestedTable(table={name})"


Match = Union[ExactString, CharacterOf, Function, NestedTable]


@dataclass
class Transition:
    """One row of a transition table.

    Attributes:
        current_state: State this row applies from (``SENTINEL_STATE`` ends a table).
        match: Match condition, one of the four match variants.
        success_state: State to move to when the row fires.
        failure_state: State to move to when the match fails (``NO_REDIRECT`` keeps the state).
        state_type: Type of the ``success_state`` target.
        side_effect: Called only when the row fires, with the advanced cursor.
        payload: Opaque value passed to the recognizer and side effect.
        label: Diagnostic name.
    """

    current_state: int
    match: Match | None = None
    success_state: int = SENTINEL_STATE
    failure_state: int = NO_REDIRECT
    state_type: StateType = StateType.NORMAL
    side_effect: SideEffect | None = None
    payload: Any = None
    label: str | None = None

    @property
    def match_kind(self) -> MatchKind | None:
        return getattr(self.match, "kind", None)

    @property
    def is_sentinel(self) -> bool:
        return self.current_state == SENTINEL_STATE

    @property
    def name(self) -> str:
        """Label, or a generated ``from->to`` name."""
        if self.label:
            return self.label
        return f"{self.current_state}->{self.success_state}"

    @classmethod
    def sentinel(cls) -> "Transition":
        return cls(SENTINEL_STATE, label="sentinel")

    @classmethod
    def exact(cls, state: int, literal: bytes, success: int, **kwargs: Any) -> "Transition":
        return cls(state, ExactString(literal), success, **kwargs)

    @classmethod
    def char_of(cls, state: int, chars: bytes, success: int, **kwargs: Any) -> "Transition":
        return cls(state, CharacterOf(chars), success, **kwargs)

    @classmethod
    def function(
        cls,
        state: int,
        recognizer: Recognizer,
        success: int,
        **kwargs: Any,
    ) -> "Transition":
        return cls(state, Function(recognizer), success, **kwargs)

    @classmethod
    def nested(
        cls,
        state: int,
        table: "TransitionTable",
        success: int,
        **kwargs: Any,
    ) -> "Transition":
        return cls(state, NestedTable(table), success, **kwargs)
