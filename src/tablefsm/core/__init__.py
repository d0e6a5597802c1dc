"""Core table FSM components."""

from tablefsm.core.context import ContextIsolation, SnapshotContext, Snapshottable
from tablefsm.core.cursor import Cursor
from tablefsm.core.engine import RunResult, TableEngine, run_fsm, run_transition
from tablefsm.core.table import TransitionTable
from tablefsm.core.transition import (
    NO_MATCH,
    NO_REDIRECT,
    SENTINEL_STATE,
    CharacterOf,
    ExactString,
    Function,
    MatchKind,
    NestedTable,
    StateType,
    Transition,
)

__all__ = [
    # Engine
    "TableEngine",
    "RunResult",
    "run_fsm",
    "run_transition",
    # Table
    "TransitionTable",
    "Transition",
    "MatchKind",
    "StateType",
    "ExactString",
    "CharacterOf",
    "Function",
    "NestedTable",
    "SENTINEL_STATE",
    "NO_REDIRECT",
    "NO_MATCH",
    # Input and context
    "Cursor",
    "ContextIsolation",
    "Snapshottable",
    "SnapshotContext",
]
