"""Table-driven finite state machine interpreter.

Walks a table of transitions over a byte buffer, matching literal strings,
single characters from a set, recognizer functions or nested tables. Meant
to be embedded in hand-written or generated lexers and parsers.
"""

__version__ = "0.2.0"

# Core components
from .core.context import ContextIsolation, SnapshotContext
from .core.cursor import Cursor
from .core.engine import RunResult, TableEngine, run_fsm, run_transition
from .core.machine import Machine
from .core.table import TransitionTable
from .core.transition import (
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

# Observability
from .observability import RunTrace, TransitionRecord

# Functions
from .functions.registry import FunctionRegistry

# Configuration
from .config import ConfigLoader, TableBuilder, load_machine

__all__ = [
    "__version__",
    # Core
    "run_fsm",
    "run_transition",
    "TableEngine",
    "RunResult",
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
    "Cursor",
    "Machine",
    "ContextIsolation",
    "SnapshotContext",
    # Observability
    "TransitionRecord",
    "RunTrace",
    # Functions
    "FunctionRegistry",
    # Config
    "ConfigLoader",
    "TableBuilder",
    "load_machine",
]
