"""Execution engine for transition tables.

The engine walks a table starting at state 0. Each pass scans the table in
order for rows leaving the current state and attempts them one at a time
against a private copy of the cursor:

- the first row that fires commits its length to the caller's cursor, moves
  to its success state and starts a new pass;
- a row that does not fire may redirect the current state through its
  failure state, and the scan continues with the following rows;
- a pass in which nothing fires ends the run.

The run succeeds if the last row that fired led to an accept state. A row
leading to a reject state ends the run as failed at once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List

from tablefsm.core.context import ContextIsolation, Snapshottable
from tablefsm.core.cursor import BytesLike, Cursor
from tablefsm.core.exceptions import FunctionError, TableFSMError
from tablefsm.core.table import TransitionTable
from tablefsm.core.transition import (
    NO_MATCH,
    SENTINEL_STATE,
    CharacterOf,
    ExactString,
    Function,
    NestedTable,
    StateType,
    Transition,
)
from tablefsm.observability import TransitionRecord

logger = logging.getLogger(__name__)

TransitionHook = Callable[[TransitionRecord], None]


@dataclass(frozen=True)
class RunResult:
    """Outcome of one run.

    Attributes:
        success: Whether the run ended in an accept state.
        consumed: Bytes consumed by the run's firings, successful or not.
    """

    success: bool
    consumed: int

    def __bool__(self) -> bool:
        return self.success


class TableEngine:
    """Interpreter for transition tables.

    The engine holds configuration only; every ``run`` starts from state 0
    with nothing carried over from earlier runs.
    """

    def __init__(
        self,
        isolation: ContextIsolation = ContextIsolation.SHARED,
        max_transitions: int | None = None,
    ):
        """Initialize the engine.

        Args:
            isolation: Whether failed attempts are rolled back on snapshottable contexts.
            max_transitions: Optional bound on firings per run and per nested sub-run.
                ``None`` runs until the table stops.
        """
        self.isolation = isolation
        self.max_transitions = max_transitions
        self._transition_hooks: List[TransitionHook] = []

    def add_transition_hook(self, hook: TransitionHook) -> None:
        """Register a hook called after every firing, at every depth."""
        self._transition_hooks.append(hook)

    def run(
        self,
        table: TransitionTable,
        cursor: Cursor | BytesLike,
        context: Any = None,
    ) -> RunResult:
        """Run a table against the input.

        Args:
            table: Table to run.
            cursor: Input cursor, advanced by every firing at this level.
                Raw bytes are wrapped in a new cursor.
            context: Caller-owned execution context shared with every
                recognizer, side effect and nested sub-run.

        Returns:
            The run's result.
        """
        return self._run(table, Cursor.wrap(cursor), context, 0)

    def attempt(
        self,
        transition: Transition,
        cursor: Cursor | BytesLike,
        context: Any = None,
    ) -> int:
        """Decide whether a single transition would fire.

        The caller's cursor is never moved.

        Returns:
            Bytes that would be consumed, or ``NO_MATCH``.
        """
        return self._attempt(transition, Cursor.wrap(cursor).copy(), context, 0)

    def _run(self, table: TransitionTable, cursor: Cursor, context: Any, depth: int) -> RunResult:
        state = 0
        consumed = 0
        in_accept = False
        fired = 0

        while state >= 0:
            progressed = False

            for row in table:
                if row.current_state != state:
                    continue

                length = self._attempt(row, cursor.copy(), context, depth)
                if length < 0:
                    if row.failure_state >= 0:
                        logger.debug(
                            "Transition %s failed; redirecting %d -> %d",
                            row.name, state, row.failure_state,
                        )
                        state = row.failure_state
                    continue

                if self.max_transitions is not None and fired >= self.max_transitions:
                    logger.warning(
                        f"Maximum transitions ({self.max_transitions}) exceeded in table "
                        f"'{table.name}' at state {state}; stopping run"
                    )
                    return RunResult(False, consumed)

                if row.side_effect is not None:
                    advanced = cursor.copy()
                    advanced.advance(length)
                    self._call(row.side_effect, _function_name(row.side_effect), row, advanced, context)

                cursor.advance(length)
                consumed += length
                from_state, state = state, row.success_state
                in_accept = row.state_type is StateType.ACCEPT
                fired += 1

                logger.debug(
                    "Fired %s: %d -> %d (%s), consumed %d at depth %d",
                    row.name, from_state, state, row.state_type.value, length, depth,
                )
                if self._transition_hooks:
                    self._notify(TransitionRecord(
                        from_state=from_state,
                        to_state=state,
                        label=row.name,
                        match_kind=row.match_kind,
                        consumed=length,
                        position=cursor.position,
                        depth=depth,
                        state_type=row.state_type,
                    ))

                if row.state_type is StateType.REJECT:
                    logger.debug("Reject state %d reached; run failed after %d bytes", state, consumed)
                    return RunResult(False, consumed)

                progressed = True
                break

            if not progressed:
                state = SENTINEL_STATE

        logger.debug("Run of table %s ended: accept=%s consumed=%d", table.name, in_accept, consumed)
        return RunResult(in_accept, consumed)

    def _attempt(self, row: Transition, cursor: Cursor, context: Any, depth: int) -> int:
        if row.label is not None:
            logger.debug("attempting transition %s", row.label)

        token = None
        snapshotting = (
            self.isolation is ContextIsolation.SNAPSHOT
            and isinstance(context, Snapshottable)
        )
        if snapshotting:
            token = context.snapshot()

        try:
            length = self._evaluate(row, cursor, context, depth)
        except BaseException:
            if snapshotting:
                context.restore(token)
            raise

        if length < 0 and snapshotting:
            context.restore(token)
        return length

    def _evaluate(self, row: Transition, cursor: Cursor, context: Any, depth: int) -> int:
        match = row.match

        if isinstance(match, ExactString):
            if not match.literal:
                return NO_MATCH
            return len(match.literal) if cursor.startswith(match.literal) else NO_MATCH

        if isinstance(match, CharacterOf):
            if not match.chars or cursor.at_end():
                return NO_MATCH
            return 1 if cursor.buffer[cursor.position] in match.chars else NO_MATCH

        if isinstance(match, Function):
            if match.recognizer is None:
                return NO_MATCH
            available = cursor.remaining_length
            result = self._call(match.recognizer, match.display_name, row, cursor, context)
            if result is None:
                return NO_MATCH
            length = int(result)
            if length > available:
                raise FunctionError(
                    f"claimed {length} bytes but only {available} remain",
                    function_name=match.display_name,
                    state=row.current_state,
                )
            return length

        if isinstance(match, NestedTable):
            if match.table is None:
                return NO_MATCH
            result = self._run(match.table, cursor, context, depth + 1)
            return result.consumed if result.success else NO_MATCH

        logger.debug("Transition %s has no usable match condition", row.name)
        return NO_MATCH

    def _call(self, func: Callable, name: str, row: Transition, cursor: Cursor, context: Any) -> Any:
        try:
            return func(cursor, context, row.payload)
        except TableFSMError:
            raise
        except Exception as e:
            raise FunctionError(
                str(e),
                function_name=name,
                state=row.current_state,
                details={"transition": row.name},
            ) from e

    def _notify(self, record: TransitionRecord) -> None:
        for hook in self._transition_hooks:
            hook(record)


def _function_name(func: Callable) -> str:
    return getattr(func, "__name__", repr(func))


_default_engine = TableEngine()


def run_fsm(table: TransitionTable, cursor: Cursor | BytesLike, context: Any = None) -> RunResult:
    """Run ``table`` against ``cursor`` with the default engine."""
    return _default_engine.run(table, cursor, context)


def run_transition(transition: Transition, cursor: Cursor | BytesLike, context: Any = None) -> int:
    """Attempt a single transition with the default engine."""
    return _default_engine.attempt(transition, cursor, context)
