"""Transition tables."""

import logging
from typing import Iterable, Iterator, List, Set

from tablefsm.core.exceptions import InvalidTableError
from tablefsm.core.transition import (
    NO_REDIRECT,
    CharacterOf,
    ExactString,
    Function,
    NestedTable,
    Transition,
)

logger = logging.getLogger(__name__)


class TransitionTable:
    """Ordered, sentinel-terminated sequence of transitions.

    Rows are visited in the order they were added. Iteration stops at the
    first sentinel row; a table without a sentinel is terminated at the end
    of its rows. Tables are mutable while being authored so that a row can
    reference the table that contains it, but the engine only reads them.
    """

    def __init__(self, rows: Iterable[Transition] = (), name: str | None = None):
        self.name = name
        self._rows: List[Transition] = list(rows)

    def add(self, transition: Transition) -> "TransitionTable":
        self._rows.append(transition)
        return self

    def extend(self, transitions: Iterable[Transition]) -> "TransitionTable":
        self._rows.extend(transitions)
        return self

    @property
    def rows(self) -> List[Transition]:
        """All rows as added, including any sentinel and rows after it."""
        return list(self._rows)

    def __iter__(self) -> Iterator[Transition]:
        for row in self._rows:
            if row.is_sentinel:
                return
            yield row

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def rows_from(self, state: int) -> List[Transition]:
        """Active rows whose source is ``state``, in table order."""
        return [row for row in self if row.current_state == state]

    def states(self) -> Set[int]:
        """Every state mentioned by an active row."""
        found: Set[int] = set()
        for row in self:
            found.add(row.current_state)
            found.add(row.success_state)
            if row.failure_state != NO_REDIRECT:
                found.add(row.failure_state)
        return found

    def validate(self) -> List[str]:
        """Check the table's structure.

        Returns:
            Warnings that do not make the table unusable.

        Raises:
            InvalidTableError: If a row can never be run correctly.
        """
        warnings: List[str] = []
        for index, row in enumerate(self._rows):
            if row.is_sentinel:
                trailing = len(self._rows) - index - 1
                if trailing:
                    warnings.append(f"{trailing} row(s) after the sentinel are unreachable")
                break
            if row.current_state < 0:
                raise InvalidTableError(
                    self.name,
                    f"row {index} has negative source state {row.current_state}",
                    {"row": index, "label": row.label},
                )
            if row.failure_state < NO_REDIRECT:
                raise InvalidTableError(
                    self.name,
                    f"row {index} has invalid failure state {row.failure_state}",
                    {"row": index, "label": row.label},
                )
            problem = _missing_match_data(row)
            if problem:
                raise InvalidTableError(self.name, f"row {index} {problem}", {"row": index, "label": row.label})

        sources = {row.current_state for row in self}
        if self._rows and 0 not in sources:
            warnings.append("no rows leave the initial state 0")

        for message in warnings:
            logger.debug("Table %s: %s", self.name, message)
        return warnings

    def __repr__(self) -> str:
        return f"TransitionTable(name={self.name!r}, rows={len(self)})"


def _missing_match_data(row: Transition) -> str | None:
    match = row.match
    if isinstance(match, ExactString):
        return None if match.literal else "has an empty literal"
    if isinstance(match, CharacterOf):
        return None if match.chars else "has an empty character set"
    if isinstance(match, Function):
        return None if match.recognizer is not None else "has no recognizer"
    if isinstance(match, NestedTable):
        return None if match.table is not None else "has no nested table"
    return "has no match condition"
