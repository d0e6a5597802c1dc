"""Named collections of tables with an entry point."""

from typing import Any, Dict

from tablefsm.core.cursor import BytesLike, Cursor
from tablefsm.core.engine import RunResult, TableEngine, run_fsm
from tablefsm.core.exceptions import NotFoundError
from tablefsm.core.table import TransitionTable


class Machine:
    """A set of named tables, one of which is the entry table.

    Attributes:
        name: Machine name.
        tables: Tables by name.
        main: Name of the entry table.
    """

    def __init__(self, name: str, tables: Dict[str, TransitionTable], main: str):
        if main not in tables:
            raise NotFoundError(
                f"Entry table '{main}' not found",
                context={"machine": name, "tables": list(tables)},
            )
        self.name = name
        self.tables = tables
        self.main = main

    @property
    def entry(self) -> TransitionTable:
        return self.tables[self.main]

    def table(self, name: str) -> TransitionTable:
        if name not in self.tables:
            raise NotFoundError(
                f"Table '{name}' not found",
                context={"machine": self.name, "tables": list(self.tables)},
            )
        return self.tables[name]

    def run(
        self,
        data: Cursor | BytesLike,
        context: Any = None,
        table: str | None = None,
        engine: TableEngine | None = None,
    ) -> RunResult:
        """Run the entry table, or the named ``table``, on ``data``."""
        target = self.table(table) if table is not None else self.entry
        if engine is None:
            return run_fsm(target, data, context)
        return engine.run(target, data, context)

    def __repr__(self) -> str:
        return f"Machine(name={self.name!r}, main={self.main!r}, tables={sorted(self.tables)})"
