"""Machine builder for constructing tables from descriptions.

Building happens in two phases: every table is created empty first, then
rows are added. Nested-table rows therefore hold references to the final
table objects, which lets tables refer to themselves and to each other.
"""

import logging
from typing import Dict

from tablefsm.config.schema import MachineConfig, TransitionConfig
from tablefsm.core.machine import Machine
from tablefsm.core.table import TransitionTable
from tablefsm.core.transition import (
    CharacterOf,
    ExactString,
    Function,
    Match,
    MatchKind,
    NestedTable,
    Transition,
)
from tablefsm.functions.registry import FunctionRegistry

logger = logging.getLogger(__name__)


class TableBuilder:
    """Build executable machines from configuration."""

    def __init__(self, registry: FunctionRegistry | None = None):
        """Initialize the TableBuilder.

        Args:
            registry: Registry used to resolve function names. Defaults to a
                registry holding the built-in library.
        """
        self.registry = registry if registry is not None else FunctionRegistry()

    def build(self, config: MachineConfig) -> Machine:
        """Build a machine from configuration.

        Raises:
            FunctionNotFoundError: If a function name cannot be resolved.
            InvalidTableError: If a built table is structurally invalid.
        """
        tables: Dict[str, TransitionTable] = {
            table_config.name: TransitionTable(name=table_config.name)
            for table_config in config.tables
        }

        for table_config in config.tables:
            table = tables[table_config.name]
            for transition_config in table_config.transitions:
                table.add(self._build_transition(transition_config, tables, config.encoding))
            for warning in table.validate():
                logger.warning(f"Table '{table.name}' in machine '{config.name}': {warning}")

        logger.debug(f"Built machine '{config.name}' with {len(tables)} table(s)")
        return Machine(config.name, tables, config.entry_table)

    def _build_transition(
        self,
        config: TransitionConfig,
        tables: Dict[str, TransitionTable],
        encoding: str,
    ) -> Transition:
        match = self._build_match(config, tables, encoding)
        side_effect = self.registry.get(config.side_effect) if config.side_effect else None
        return Transition(
            current_state=config.state,
            match=match,
            success_state=config.success,
            failure_state=config.failure,
            state_type=config.type,
            side_effect=side_effect,
            payload=config.payload,
            label=config.label,
        )

    def _build_match(
        self,
        config: TransitionConfig,
        tables: Dict[str, TransitionTable],
        encoding: str,
    ) -> Match:
        if config.match == MatchKind.EXACT_STRING:
            return ExactString(config.string.encode(encoding))
        if config.match == MatchKind.SINGLE_CHARACTER_OF:
            return CharacterOf(config.string.encode(encoding))
        if config.match == MatchKind.FUNCTION:
            return Function(self.registry.get(config.function), name=config.function)
        return NestedTable(tables[config.table])
