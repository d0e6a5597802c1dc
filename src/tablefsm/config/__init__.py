"""Table descriptions: schema, loading and building."""

from pathlib import Path
from typing import Union

from tablefsm.config.builder import TableBuilder
from tablefsm.config.loader import ConfigLoader
from tablefsm.config.schema import MachineConfig, TableConfig, TransitionConfig
from tablefsm.core.machine import Machine
from tablefsm.functions.registry import FunctionRegistry


def load_machine(file_path: Union[str, Path], registry: FunctionRegistry | None = None) -> Machine:
    """Load a description file and build it into a machine."""
    config = ConfigLoader().load_from_file(file_path)
    return TableBuilder(registry).build(config)


__all__ = [
    "ConfigLoader",
    "TableBuilder",
    "MachineConfig",
    "TableConfig",
    "TransitionConfig",
    "load_machine",
]
