"""Configuration schema for table descriptions using Pydantic.

A machine description is a set of named tables plus the name of the entry
table. Rows refer to functions by registry name and to nested tables by
table name, so tables may reference themselves or each other::

    name: numbers
    main: number_list
    tables:
      - name: number_list
        transitions:
          - {state: 0, match: table, table: number, success: 1, type: accept}
          - {state: 1, match: exact, string: ",", success: 0}
      - name: number
        transitions:
          - {state: 0, match: function, function: digits, success: 1,
             type: accept, side_effect: emit_token, payload: number}
"""

import codecs
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator

from tablefsm.core.transition import NO_REDIRECT, MatchKind, StateType


class TransitionConfig(BaseModel):
    """Configuration for one transition row."""

    state: int = Field(ge=0)
    match: MatchKind
    string: str | None = None
    function: str | None = None
    table: str | None = None
    side_effect: str | None = None
    payload: Any = None
    success: int
    failure: int = Field(default=NO_REDIRECT, ge=NO_REDIRECT)
    type: StateType = StateType.NORMAL
    label: str | None = None

    @model_validator(mode="after")
    def validate_match_fields(self) -> "TransitionConfig":
        """Check that the fields required by the match kind are present."""
        if self.match in (MatchKind.EXACT_STRING, MatchKind.SINGLE_CHARACTER_OF):
            if not self.string:
                raise ValueError(f"'{self.match.value}' transitions require a non-empty 'string'")
        elif self.match == MatchKind.FUNCTION and not self.function:
            raise ValueError("'function' transitions require a 'function' name")
        elif self.match == MatchKind.NESTED_TABLE and not self.table:
            raise ValueError("'table' transitions require a 'table' name")
        return self


class TableConfig(BaseModel):
    """Configuration for a transition table."""

    name: str
    description: str | None = None
    transitions: List[TransitionConfig] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class MachineConfig(BaseModel):
    """Complete machine description."""

    name: str
    version: str = "1.0.0"
    description: str | None = None
    encoding: str = "utf-8"
    main: str | None = None
    tables: List[TableConfig] = Field(min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the encoding is known to Python."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{v}'") from e
        return v

    @model_validator(mode="after")
    def validate_tables(self) -> "MachineConfig":
        """Validate table names and nested table references."""
        names = [table.name for table in self.tables]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate table names: {', '.join(duplicates)}")

        if self.main is not None and self.main not in names:
            raise ValueError(f"Main table '{self.main}' not found")

        for table in self.tables:
            for transition in table.transitions:
                if transition.table is not None and transition.table not in names:
                    raise ValueError(
                        f"Table '{table.name}' references unknown table '{transition.table}'"
                    )
        return self

    @property
    def entry_table(self) -> str:
        """Name of the table a machine run starts with."""
        return self.main if self.main is not None else self.tables[0].name

    def get_table(self, name: str) -> TableConfig | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None
