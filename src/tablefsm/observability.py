"""Transition records for tracing table runs.

Example:
    ```python
    trace = RunTrace()
    engine = TableEngine()
    engine.add_transition_hook(trace)
    engine.run(table, b"abc")
    for record in trace.records:
        print(record.from_state, record.to_state, record.consumed)
    ```
"""

from dataclasses import asdict, dataclass, field
from typing import Any, List

from tablefsm.core.transition import MatchKind, StateType


@dataclass
class TransitionRecord:
    """Record of a single fired transition.

    Attributes:
        from_state: State the row fired from
        to_state: The row's success state
        label: The row's diagnostic name
        match_kind: Kind of match that fired
        consumed: Bytes consumed by the firing
        position: Cursor position after the firing, at the firing level
        depth: Nesting depth (0 for the outermost run)
        state_type: Type of the target state
    """

    from_state: int
    to_state: int
    label: str
    match_kind: MatchKind | None
    consumed: int
    position: int
    depth: int = 0
    state_type: StateType = StateType.NORMAL

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["match_kind"] = self.match_kind.value if self.match_kind else None
        data["state_type"] = self.state_type.value
        return data


@dataclass
class RunTrace:
    """Transition hook that keeps every record it receives."""

    records: List[TransitionRecord] = field(default_factory=list)

    def __call__(self, record: TransitionRecord) -> None:
        self.records.append(record)

    def at_depth(self, depth: int) -> List[TransitionRecord]:
        return [record for record in self.records if record.depth == depth]

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)
